# Controllers package init
"""
Competence Gateway - Controllers
================================

What:  Validation and shaping of inbound payloads before they reach the DAO.
How:   A ResourceController owns a template (the fields the downstream API
       accepts, with defaults) and the list of fields that must be present.
       Payloads are merged into the template; anything else is dropped.

Controller Inventory:
    - base.py:       ResourceController (create, get, list, update, delete)
    - catalog.py:    customer, skill, skillGroup, office, assignment, role, attribute
    - users.py:      user (updatable)
    - files.py:      file metadata records
    - connectors.py: userToSkill, skillToSkillGroup and roleToAttribute connectors
"""
