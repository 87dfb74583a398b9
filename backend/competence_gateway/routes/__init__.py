# Routes package init
"""
Competence Gateway - API Routes Package
=======================================

What:  HTTP route handlers for every resource plus the health probe.

Route Inventory:
    - crud.py:       router factory and JSON body parsing shared by all resources
    - catalog.py:    /customer /skill /skillGroup /office /assignment /role
                     /attribute /user /file
    - connectors.py: /userToSkillConnector /skillToSkillGroupConnector
                     /roleToAttributeConnector (with by-foreign-key routes)
    - health.py:     GET /health

Routes stay thin: parse the request, call a controller, shape the response.
"""
