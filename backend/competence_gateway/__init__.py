"""
Competence Gateway - Application Package
========================================

What: Backend-for-frontend that fronts the competence API (customers, skills,
      users, offices, assignments, files and their connectors).
How:  Every resource follows the same layered chain:

    ┌─────────────────────────────────────┐
    │        Routes (HTTP surface)        │  ← parse body, pick controller
    ├─────────────────────────────────────┤
    │   Controllers (validate & shape)    │  ← presence checks, templates
    ├─────────────────────────────────────┤
    │      DAO (downstream HTTP API)      │  ← request, status translation
    └─────────────────────────────────────┘

Persistence is owned by the downstream API; this package keeps no state
besides the shared HTTP connection pool and the circuit breaker.
"""

__version__ = "1.0.0"
