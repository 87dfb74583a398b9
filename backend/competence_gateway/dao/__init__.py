# DAO package init
"""
Competence Gateway - Data Access Layer
======================================

What:  Everything that talks to the downstream competence API.
How:   One shared DownstreamClient (connection pool, retries, circuit breaker)
       used by one ResourceDAO per resource name. Status codes returned by
       the API are translated into values or gateway exceptions by the
       functions in responses.py.

Module Inventory:
    - circuit_breaker.py: CLOSED / OPEN / HALF_OPEN guard for the API
    - client.py:          DownstreamClient and the process-wide instance
    - responses.py:       parse_post / parse_get / parse_get_many / parse_put / parse_delete
    - resource.py:        ResourceDAO (create, get_by_id, get_many, update, delete)
"""
