# Middleware package init
"""
Competence Gateway - Middleware Package
=======================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain:
    Request → [Rate Limit] → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    Responses travel the chain in reverse, so the request ID header is set
    on every response and the access log sees the final status code.
"""
