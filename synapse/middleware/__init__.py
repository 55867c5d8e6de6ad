# Middleware package init
"""
Synapse API — Middleware Package
==================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (order matters!):
    Request → [Rate Limit] → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    1. Rate Limit first: abusive clients are rejected before any work
    2. Request ID: correlation ID for logs, error bodies and the response header
    3. Logging: one access line per request, tagged with the request ID and
       the authenticated user (when the route resolved one)

    Responses travel back through the chain in reverse order.
"""
