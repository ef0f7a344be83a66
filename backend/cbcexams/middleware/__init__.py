# Middleware package init
"""
CBC Exams Backend: Middleware Package
=======================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (order matters!):
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    1. Request ID: Generate correlation ID for logging and error payloads
    2. Logging: Log request details with the generated request ID
    3. GZip / CORS: Starlette's stock middleware

    Responses pass back through the chain in reverse, which is where the
    request ID header and the duration are added.
"""
