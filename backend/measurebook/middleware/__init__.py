# Middleware package init
"""
Measurebook Backend - Middleware Package
==========================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain:
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    - Request ID first, so the logging middleware can read it from the ContextVar
    - CORS is FastAPI's CORSMiddleware (answers preflight OPTIONS requests)
"""
