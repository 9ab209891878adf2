# Middleware package init
"""
Naviga8 Backend - Middleware Package
======================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (order matters!):
    Request → [Request ID] → [Logging] → [Security Headers] → [CORS] → Route Handler

    1. Request ID: Generate correlation ID for logging and error bodies
    2. Logging: Log request details with the generated request ID
    3. Security Headers: Added on the way out to every response
    4. CORS: Applied by FastAPI's CORSMiddleware (handles preflight)
"""
