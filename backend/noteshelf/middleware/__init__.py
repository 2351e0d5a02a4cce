"""
NoteShelf Backend — Middleware Package
=======================================

Middleware Chain (order matters):
    Request → [Request ID] → [Logging] → [CORS] → Route Handler

    1. Request ID: correlation id stored in a ContextVar, echoed in X-Request-ID
    2. Logging: one access-log line per request with status and duration
    3. CORS: FastAPI's CORSMiddleware (handles preflight)
"""
