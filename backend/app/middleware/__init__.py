# Middleware package init
"""
Car Store Backend — Middleware Package
========================================

Middleware Chain:
    Request → [Request ID] → [Access Log] → [GZip] → [CORS] → Route Handler

    Request ID runs first so the access log line and every log line written
    while handling the request share the same ID.
"""
