# Middleware package init
"""
DevFlow Backend — Middleware Package
======================================

Middleware Chain (request direction):
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    Request ID runs first so the access log line and any error envelope
    logged during the request carry the same ID.
"""
