# Middleware package init
"""
MedTrack Backend: Middleware Package
======================================

Middleware Chain (request direction):
    Request → [Rate Limit] → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    Rate limiting runs first so rejected requests cost nothing further.
    Logging runs inside Request ID so every access line carries the ID.
"""
