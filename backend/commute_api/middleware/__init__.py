# Middleware package init
"""
Commute Match Backend — Middleware Package
===========================================

Middleware Chain (last added runs first):
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    1. Request ID: assign or propagate X-Request-ID
    2. Logging: log method, path, status and duration with that ID
"""
