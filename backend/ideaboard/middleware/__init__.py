# Middleware package init
"""
IdeaBoard Backend — Middleware Package
========================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (order matters!):
    Request → [Request ID] → [Access Log] → [Write Throttle] → [GZip] → [CORS] → Route Handler

    - Request ID first: every response, throttled ones included, carries X-Request-ID
    - Access Log: names the idea-board action (create-idea, vote, add-note, ...)
    - Write Throttle: per-IP limit on POSTs under /api/ideas only
"""
