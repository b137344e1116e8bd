# Routes package init
"""
IdeaBoard Backend — API Routes Package
========================================

What:  HTTP route handlers that accept requests and return responses.

Route Inventory:
    - ideas.py:   GET  /api/ideas                   (list, most-voted first)
                  POST /api/ideas                   (create, multipart)
                  POST /api/ideas/{id}/vote         (vote)
                  POST /api/ideas/{id}/notes        (add note)
    - files.py:   GET  /uploads/{file_name}         (attachment download)
    - pages.py:   GET  /                            (browser client)
    - health.py:  GET  /health                      (service health check)

Routes stay thin: extract input, call a service, return its result.
"""
