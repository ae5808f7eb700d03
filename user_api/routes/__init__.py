"""
User Service - API Routes Package
=================================

Route Inventory:
    - pages.py:   GET  /              (landing page)
    - health.py:  GET  /health        (database liveness)
    - users.py:   GET  /api/users     (list users)
                  POST /api/users     (create user)

Routes stay thin: read the request, call a service, return a schema.
"""
