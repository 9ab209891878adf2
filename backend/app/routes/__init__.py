# Routes package init
"""
Naviga8 Backend - API Routes Package
======================================

Route Inventory:
    - saved_routes.py:  POST   /save-route
                        GET    /routes?userId=
                        DELETE /delete-route/{id}?userId=
    - client_config.py: GET    /api/google-key
                        GET    /api/user-id
    - health.py:        GET    /health
    - pages.py:         GET    /   and   GET /saved-routes.html

Handlers stay thin: they unpack the request and delegate to services.
"""
