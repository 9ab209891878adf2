# Services package init
"""
Naviga8 Backend - Services Layer
==================================

Service Inventory:
    - RouteService: create / list / delete saved routes
    - IdentityService: anonymous user id issuer
"""
