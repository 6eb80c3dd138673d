"""Service layer for version routing.

Services hold the routing rules and keep routes thin and focused on HTTP
handling.

Layer hierarchy:
    Routes (HTTP) -> Services (Routing Logic) -> Rule table (files on disk)

Services should NOT:
- Know about HTTP request/response details
- Re-read rule sources per request (load once, pass the table in)
"""
