# Routes package init
"""
Measurebook Backend - API Routes Package
==========================================

What:  HTTP route handlers that accept requests and return responses.

Route Inventory:
    - projects.py: /api/projects CRUD + /api/projects/{id}/save
    - health.py:   GET / (liveness text), GET /health (store status)

Routes stay thin: extract the body, call ProjectService, return the result.
Business rules live in services/.
"""
