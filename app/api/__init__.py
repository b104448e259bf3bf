"""
API Layer - FastAPI routes and middleware.

Routers live in app.api.routes; exception types and handlers in
app.api.middleware.
"""
