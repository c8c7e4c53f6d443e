"""
API routes module.

FastAPI routers, dependency providers and the application factory.
"""
