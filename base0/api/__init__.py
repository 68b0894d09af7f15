"""
HTTP API package.

FastAPI app factory, dependency container and routers.
"""
