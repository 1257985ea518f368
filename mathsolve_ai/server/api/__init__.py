"""
API routers.

One module per resource, mounted under ``/api`` by ``server.main``.
"""
