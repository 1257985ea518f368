"""
Business services.

Each service wraps one database session and enforces the rules of its
resource; routers obtain them through the providers in ``deps``.
"""
