"""
API I/O models.

Pydantic schemas that define the request and response contract of the REST
API, separate from the SQLModel database entities.
"""
