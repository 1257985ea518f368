"""Unit tests for the database layer.

Repositories run against in-memory SQLite so every query is executed for
real without an external database service.
"""
