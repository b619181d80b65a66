"""
Service layer.

Services own all access to the database for their record type, so the
API handlers never touch a connection directly.
"""
