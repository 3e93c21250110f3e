"""
API I/O models.

Pydantic schemas defining the request and response contract of the REST API.
All of them serialise with camelCase keys.
"""
