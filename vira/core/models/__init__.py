"""
Pydantic models shared by the API and services.

- io/: request and response schemas
"""
