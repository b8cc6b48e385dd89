"""Pydantic Schemas — request/response validation for API endpoints.

Invariants:
    - Schemas validate at system boundary (user input, API responses)
    - Converted to/from core Post values in the routes, never passed deeper

Design Decisions:
    - Separate from core.post: schemas are API contracts, Post is the domain value
"""
