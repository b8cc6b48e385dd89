"""Services Layer — orchestrates core logic around backend IO.

Invariants:
    - Services own the ordering of IO and in-memory state changes
    - No HTTP concerns (request/response objects) below this layer
"""
