"""Core Layer — pure domain logic, no IO, no async, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - Read-path functions are pure and deterministic given `now`

Design Decisions:
    - Functional core separated from imperative shell: backends and routes
      live outside core/ and call into it
"""
