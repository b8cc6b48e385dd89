"""Infrastructure Layer — storage backends and cross-cutting concerns.

Invariants:
    - Backends depend on core/ types; core/ never imports from here
    - All IO failures mapped to PersistenceError before leaving this layer
"""
