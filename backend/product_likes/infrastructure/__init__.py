"""Infrastructure Layer — database sessions, logging, identity verification.

Invariants:
    - Infrastructure never imports from services/
    - All database failures mapped to core/errors.py types before leaving this layer

Design Decisions:
    - Thin wrappers over SQLAlchemy and python-jose (ADR: single responsibility)
"""
