"""Services Layer — LikeStore, LikeQueryIndex and the LikeService facade.

Invariants:
    - Only LikeStore writes like_count / product_likes / last_like_activity_at
    - Every public operation opens its own session (no request-scoped write sessions)

Design Decisions:
    - One file per component for locality (ADR: no god objects)
"""
