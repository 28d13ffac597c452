"""Product Likes Package — concurrent like/unlike counter for catalogue products.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)

Design Decisions:
    - Empty __init__.py: explicit imports only, no star exports
"""
