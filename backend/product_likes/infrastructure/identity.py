"""Identity Verification — turns a bearer JWT into the caller's opaque user id.

Invariants:
    - The `sub` claim is the user id; it is trusted as-is once the signature checks out
    - Every verification failure raises UnauthenticatedError (never returns None)
    - Token contents are never logged

Design Decisions:
    - python-jose for decoding: signature, expiry and audience checks in one call
    - Audience check only when an audience is configured (identity providers differ)
"""

import logging

from jose import jwt, ExpiredSignatureError, JWTError

from product_likes.core.domain_types import UserId
from product_likes.core.errors import UnauthenticatedError

logger = logging.getLogger(__name__)

_BEARER_PREFIX = "bearer "


def extract_bearer_token(authorization: str | None) -> str | None:
    """Return the token from an Authorization header, or None if the header is absent.

    A header that is present but not a well-formed bearer credential raises,
    so a broken client is never treated as anonymous.
    """
    if authorization is None or not authorization.strip():
        return None
    if not authorization.lower().startswith(_BEARER_PREFIX):
        raise UnauthenticatedError("unsupported authorization scheme")
    token = authorization[len(_BEARER_PREFIX):].strip()
    if not token:
        raise UnauthenticatedError("empty bearer token")
    return token


class TokenVerifier:
    """Verifies bearer tokens issued by the identity provider."""

    def __init__(
        self, secret: str, algorithm: str = "HS256", audience: str | None = None,
    ):
        self.secret = secret
        self.algorithm = algorithm
        self.audience = audience

    def verify(self, token: str) -> UserId:
        try:
            payload = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                audience=self.audience,
                options={"verify_aud": self.audience is not None},
            )
        except ExpiredSignatureError:
            logger.info("Rejected expired token")
            raise UnauthenticatedError("token expired")
        except JWTError as e:
            logger.info(f"Rejected invalid token: {type(e).__name__}")
            raise UnauthenticatedError("invalid token")

        subject = payload.get("sub")
        if not isinstance(subject, str) or not subject.strip():
            raise UnauthenticatedError("token has no subject")
        return UserId(subject)
