"""JWT session token creation and verification.

Uses PyJWT with a symmetric HMAC algorithm (HS256 by default).
Tokens carry the userId and email claims plus issue and expiry timestamps.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt

from aadhaar_auth.core.exceptions import InvalidTokenError

DEFAULT_ALGORITHM = "HS256"
DEFAULT_TTL = timedelta(hours=1)
REQUIRED_CLAIMS = ("userId", "email")


def issue_token(
    claims: Dict[str, Any],
    secret: str,
    ttl: timedelta = DEFAULT_TTL,
    algorithm: str = DEFAULT_ALGORITHM,
    now: Optional[datetime] = None,
) -> str:
    """Create a signed token for the given claims.

    Args:
        claims: Identity claims to embed.
        secret: Server-held signing secret.
        ttl: Validity window measured from issuance.
        algorithm: HMAC algorithm name.
        now: Issuance time; defaults to the current UTC time.

    Returns:
        Encoded JWT string.
    """
    issued_at = now or datetime.now(timezone.utc)
    payload = {
        **claims,
        "iat": issued_at,
        "exp": issued_at + ttl,
    }
    return jwt.encode(payload, secret, algorithm=algorithm)


def verify_token(token: str, secret: str, algorithm: str = DEFAULT_ALGORITHM) -> Dict[str, Any]:
    """Verify a token's signature and expiry and return its claims.

    Raises:
        InvalidTokenError: if the signature does not match, the token is
            malformed, it has expired, or identity claims are missing.
    """
    try:
        payload = jwt.decode(
            token,
            secret,
            algorithms=[algorithm],
            options={"require": ["exp"]},
        )
    except jwt.ExpiredSignatureError as exc:
        raise InvalidTokenError("Token expired") from exc
    except jwt.InvalidTokenError as exc:
        raise InvalidTokenError(f"Token rejected: {exc}") from exc

    missing = [claim for claim in REQUIRED_CLAIMS if claim not in payload]
    if missing:
        raise InvalidTokenError(f"Token missing claims: {', '.join(missing)}")

    return payload


class TokenService:
    """Issues and verifies session tokens with a fixed secret and lifetime."""

    def __init__(self, secret: str, ttl: timedelta = DEFAULT_TTL, algorithm: str = DEFAULT_ALGORITHM):
        self._secret = secret
        self.ttl = ttl
        self.algorithm = algorithm

    def issue(self, user_id: str, email: str) -> str:
        return issue_token(
            {"userId": user_id, "email": email},
            self._secret,
            ttl=self.ttl,
            algorithm=self.algorithm,
        )

    def verify(self, token: str) -> Dict[str, Any]:
        return verify_token(token, self._secret, algorithm=self.algorithm)
