"""
JWT creation and verification.

Tokens are HS256-signed JWTs carrying ``sub`` (user id), ``iat`` and
``exp``.  The secret and the clock are handed in at construction; the
process-wide instances are built once from ``config`` and served to
routes through ``get_token_issuer`` / ``get_token_verifier``.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable

import jwt

from auth.errors import ExpiredTokenError, InvalidTokenError
from config.settings import config

Clock = Callable[[], float]

_REQUIRED_CLAIMS = ["sub", "iat", "exp"]


@dataclass(frozen=True)
class TokenPayload:
    subject_id: str
    issued_at: int
    expires_at: int


class TokenIssuer:
    """Signs short-lived identity tokens."""

    def __init__(
        self,
        secret: str,
        expiry_seconds: int = 600,
        algorithm: str = "HS256",
        clock: Clock = time.time,
    ) -> None:
        if not secret:
            raise ValueError("Token secret must not be empty")
        self._secret = secret
        self._expiry_seconds = expiry_seconds
        self._algorithm = algorithm
        self._clock = clock

    def issue(self, subject_id: str) -> str:
        """Create a signed token for ``subject_id``."""
        now = int(self._clock())
        payload = {
            "sub": str(subject_id),
            "iat": now,
            "exp": now + self._expiry_seconds,
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)


class TokenVerifier:
    """
    Checks signature and expiry of a token.

    Expiry is judged against the injected clock rather than PyJWT's own
    ``time.time()`` call, so tests can pin the current time.
    """

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        clock: Clock = time.time,
    ) -> None:
        if not secret:
            raise ValueError("Token secret must not be empty")
        self._secret = secret
        self._algorithm = algorithm
        self._clock = clock

    def decode(self, token: str) -> TokenPayload:
        """
        Return the payload of a valid token.

        Raises ``InvalidTokenError`` on a bad signature or malformed payload
        and ``ExpiredTokenError`` once ``exp`` has passed.
        """
        try:
            claims = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={
                    "verify_exp": False,
                    "verify_iat": False,
                    "require": _REQUIRED_CLAIMS,
                },
            )
        except jwt.InvalidTokenError as exc:
            raise InvalidTokenError() from exc

        try:
            payload = TokenPayload(
                subject_id=str(claims["sub"]),
                issued_at=int(claims["iat"]),
                expires_at=int(claims["exp"]),
            )
        except (TypeError, ValueError) as exc:
            raise InvalidTokenError() from exc

        if payload.expires_at <= self._clock():
            raise ExpiredTokenError()
        return payload

    def verify(self, token: str) -> str:
        """Verify ``token`` and return its subject id."""
        return self.decode(token).subject_id


_issuer = TokenIssuer(
    config.jwt_secret,
    expiry_seconds=config.jwt_expiry_seconds,
    algorithm=config.jwt_algorithm,
)
_verifier = TokenVerifier(config.jwt_secret, algorithm=config.jwt_algorithm)


def get_token_issuer() -> TokenIssuer:
    return _issuer


def get_token_verifier() -> TokenVerifier:
    return _verifier
