from __future__ import annotations

import logging

import jwt

from pos_sync.application.exceptions import AuthError
from pos_sync.application.ports.clock import Clock, SystemClock

logger = logging.getLogger(__name__)


class BearerToken:
    """Holds the register's API access token.

    JWTs are inspected locally (signature is not verified, the server does
    that) so an expired token fails fast without a round-trip. Opaque tokens
    are passed through untouched.
    """

    def __init__(self, token: str = "", clock: Clock | None = None) -> None:
        self._token = token
        self._clock = clock or SystemClock()

    @property
    def value(self) -> str:
        return self._token

    def update(self, token: str) -> None:
        self._token = token
        logger.info("Access token replaced")

    def is_expired(self) -> bool:
        try:
            claims = jwt.decode(
                self._token,
                options={"verify_signature": False, "verify_exp": False},
            )
        except jwt.DecodeError:
            return False
        exp = claims.get("exp")
        if exp is None:
            return False
        return float(exp) <= self._clock.now().timestamp()

    def auth_headers(self) -> dict[str, str]:
        if not self._token:
            raise AuthError("no access token configured")
        if self.is_expired():
            raise AuthError("access token expired")
        return {"Authorization": f"Bearer {self._token}"}
