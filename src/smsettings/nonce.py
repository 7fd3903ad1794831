"""Anti-forgery tokens for settings submissions.

Tokens are truncated HMAC-SHA256 digests of the action name, the user and a
time tick.  A tick lasts half of :attr:`NonceManager.lifetime` and a token is
accepted during the tick it was issued in and the following one.
"""

from __future__ import annotations

import logging
import os
import time
from collections.abc import Callable
from typing import Protocol

from cryptography.hazmat.primitives import constant_time, hashes, hmac

logger = logging.getLogger(__name__)

SETTINGS_ACTION = "sm-settings"
TOKEN_LENGTH = 10


class NonceVerifier(Protocol):
    def verify(self, token: str | None, action: str) -> bool:
        ...


class NonceManager:
    def __init__(
        self,
        secret: bytes | str | None = None,
        *,
        user: str = "",
        lifetime: int = 86400,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if secret is None:
            secret = os.urandom(32)
        self._secret = secret.encode() if isinstance(secret, str) else secret
        self.user = user
        self.lifetime = lifetime
        self._clock = clock

    def tick(self) -> int:
        return int(self._clock() // (self.lifetime / 2))

    def _token(self, action: str, tick: int) -> str:
        mac = hmac.HMAC(self._secret, hashes.SHA256())
        mac.update(f"{tick}|{action}|{self.user}".encode())
        return mac.finalize().hex()[-12:-2]

    def create(self, action: str = SETTINGS_ACTION) -> str:
        return self._token(action, self.tick())

    def check(self, token: str | None, action: str = SETTINGS_ACTION) -> int:
        """Return ``1`` or ``2`` for the tick *token* matches, ``0`` if invalid."""
        if not token or len(token) != TOKEN_LENGTH:
            return 0
        current = self.tick()
        for age, tick in enumerate((current, current - 1), start=1):
            if constant_time.bytes_eq(token.encode(), self._token(action, tick).encode()):
                return age
        logger.warning("nonce verification failed for action %s", action)
        return 0

    def verify(self, token: str | None, action: str = SETTINGS_ACTION) -> bool:
        return self.check(token, action) > 0


__all__ = ["SETTINGS_ACTION", "NonceVerifier", "NonceManager"]
