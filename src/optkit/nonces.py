"""Time-windowed form nonces."""

from __future__ import annotations

import hashlib
import hmac
import logging
import math
import os
import time
from typing import Callable

from .fragments import nonce_field_html

logger = logging.getLogger("optpages.nonces")

DEFAULT_LIFETIME = 86400


def _env_lifetime() -> int:
    raw = os.getenv("OPTPAGES_NONCE_LIFETIME", "").strip()
    try:
        value = int(raw) if raw else DEFAULT_LIFETIME
    except ValueError:
        logger.warning("nonce_lifetime_invalid value=%s", raw)
        return DEFAULT_LIFETIME
    return value if value > 1 else DEFAULT_LIFETIME


class NonceGenerator:
    """HMAC nonces valid for one lifetime, split into two half-lifetime ticks."""

    def __init__(
        self,
        secret: str | None = None,
        lifetime: int | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        secret = secret or os.getenv("OPTPAGES_NONCE_SECRET", "").strip()
        if not secret:
            logger.warning("nonce_secret_missing using per-process secret")
            secret = os.urandom(32).hex()
        self._secret = secret.encode("utf-8")
        self._lifetime = lifetime if lifetime and lifetime > 1 else _env_lifetime()
        self._clock = clock

    def tick(self) -> int:
        return int(math.ceil(self._clock() / (self._lifetime / 2)))

    def _hash(self, tick: int, action: str, user_id: str) -> str:
        message = f"{tick}|{action}|{user_id}".encode("utf-8")
        digest = hmac.new(self._secret, message, hashlib.sha256).hexdigest()
        return digest[-12:-2]

    def create(self, action: str, user_id: str = "0") -> str:
        return self._hash(self.tick(), str(action), str(user_id))

    def verify(self, nonce: str, action: str, user_id: str = "0") -> int:
        """Return 1 for the current window, 2 for the previous one, 0 when invalid."""
        if not isinstance(nonce, str) or not nonce:
            return 0
        tick = self.tick()
        if hmac.compare_digest(nonce, self._hash(tick, str(action), str(user_id))):
            return 1
        if hmac.compare_digest(nonce, self._hash(tick - 1, str(action), str(user_id))):
            return 2
        return 0

    def field(self, action: str, name: str = "_wpnonce") -> str:
        return nonce_field_html(name, self.create(action))
