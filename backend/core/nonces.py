"""Anti-forgery nonces bound to a user session and an action name.

A nonce lifetime is split into two ticks. A nonce created during tick ``n``
verifies during ticks ``n`` and ``n + 1``, so its effective lifetime lies
between half and all of ``lifetime_seconds``.
"""

from __future__ import annotations

import hashlib
import hmac
import math
import time
from typing import Callable

NONCE_LENGTH = 10
Clock = Callable[[], float]


class NonceManager:
    """Create and verify nonces for a single authenticated session."""

    def __init__(
        self,
        secret: str,
        *,
        user_id: str,
        session_id: str = "",
        lifetime_seconds: int = 86_400,
        clock: Clock = time.time,
    ) -> None:
        if lifetime_seconds < 2:
            raise ValueError("lifetime_seconds must be at least 2")
        self._secret = secret.encode("utf-8")
        self.user_id = user_id
        self.session_id = session_id
        self.lifetime_seconds = lifetime_seconds
        self._clock = clock

    def tick(self) -> int:
        return math.ceil(self._clock() / (self.lifetime_seconds / 2))

    def _digest(self, tick: int, action: str) -> str:
        message = f"{tick}|{action}|{self.user_id}|{self.session_id}"
        digest = hmac.new(self._secret, message.encode("utf-8"), hashlib.sha256).hexdigest()
        return digest[-(NONCE_LENGTH + 2) : -2]

    def create(self, action: str) -> str:
        return self._digest(self.tick(), action)

    def verify(self, nonce: str | None, action: str) -> int:
        """Return 1 for a current-tick nonce, 2 for a previous-tick one, else 0."""
        if not nonce:
            return 0
        candidate = nonce.encode("utf-8")
        current_tick = self.tick()
        if hmac.compare_digest(candidate, self._digest(current_tick, action).encode("ascii")):
            return 1
        if hmac.compare_digest(candidate, self._digest(current_tick - 1, action).encode("ascii")):
            return 2
        return 0
