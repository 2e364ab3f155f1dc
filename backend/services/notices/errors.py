"""Notice dismissal errors."""

from __future__ import annotations


class NonceVerificationError(PermissionError):
    """Raised when a dismiss request carries a missing or invalid nonce."""

    def __init__(self, nonce_action: str) -> None:
        super().__init__(f"Nonce verification failed for {nonce_action}")
        self.nonce_action = nonce_action
