"""Dismissal state for a single admin notice."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Callable

from .errors import NonceVerificationError
from .keys import build_nonce_action, build_script_handle, build_storage_key, sanitize_key
from .schemas import DismissalScope
from .script import SCRIPT_VERSION, ScriptRegistry, render_dismiss_script
from .storage import DismissalStorage

DISMISS_ACTION = "dismiss_notice"
NonceVerifier = Callable[[str | None, str], int]
logger = logging.getLogger(__name__)


def coerce_scope(scope: DismissalScope | str) -> DismissalScope:
    if isinstance(scope, DismissalScope):
        return scope
    for candidate in DismissalScope:
        if scope == candidate.value:
            return candidate
    logger.debug(
        "Unknown dismissal scope, using global",
        extra={"requested_scope": scope},
    )
    return DismissalScope.GLOBAL


class NoticeDismissal:
    """Tracks whether one notice is dismissed and handles dismiss requests.

    ``notice_id`` and ``prefix`` are sanitised to lowercase letters, digits
    and underscores; the flag is stored under ``"{prefix}_{notice_id}"``.
    A scope other than ``"user"`` or ``"global"`` falls back to global.
    """

    def __init__(
        self,
        notice_id: str,
        prefix: str,
        scope: DismissalScope | str = DismissalScope.GLOBAL,
    ) -> None:
        self.id = sanitize_key(notice_id)
        if not self.id:
            raise ValueError("notice_id must contain at least one key character")
        self.prefix = sanitize_key(prefix)
        self.scope = coerce_scope(scope)

    def __repr__(self) -> str:
        return f"NoticeDismissal(id={self.id!r}, prefix={self.prefix!r}, scope={self.scope.value!r})"

    @property
    def storage_key(self) -> str:
        return build_storage_key(self.prefix, self.id)

    @property
    def script_handle(self) -> str:
        return build_script_handle(self.id)

    @property
    def nonce_action(self) -> str:
        return build_nonce_action(DISMISS_ACTION, self.id)

    async def is_dismissed(self, storage: DismissalStorage) -> bool:
        if self.scope is DismissalScope.USER:
            return await storage.get_user_flag(self.storage_key)
        return await storage.get_global_flag(self.storage_key)

    def render_client_script(self, *, nonce: str, endpoint_url: str) -> str:
        return render_dismiss_script(
            notice_id=self.id,
            nonce=nonce,
            endpoint_url=endpoint_url,
            action=DISMISS_ACTION,
        )

    def register_client_script(
        self,
        scripts: ScriptRegistry,
        *,
        nonce: str,
        endpoint_url: str,
    ) -> str:
        """Attach the dismiss script to this notice's handle and return the handle."""
        handle = self.script_handle
        scripts.register(handle, SCRIPT_VERSION)
        scripts.add_inline_script(
            handle,
            self.render_client_script(nonce=nonce, endpoint_url=endpoint_url),
        )
        return handle

    async def handle_dismiss_request(
        self,
        form: Mapping[str, Any],
        storage: DismissalStorage,
        verify_nonce: NonceVerifier,
    ) -> bool:
        """Dismiss the notice when ``form`` is a valid request addressed to it.

        Requests for another action or another notice are ignored and return
        False. A bad nonce raises ``NonceVerificationError``.
        """
        if form.get("action") != DISMISS_ACTION:
            return False
        if form.get("id") != self.id:
            return False

        nonce = form.get("nonce")
        if not isinstance(nonce, str) or not verify_nonce(nonce, self.nonce_action):
            logger.warning(
                "Rejected notice dismissal with invalid nonce",
                extra={"notice_id": self.id, "prefix": self.prefix},
            )
            raise NonceVerificationError(self.nonce_action)

        await self._mark_dismissed(storage)
        return True

    async def _mark_dismissed(self, storage: DismissalStorage) -> None:
        if self.scope is DismissalScope.USER:
            await storage.set_user_flag(self.storage_key)
        else:
            await storage.set_global_flag(self.storage_key)
        logger.info(
            "Notice dismissed",
            extra={"notice_id": self.id, "prefix": self.prefix, "scope": self.scope.value},
        )
