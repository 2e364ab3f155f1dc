"""Action hooks and the registry of configured notices."""

from __future__ import annotations

from collections.abc import Awaitable, Iterator
from typing import Any, Callable

from .dismissal import DISMISS_ACTION, NoticeDismissal
from .schemas import DismissalScope

ActionHandler = Callable[..., Awaitable[Any]]


class ActionHooks:
    """Named actions, each dispatched to its handlers in registration order."""

    def __init__(self) -> None:
        self._handlers: dict[str, list[ActionHandler]] = {}

    def add_action(self, action: str, handler: ActionHandler) -> None:
        self._handlers.setdefault(action, []).append(handler)

    def has_action(self, action: str | None) -> bool:
        if action is None:
            return False
        return bool(self._handlers.get(action))

    async def do_action(self, action: str, *args: Any) -> list[Any]:
        results = []
        for handler in list(self._handlers.get(action, ())):
            results.append(await handler(*args))
        return results


class NoticeRegistry:
    """Notices known to the application, keyed by ``(prefix, id)``."""

    def __init__(self, hooks: ActionHooks) -> None:
        self.hooks = hooks
        self._notices: dict[tuple[str, str], NoticeDismissal] = {}

    def __iter__(self) -> Iterator[NoticeDismissal]:
        return iter(self._notices.values())

    def __len__(self) -> int:
        return len(self._notices)

    def register(self, notice: NoticeDismissal) -> NoticeDismissal:
        key = (notice.prefix, notice.id)
        if key in self._notices:
            raise ValueError(f"Notice {notice.storage_key!r} is already registered")
        self._notices[key] = notice
        self.hooks.add_action(DISMISS_ACTION, notice.handle_dismiss_request)
        return notice

    def get(self, prefix: str, notice_id: str) -> NoticeDismissal | None:
        return self._notices.get((prefix, notice_id))


def parse_notice_declaration(declaration: str) -> NoticeDismissal:
    """Build a notice from a ``"prefix:id"`` or ``"prefix:id:scope"`` string."""
    parts = [part.strip() for part in declaration.split(":")]
    if len(parts) not in (2, 3) or not all(parts):
        raise ValueError(f"Invalid notice declaration: {declaration!r}")
    prefix, notice_id = parts[0], parts[1]
    scope = parts[2] if len(parts) == 3 else DismissalScope.GLOBAL
    return NoticeDismissal(notice_id, prefix, scope)
