"""Dismissible admin notice services."""

from .dismissal import DISMISS_ACTION, NoticeDismissal, NonceVerifier, coerce_scope
from .errors import NonceVerificationError
from .hooks import ActionHooks, NoticeRegistry, parse_notice_declaration
from .keys import build_storage_key, sanitize_key
from .schemas import DismissalScope, NoticeStatusResponse
from .script import ScriptRegistry, escape_script_literal, render_dismiss_script
from .storage import DismissalStorage, SqlDismissalStorage, is_truthy_value

__all__ = [
    "DISMISS_ACTION",
    "NoticeDismissal",
    "NonceVerifier",
    "coerce_scope",
    "NonceVerificationError",
    "ActionHooks",
    "NoticeRegistry",
    "parse_notice_declaration",
    "build_storage_key",
    "sanitize_key",
    "DismissalScope",
    "NoticeStatusResponse",
    "ScriptRegistry",
    "escape_script_literal",
    "render_dismiss_script",
    "DismissalStorage",
    "SqlDismissalStorage",
    "is_truthy_value",
]
