"""Storage key helpers for dismissible notices."""

from __future__ import annotations

import re

_WHITESPACE_RUN = re.compile(r"\s+")
_DISALLOWED_KEY_CHARACTERS = re.compile(r"[^a-z0-9_]")


def sanitize_key(value: str) -> str:
    """Reduce ``value`` to lowercase letters, digits and underscores.

    Whitespace runs collapse into a single underscore and every other
    character outside the allowed set is dropped, so ``"My Notice!"`` and
    ``"my  notice"`` both become ``"my_notice"``.
    """
    lowered = _WHITESPACE_RUN.sub("_", value.strip().lower())
    return _DISALLOWED_KEY_CHARACTERS.sub("", lowered)


def build_storage_key(prefix: str, notice_id: str) -> str:
    return f"{prefix}_{notice_id}"


def build_script_handle(notice_id: str) -> str:
    return f"dismiss_notice_{notice_id}"


def build_nonce_action(action: str, notice_id: str) -> str:
    return f"{action}_{notice_id}"


def build_container_id(notice_id: str) -> str:
    return f"dismissible-notice-{notice_id}"
