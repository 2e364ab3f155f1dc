"""Client-side dismiss script rendering and per-request script registry."""

from __future__ import annotations

import html
import json
from dataclasses import dataclass, field
from string import Template
from urllib.parse import urlsplit

from .keys import build_container_id

DISMISS_BUTTON_CLASS = "notice-dismiss"
SCRIPT_VERSION = "1.0.3"
ALLOWED_URL_SCHEMES = frozenset({"http", "https"})

_SCRIPT_ESCAPES = {
    ord("<"): "\\u003C",
    ord(">"): "\\u003E",
    ord("&"): "\\u0026",
    0x2028: "\\u2028",
    0x2029: "\\u2029",
}

# The observer is a one-shot latch: it disconnects as soon as the click
# handler is attached so the handler is never bound twice.
_DISMISS_SCRIPT = Template(
    """(function () {
    var noticeId = $notice_id;
    var containerId = $container_id;
    var buttonClass = $button_class;
    var endpointUrl = $endpoint_url;
    var nonce = $nonce;
    var action = $action;

    function attach(button) {
        button.addEventListener('click', function () {
            var body = new URLSearchParams();
            body.append('action', action);
            body.append('id', noticeId);
            body.append('nonce', nonce);
            fetch(endpointUrl, {
                method: 'POST',
                credentials: 'same-origin',
                headers: {'Content-Type': 'application/x-www-form-urlencoded'},
                body: body.toString()
            });
        });
    }

    var existing = document.querySelector('#' + containerId + ' .' + buttonClass);
    if (existing) {
        attach(existing);
        return;
    }

    var Observer = window.MutationObserver || window.WebKitMutationObserver;
    var observer = new Observer(function (mutations) {
        for (var i = 0; i < mutations.length; i++) {
            var record = mutations[i];
            if (!record.target || record.target.id !== containerId) {
                continue;
            }
            for (var j = 0; j < record.addedNodes.length; j++) {
                var node = record.addedNodes[j];
                if (node.classList && node.classList.contains(buttonClass)) {
                    attach(node);
                    observer.disconnect();
                    return;
                }
            }
        }
    });
    observer.observe(document, {subtree: true, childList: true});
})();
"""
)


def escape_script_literal(value: str) -> str:
    """Encode ``value`` as a JavaScript string literal safe inside ``<script>``."""
    return json.dumps(value, ensure_ascii=False).translate(_SCRIPT_ESCAPES)


def validate_endpoint_url(endpoint_url: str) -> str:
    normalized = endpoint_url.strip()
    if not normalized:
        raise ValueError("endpoint_url must not be empty")
    if "\\" in normalized:
        raise ValueError("endpoint_url must not contain backslashes")
    parts = urlsplit(normalized)
    if parts.scheme:
        if parts.scheme.lower() not in ALLOWED_URL_SCHEMES or not parts.netloc:
            raise ValueError("endpoint_url must be an http(s) URL")
    elif not normalized.startswith("/") or normalized[1:2] in ("/", "\\"):
        raise ValueError("endpoint_url must be an absolute path or http(s) URL")
    return normalized


def render_dismiss_script(
    *,
    notice_id: str,
    nonce: str,
    endpoint_url: str,
    action: str = "dismiss_notice",
) -> str:
    return _DISMISS_SCRIPT.substitute(
        notice_id=escape_script_literal(notice_id),
        container_id=escape_script_literal(build_container_id(notice_id)),
        button_class=escape_script_literal(DISMISS_BUTTON_CLASS),
        endpoint_url=escape_script_literal(validate_endpoint_url(endpoint_url)),
        nonce=escape_script_literal(nonce),
        action=escape_script_literal(action),
    )


@dataclass
class RegisteredScript:
    handle: str
    version: str
    inline: list[str] = field(default_factory=list)


class ScriptRegistry:
    """Collects inline scripts for one rendered page."""

    def __init__(self) -> None:
        self._scripts: dict[str, RegisteredScript] = {}

    def __contains__(self, handle: object) -> bool:
        return handle in self._scripts

    def register(self, handle: str, version: str = SCRIPT_VERSION) -> None:
        if handle not in self._scripts:
            self._scripts[handle] = RegisteredScript(handle=handle, version=version)

    def add_inline_script(self, handle: str, source: str) -> None:
        script = self._scripts.get(handle)
        if script is None:
            raise KeyError(f"Script handle {handle!r} is not registered")
        script.inline.append(source)

    def inline_script(self, handle: str) -> str:
        script = self._scripts.get(handle)
        if script is None:
            raise KeyError(f"Script handle {handle!r} is not registered")
        return "\n".join(script.inline)

    def render(self) -> str:
        tags = []
        for script in self._scripts.values():
            if not script.inline:
                continue
            tags.append(
                f'<script id="{html.escape(script.handle, quote=True)}-js-after" '
                f'data-version="{html.escape(script.version, quote=True)}">\n'
                f"{self.inline_script(script.handle)}</script>"
            )
        return "\n".join(tags)
