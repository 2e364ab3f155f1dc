"""Tests for environment-driven settings."""

import pytest

from app import create_app
from core.config import Settings, settings
from services.notices import DismissalScope


def test_notices_default_to_empty(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("NOTICES", raising=False)

    assert Settings(_env_file=None).notices == []


def test_notices_accept_comma_separated_declarations(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("NOTICES", "theme:update_banner, theme:welcome_tour:user,")

    assert Settings(_env_file=None).notices == [
        "theme:update_banner",
        "theme:welcome_tour:user",
    ]


def test_single_notice_declaration_is_accepted(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("NOTICES", "theme:update_banner")

    assert Settings(_env_file=None).notices == ["theme:update_banner"]


def test_create_app_registers_configured_notices(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(settings, "notices", ["theme:update_banner", "plugin:tour:user"])

    application = create_app()
    registry = application.state.notices

    assert len(registry) == 2
    assert registry.get("plugin", "tour").scope is DismissalScope.USER
    assert registry.get("theme", "update_banner").scope is DismissalScope.GLOBAL
