"""Tests for the shared admin-ajax dismiss endpoint."""

from __future__ import annotations

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from core import NonceManager
from core.config import settings
from models import User
from support import auth_headers, create_user

ADMIN_AJAX_URL = "/api/v1/admin-ajax"
BANNER_URL = "/api/v1/notices/theme/update_banner"
TOUR_URL = "/api/v1/notices/theme/welcome_tour"


def make_nonce(user: User, notice_id: str, session_id: str = "session-1") -> str:
    manager = NonceManager(
        settings.secret_key,
        user_id=user.id,
        session_id=session_id,
        lifetime_seconds=settings.nonce_lifetime_seconds,
    )
    return manager.create(f"dismiss_notice_{notice_id}")


def dismiss_payload(user: User, notice_id: str) -> dict[str, str]:
    return {
        "action": "dismiss_notice",
        "id": notice_id,
        "nonce": make_nonce(user, notice_id),
    }


async def is_dismissed(async_client: AsyncClient, user: User, url: str) -> bool:
    response = await async_client.get(url, headers=auth_headers(user))
    assert response.status_code == 200
    return response.json()["dismissed"]


@pytest.mark.asyncio
async def test_admin_ajax_requires_auth(async_client: AsyncClient) -> None:
    response = await async_client.post(
        ADMIN_AJAX_URL,
        data={"action": "dismiss_notice", "id": "update_banner", "nonce": "x"},
    )
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_admin_ajax_rejects_invalid_token(async_client: AsyncClient) -> None:
    response = await async_client.post(
        ADMIN_AJAX_URL,
        data={"action": "dismiss_notice"},
        headers={"Authorization": "Bearer not-a-token"},
    )
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_global_dismissal_scenario(
    async_client: AsyncClient,
    db_session: AsyncSession,
) -> None:
    alice = await create_user(db_session, "alice")
    headers = auth_headers(alice)

    assert await is_dismissed(async_client, alice, BANNER_URL) is False

    first = await async_client.post(
        ADMIN_AJAX_URL, data=dismiss_payload(alice, "update_banner"), headers=headers
    )
    assert first.status_code == 204
    assert first.content == b""
    assert await is_dismissed(async_client, alice, BANNER_URL) is True

    second = await async_client.post(
        ADMIN_AJAX_URL, data=dismiss_payload(alice, "update_banner"), headers=headers
    )
    assert second.status_code == 204
    assert await is_dismissed(async_client, alice, BANNER_URL) is True


@pytest.mark.asyncio
async def test_global_dismissal_applies_to_every_user(
    async_client: AsyncClient,
    db_session: AsyncSession,
) -> None:
    alice = await create_user(db_session, "alice")
    bob = await create_user(db_session, "bob")

    response = await async_client.post(
        ADMIN_AJAX_URL,
        data=dismiss_payload(alice, "update_banner"),
        headers=auth_headers(alice),
    )
    assert response.status_code == 204

    assert await is_dismissed(async_client, bob, BANNER_URL) is True


@pytest.mark.asyncio
async def test_user_dismissal_is_isolated(
    async_client: AsyncClient,
    db_session: AsyncSession,
) -> None:
    alice = await create_user(db_session, "alice")
    bob = await create_user(db_session, "bob")

    response = await async_client.post(
        ADMIN_AJAX_URL,
        data=dismiss_payload(alice, "welcome_tour"),
        headers=auth_headers(alice),
    )
    assert response.status_code == 204

    assert await is_dismissed(async_client, alice, TOUR_URL) is True
    assert await is_dismissed(async_client, bob, TOUR_URL) is False
    assert await is_dismissed(async_client, alice, BANNER_URL) is False


@pytest.mark.asyncio
async def test_unknown_action_returns_zero(
    async_client: AsyncClient,
    db_session: AsyncSession,
) -> None:
    alice = await create_user(db_session, "alice")

    response = await async_client.post(
        ADMIN_AJAX_URL,
        data={"action": "heartbeat", "id": "update_banner"},
        headers=auth_headers(alice),
    )

    assert response.status_code == 400
    assert response.text == "0"


@pytest.mark.asyncio
async def test_foreign_notice_id_is_ignored(
    async_client: AsyncClient,
    db_session: AsyncSession,
) -> None:
    alice = await create_user(db_session, "alice")

    response = await async_client.post(
        ADMIN_AJAX_URL,
        data=dismiss_payload(alice, "someone_elses_notice"),
        headers=auth_headers(alice),
    )

    assert response.status_code == 204
    assert await is_dismissed(async_client, alice, BANNER_URL) is False
    assert await is_dismissed(async_client, alice, TOUR_URL) is False


@pytest.mark.asyncio
@pytest.mark.parametrize("nonce", [None, "", "0000000000"])
async def test_invalid_nonce_is_forbidden(
    async_client: AsyncClient,
    db_session: AsyncSession,
    nonce: str | None,
) -> None:
    alice = await create_user(db_session, "alice")
    payload = {"action": "dismiss_notice", "id": "update_banner"}
    if nonce is not None:
        payload["nonce"] = nonce

    response = await async_client.post(ADMIN_AJAX_URL, data=payload, headers=auth_headers(alice))

    assert response.status_code == 403
    assert response.text == "-1"
    assert await is_dismissed(async_client, alice, BANNER_URL) is False


@pytest.mark.asyncio
async def test_nonce_is_bound_to_session(
    async_client: AsyncClient,
    db_session: AsyncSession,
) -> None:
    alice = await create_user(db_session, "alice")

    response = await async_client.post(
        ADMIN_AJAX_URL,
        data=dismiss_payload(alice, "update_banner"),
        headers=auth_headers(alice, session_id="session-2"),
    )

    assert response.status_code == 403
    assert await is_dismissed(async_client, alice, BANNER_URL) is False


@pytest.mark.asyncio
async def test_nonce_from_another_user_is_forbidden(
    async_client: AsyncClient,
    db_session: AsyncSession,
) -> None:
    alice = await create_user(db_session, "alice")
    bob = await create_user(db_session, "bob")

    response = await async_client.post(
        ADMIN_AJAX_URL,
        data=dismiss_payload(alice, "update_banner"),
        headers=auth_headers(bob),
    )

    assert response.status_code == 403
    assert await is_dismissed(async_client, bob, BANNER_URL) is False


@pytest.mark.asyncio
async def test_cookie_session_is_accepted(
    async_client: AsyncClient,
    db_session: AsyncSession,
) -> None:
    alice = await create_user(db_session, "alice")
    token = auth_headers(alice)["Authorization"].removeprefix("Bearer ")

    response = await async_client.post(
        ADMIN_AJAX_URL,
        data=dismiss_payload(alice, "update_banner"),
        headers={"Cookie": f"access_token={token}"},
    )

    assert response.status_code == 204
    assert await is_dismissed(async_client, alice, BANNER_URL) is True
