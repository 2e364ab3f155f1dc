"""Shared FastAPI dependencies."""

from __future__ import annotations

from collections.abc import AsyncIterator
from dataclasses import dataclass

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from core import NonceManager, decode_token, settings
from core.security import ACCESS_TOKEN_TYPE
from db import get_session
from models import User
from services.notices import ActionHooks, NoticeRegistry, SqlDismissalStorage

ACCESS_COOKIE = "access_token"


@dataclass(frozen=True)
class AuthContext:
    user: User
    session_id: str


async def get_db() -> AsyncIterator[AsyncSession]:
    async for session in get_session():
        yield session


def _extract_token(request: Request) -> str | None:
    cookie_token = request.cookies.get(ACCESS_COOKIE)
    if cookie_token:
        return cookie_token
    authorization = request.headers.get("authorization")
    if not authorization:
        return None
    scheme, _, value = authorization.partition(" ")
    if scheme.lower() != "bearer":
        return None
    return value.strip() or None


async def get_auth_context(
    request: Request,
    session: AsyncSession = Depends(get_db),
) -> AuthContext:
    credentials_error = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Not authenticated",
    )
    token = _extract_token(request)
    if token is None:
        raise credentials_error
    try:
        payload = decode_token(token)
    except ValueError as exc:
        raise credentials_error from exc

    subject = payload.get("sub")
    if payload.get("type") != ACCESS_TOKEN_TYPE or not isinstance(subject, str):
        raise credentials_error

    user = await session.get(User, subject)
    if user is None:
        raise credentials_error
    session_id = payload.get("sid")
    return AuthContext(user=user, session_id=session_id if isinstance(session_id, str) else "")


async def get_current_user(auth: AuthContext = Depends(get_auth_context)) -> User:
    return auth.user


def get_nonce_manager(auth: AuthContext = Depends(get_auth_context)) -> NonceManager:
    return NonceManager(
        settings.secret_key,
        user_id=auth.user.id,
        session_id=auth.session_id,
        lifetime_seconds=settings.nonce_lifetime_seconds,
    )


def get_dismissal_storage(
    session: AsyncSession = Depends(get_db),
    auth: AuthContext = Depends(get_auth_context),
) -> SqlDismissalStorage:
    return SqlDismissalStorage(session, auth.user.id)


def get_action_hooks(request: Request) -> ActionHooks:
    return request.app.state.action_hooks


def get_notice_registry(request: Request) -> NoticeRegistry:
    return request.app.state.notices
