"""Shared helpers for backend tests."""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from core import create_access_token
from models import User


async def create_user(session: AsyncSession, username: str) -> User:
    user = User(username=username)
    session.add(user)
    await session.commit()
    await session.refresh(user)
    return user


def auth_headers(user: User, session_id: str = "session-1") -> dict[str, str]:
    token = create_access_token(user.id, session_id=session_id)
    return {"Authorization": f"Bearer {token}"}


class InMemoryDismissalStorage:
    """Dismissal storage over plain dicts, shareable between users."""

    def __init__(
        self,
        user_id: str,
        *,
        user_meta: dict[tuple[str, str], bool] | None = None,
        options: dict[str, bool] | None = None,
    ) -> None:
        self.user_id = user_id
        self.user_meta = user_meta if user_meta is not None else {}
        self.options = options if options is not None else {}
        self.writes = 0

    def for_user(self, user_id: str) -> "InMemoryDismissalStorage":
        return InMemoryDismissalStorage(user_id, user_meta=self.user_meta, options=self.options)

    async def get_user_flag(self, key: str) -> bool:
        return self.user_meta.get((self.user_id, key), False)

    async def set_user_flag(self, key: str) -> None:
        self.writes += 1
        self.user_meta[(self.user_id, key)] = True

    async def get_global_flag(self, key: str) -> bool:
        return self.options.get(key, False)

    async def set_global_flag(self, key: str) -> None:
        self.writes += 1
        self.options[key] = True



class InMemoryRedis:
    def __init__(self) -> None:
        self.data: dict[str, int] = {}
        self.expirations: dict[str, int] = {}

    async def incr(self, key: str) -> int:
        value = self.data.get(key, 0) + 1
        self.data[key] = value
        return value

    async def expire(self, key: str, ttl: int) -> None:
        self.expirations[key] = ttl
