"""Key/value storage for dismissal flags.

Two namespaces are exposed: metadata owned by the current user and options
shared by every user. A flag is stored as ``"1"`` and read back through
``is_truthy_value`` so values written by other tools are still honoured.
"""

from __future__ import annotations

from typing import Any, Protocol, cast, runtime_checkable

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import ColumnElement

from db.errors import is_unique_violation
from models import Option, UserMeta

FLAG_VALUE = "1"
_FALSY_VALUES = frozenset({"", "0", "false"})


@runtime_checkable
class DismissalStorage(Protocol):
    async def get_user_flag(self, key: str) -> bool: ...

    async def set_user_flag(self, key: str) -> None: ...

    async def get_global_flag(self, key: str) -> bool: ...

    async def set_global_flag(self, key: str) -> None: ...


def _eq(column: Any, value: Any) -> ColumnElement[bool]:
    return cast(ColumnElement[bool], column == value)


def is_truthy_value(raw_value: str | None) -> bool:
    if raw_value is None:
        return False
    return raw_value.strip().lower() not in _FALSY_VALUES


class SqlDismissalStorage:
    """Dismissal storage backed by the ``usermeta`` and ``options`` tables."""

    def __init__(self, session: AsyncSession, user_id: str) -> None:
        self.session = session
        self.user_id = user_id

    async def _load_user_meta(self, key: str) -> UserMeta | None:
        result = await self.session.execute(
            select(UserMeta)
            .where(
                _eq(UserMeta.user_id, self.user_id),
                _eq(UserMeta.meta_key, key),
            )
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def _load_option(self, key: str) -> Option | None:
        result = await self.session.execute(
            select(Option).where(_eq(Option.option_name, key)).limit(1)
        )
        return result.scalar_one_or_none()

    async def get_user_flag(self, key: str) -> bool:
        meta = await self._load_user_meta(key)
        return meta is not None and is_truthy_value(meta.meta_value)

    async def get_global_flag(self, key: str) -> bool:
        option = await self._load_option(key)
        return option is not None and is_truthy_value(option.option_value)

    async def set_user_flag(self, key: str) -> None:
        meta = await self._load_user_meta(key)
        if meta is None:
            self.session.add(
                UserMeta(user_id=self.user_id, meta_key=key, meta_value=FLAG_VALUE)
            )
        elif meta.meta_value == FLAG_VALUE:
            return
        else:
            meta.meta_value = FLAG_VALUE
        await self._commit_idempotent()

    async def set_global_flag(self, key: str) -> None:
        option = await self._load_option(key)
        if option is None:
            self.session.add(
                Option(option_name=key, option_value=FLAG_VALUE, autoload=False)
            )
        elif option.option_value == FLAG_VALUE:
            return
        else:
            option.option_value = FLAG_VALUE
        await self._commit_idempotent()

    async def _commit_idempotent(self) -> None:
        try:
            await self.session.commit()
        except IntegrityError as exc:
            await self.session.rollback()
            # A concurrent writer already stored the same flag.
            if not is_unique_violation(exc):
                raise
