"""Notice payload schemas and enums."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel


class DismissalScope(str, Enum):
    USER = "user"
    GLOBAL = "global"


class NoticeStatusResponse(BaseModel):
    id: str
    prefix: str
    scope: DismissalScope
    storage_key: str
    dismissed: bool
