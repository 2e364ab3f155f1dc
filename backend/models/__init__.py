"""SQLModel models package."""

from .option import Option
from .user import User
from .user_meta import UserMeta

__all__ = [
    "User",
    "UserMeta",
    "Option",
]
