"""Per-user metadata key/value model."""

from __future__ import annotations

from sqlalchemy import Column, ForeignKey, String, Text, UniqueConstraint
from sqlmodel import Field, SQLModel

MAX_META_KEY_LENGTH = 191


class UserMeta(SQLModel, table=True):
    """Stores one value per (user, key) pair."""

    __tablename__ = "usermeta"
    __table_args__ = (
        UniqueConstraint(
            "user_id",
            "meta_key",
            name="ux_usermeta_user_meta_key",
        ),
    )

    umeta_id: int | None = Field(default=None, primary_key=True)
    user_id: str = Field(
        sa_column=Column(
            String(36),
            ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        )
    )
    meta_key: str = Field(
        sa_column=Column(String(MAX_META_KEY_LENGTH), nullable=False)
    )
    meta_value: str | None = Field(
        default=None, sa_column=Column(Text, nullable=True)
    )
