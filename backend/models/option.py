"""Site-wide option key/value model."""

from __future__ import annotations

from sqlalchemy import Boolean, Column, String, Text, true
from sqlmodel import Field, SQLModel

MAX_OPTION_NAME_LENGTH = 191


class Option(SQLModel, table=True):
    """Global option shared by every user."""

    __tablename__ = "options"

    option_id: int | None = Field(default=None, primary_key=True)
    option_name: str = Field(
        sa_column=Column(String(MAX_OPTION_NAME_LENGTH), unique=True, nullable=False)
    )
    option_value: str | None = Field(
        default=None, sa_column=Column(Text, nullable=True)
    )
    # Options that are not autoloaded are fetched on demand only.
    autoload: bool = Field(
        default=True,
        sa_column=Column(
            Boolean,
            nullable=False,
            server_default=true(),
        ),
    )
