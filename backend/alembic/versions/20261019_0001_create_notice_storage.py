"""Create users, usermeta and options tables."""

from collections.abc import Sequence

from alembic import op
import sqlalchemy as sa

revision: str = "20261019_0001"
down_revision: str | None = None
branch_labels: Sequence[str] | None = None
depends_on: Sequence[str] | None = None

TIMESTAMP_DEFAULT = sa.text("CURRENT_TIMESTAMP")


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("username", sa.String(length=60), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=TIMESTAMP_DEFAULT,
            nullable=False,
        ),
    )
    op.create_index("ix_users_username", "users", ["username"], unique=True)

    op.create_table(
        "usermeta",
        sa.Column("umeta_id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.String(length=36), nullable=False),
        sa.Column("meta_key", sa.String(length=191), nullable=False),
        sa.Column("meta_value", sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.UniqueConstraint(
            "user_id",
            "meta_key",
            name="ux_usermeta_user_meta_key",
        ),
    )
    op.create_index("ix_usermeta_user_id", "usermeta", ["user_id"], unique=False)

    op.create_table(
        "options",
        sa.Column("option_id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("option_name", sa.String(length=191), nullable=False),
        sa.Column("option_value", sa.Text(), nullable=True),
        sa.Column("autoload", sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.UniqueConstraint("option_name"),
    )


def downgrade() -> None:
    op.drop_table("options")
    op.drop_index("ix_usermeta_user_id", table_name="usermeta")
    op.drop_table("usermeta")
    op.drop_index("ix_users_username", table_name="users")
    op.drop_table("users")
