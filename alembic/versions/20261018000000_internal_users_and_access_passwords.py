"""Internal users and per-panel access passwords.

Revision ID: 20261018000000
Revises:
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "20261018000000"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "internal_users",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("email", sa.String(length=320), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=True),
        sa.Column("role", sa.String(length=32), nullable=False, server_default="member"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.CheckConstraint("role IN ('admin', 'member')", name=op.f("ck_internal_users_role")),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_internal_users")),
    )
    # Unique index is what enforces one account per email under concurrent registration.
    op.create_index(
        op.f("ix_internal_users_email"),
        "internal_users",
        ["email"],
        unique=True,
    )

    op.create_table(
        "access_passwords",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("panel_type", sa.String(length=32), nullable=False),
        sa.Column("password", sa.String(length=255), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.CheckConstraint(
            "panel_type IN ('visitors', 'prayers', 'raffles')",
            name=op.f("ck_access_passwords_panel_type"),
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_access_passwords")),
    )
    op.create_index(
        op.f("ix_access_passwords_panel_type"),
        "access_passwords",
        ["panel_type"],
        unique=True,
    )


def downgrade() -> None:
    op.drop_index(op.f("ix_access_passwords_panel_type"), table_name="access_passwords")
    op.drop_table("access_passwords")
    op.drop_index(op.f("ix_internal_users_email"), table_name="internal_users")
    op.drop_table("internal_users")
