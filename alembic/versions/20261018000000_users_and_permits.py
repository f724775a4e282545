"""Users and vehicle permits.

Revision ID: 20261018000000
Revises:
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "20261018000000"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

user_role = sa.Enum("Employee", "HR", "Admin", name="user_role")
permit_status = sa.Enum("Pending", "Approved", "Rejected", name="permit_status")


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("national_id", sa.String(length=32), nullable=False),
        sa.Column("username", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("role", user_role, nullable=False),
        sa.Column("notification_token", sa.String(length=4096), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_users")),
    )
    op.create_index(op.f("ix_users_national_id"), "users", ["national_id"], unique=True)
    op.create_index(op.f("ix_users_username"), "users", ["username"], unique=True)

    op.create_table(
        "permits",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("requester_name", sa.String(length=255), nullable=False),
        sa.Column("national_id", sa.String(length=32), nullable=False),
        sa.Column("driver_name", sa.String(length=255), nullable=False),
        sa.Column("plate_number", sa.String(length=32), nullable=False),
        sa.Column("destination", sa.Text(), nullable=False),
        sa.Column("departure_date", sa.Date(), nullable=False),
        sa.Column("departure_time", sa.String(length=5), nullable=False),
        sa.Column("return_date", sa.Date(), nullable=False),
        sa.Column("return_time", sa.String(length=5), nullable=False),
        sa.Column("note", sa.Text(), nullable=True),
        sa.Column("status", permit_status, server_default="Pending", nullable=False),
        sa.Column("approval_date", sa.Date(), nullable=True),
        sa.Column("approval_time", sa.String(length=5), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.CheckConstraint(
            "(approval_date IS NULL) = (approval_time IS NULL)",
            name="ck_permits_approval_pair",
        ),
        sa.ForeignKeyConstraint(
            ["user_id"], ["users.id"], name=op.f("fk_permits_user_id_users")
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_permits")),
    )
    op.create_index(op.f("ix_permits_status"), "permits", ["status"], unique=False)
    op.create_index(op.f("ix_permits_created_at"), "permits", ["created_at"], unique=False)
    op.create_index(op.f("ix_permits_user_id"), "permits", ["user_id"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_permits_user_id"), table_name="permits")
    op.drop_index(op.f("ix_permits_created_at"), table_name="permits")
    op.drop_index(op.f("ix_permits_status"), table_name="permits")
    op.drop_table("permits")
    op.drop_index(op.f("ix_users_username"), table_name="users")
    op.drop_index(op.f("ix_users_national_id"), table_name="users")
    op.drop_table("users")
    permit_status.drop(op.get_bind(), checkfirst=True)
    user_role.drop(op.get_bind(), checkfirst=True)
