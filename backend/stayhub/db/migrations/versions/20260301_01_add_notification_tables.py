"""create tenants / members / customers / rooms / bookings / notification tables

Revision ID: 20260301_01_add_notification_tables
Revises:
Create Date: 2026-03-01 00:00:00.000000
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "20260301_01_add_notification_tables"
down_revision = None
branch_labels = None
depends_on = None

RECIPIENT_CHECK = (
    "(member_id IS NOT NULL AND customer_id IS NULL) OR "
    "(member_id IS NULL AND customer_id IS NOT NULL)"
)


def upgrade() -> None:
    op.create_table(
        "tenants",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("owner_user_id", sa.String(length=36), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.text("now()")),
    )
    op.create_index("ix_tenants_owner_user_id", "tenants", ["owner_user_id"])

    op.create_table(
        "tenant_members",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column(
            "tenant_id",
            sa.String(length=36),
            sa.ForeignKey("tenants.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("user_id", sa.String(length=36), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=True),
        sa.Column("email", sa.String(length=255), nullable=True),
        # active / invited / inactive / removed
        sa.Column("status", sa.String(length=20), nullable=False, server_default="active"),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.text("now()")),
    )
    op.create_index("idx_tenant_members_tenant_status", "tenant_members", ["tenant_id", "status"])
    op.create_index("idx_tenant_members_tenant_user", "tenant_members", ["tenant_id", "user_id"])

    op.create_table(
        "customers",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column(
            "tenant_id",
            sa.String(length=36),
            sa.ForeignKey("tenants.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.text("now()")),
    )
    op.create_index("ix_customers_tenant_id", "customers", ["tenant_id"])

    op.create_table(
        "rooms",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column(
            "tenant_id",
            sa.String(length=36),
            sa.ForeignKey("tenants.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("check_in_time", sa.Time(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.text("now()")),
    )
    op.create_index("ix_rooms_tenant_id", "rooms", ["tenant_id"])

    op.create_table(
        "bookings",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column(
            "tenant_id",
            sa.String(length=36),
            sa.ForeignKey("tenants.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "room_id",
            sa.String(length=36),
            sa.ForeignKey("rooms.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column(
            "customer_id",
            sa.String(length=36),
            sa.ForeignKey("customers.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("guest_name", sa.String(length=255), nullable=False),
        sa.Column("check_in", sa.Date(), nullable=False),
        sa.Column("check_out", sa.Date(), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="pending"),
        sa.Column("payment_status", sa.String(length=20), nullable=False, server_default="unpaid"),
        sa.Column("total_amount", sa.Numeric(10, 2), nullable=True),
        sa.Column("currency", sa.String(length=3), nullable=False, server_default="ZAR"),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.text("now()")),
    )
    op.create_index("idx_bookings_check_in_status", "bookings", ["check_in", "status"])
    op.create_index("idx_bookings_tenant", "bookings", ["tenant_id"])

    op.create_table(
        "notifications",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column(
            "tenant_id",
            sa.String(length=36),
            sa.ForeignKey("tenants.id", ondelete="CASCADE"),
            nullable=False,
        ),
        # 수신자 (둘 중 하나만)
        sa.Column("member_id", sa.String(length=36), nullable=True),
        sa.Column("customer_id", sa.String(length=36), nullable=True),
        sa.Column("type", sa.String(length=50), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("message", sa.Text(), nullable=True),
        sa.Column("link_type", sa.String(length=50), nullable=True),
        sa.Column("link_id", sa.String(length=36), nullable=True),
        sa.Column("data", sa.JSON(), nullable=True),
        sa.Column("read_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.text("now()")),
        sa.CheckConstraint(RECIPIENT_CHECK, name="notification_recipient_check"),
    )
    op.create_index("idx_notifications_member", "notifications", ["member_id", "read_at"])
    op.create_index("idx_notifications_customer", "notifications", ["customer_id", "read_at"])
    op.create_index("idx_notifications_tenant", "notifications", ["tenant_id", "created_at"])
    op.create_index("idx_notifications_type", "notifications", ["type"])

    op.create_table(
        "notification_preferences",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column(
            "tenant_id",
            sa.String(length=36),
            sa.ForeignKey("tenants.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("member_id", sa.String(length=36), nullable=True, unique=True),
        sa.Column("customer_id", sa.String(length=36), nullable=True, unique=True),
        sa.Column("preferences", sa.JSON(), nullable=False, server_default=sa.text("'{}'")),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.text("now()")),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.text("now()")),
        sa.CheckConstraint(RECIPIENT_CHECK, name="prefs_recipient_check"),
    )


def downgrade() -> None:
    op.drop_table("notification_preferences")

    op.drop_index("idx_notifications_type", table_name="notifications")
    op.drop_index("idx_notifications_tenant", table_name="notifications")
    op.drop_index("idx_notifications_customer", table_name="notifications")
    op.drop_index("idx_notifications_member", table_name="notifications")
    op.drop_table("notifications")

    op.drop_index("idx_bookings_tenant", table_name="bookings")
    op.drop_index("idx_bookings_check_in_status", table_name="bookings")
    op.drop_table("bookings")

    op.drop_index("ix_rooms_tenant_id", table_name="rooms")
    op.drop_table("rooms")

    op.drop_index("ix_customers_tenant_id", table_name="customers")
    op.drop_table("customers")

    op.drop_index("idx_tenant_members_tenant_user", table_name="tenant_members")
    op.drop_index("idx_tenant_members_tenant_status", table_name="tenant_members")
    op.drop_table("tenant_members")

    op.drop_index("ix_tenants_owner_user_id", table_name="tenants")
    op.drop_table("tenants")
