"""initial

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-18

"""

from alembic import op
import sqlalchemy as sa

revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None

def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("name", sa.String(length=200), nullable=False, server_default=""),
        sa.Column("email", sa.String(length=320), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("role", sa.String(length=20), nullable=False, server_default="user"),
        sa.Column("phone", sa.String(length=40), nullable=False, server_default=""),
        sa.Column("address", sa.String(length=300), nullable=False, server_default=""),
        sa.Column("bio", sa.Text(), nullable=False, server_default=""),
        sa.Column("profile_pic", sa.String(length=512), nullable=False, server_default=""),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("last_login_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_role", "users", ["role"], unique=False)

    op.create_table(
        "rooms",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("title", sa.String(length=100), nullable=False),
        sa.Column("description", sa.String(length=500), nullable=False, server_default=""),
        sa.Column("full_description", sa.Text(), nullable=False, server_default=""),
        sa.Column("price", sa.Integer(), nullable=False),
        sa.Column("image_url", sa.String(length=512), nullable=False, server_default="/images/room-placeholder.jpg"),
        sa.Column("location", sa.String(length=200), nullable=False, server_default="Taguig, Metro Manila"),
        sa.Column("category", sa.String(length=40), nullable=False),
        sa.Column("rating", sa.Float(), nullable=False, server_default="4.5"),
        sa.Column("max_occupancy", sa.Integer(), nullable=False, server_default="2"),
        sa.Column("bed_type", sa.String(length=20), nullable=False, server_default="Queen"),
        sa.Column("room_size", sa.String(length=40), nullable=False, server_default="30 sq m"),
        sa.Column("amenities", sa.JSON(), nullable=False),
        sa.Column("additional_amenities", sa.JSON(), nullable=False),
        sa.Column("is_available", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_rooms_title", "rooms", ["title"])
    op.create_index("ix_rooms_category", "rooms", ["category"])

    op.create_table(
        "bookings",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("booking_id", sa.String(length=20), nullable=False),
        sa.Column("user_id", sa.String(length=36), nullable=True),
        sa.Column("first_name", sa.String(length=100), nullable=False),
        sa.Column("last_name", sa.String(length=100), nullable=False),
        sa.Column("email", sa.String(length=320), nullable=False),
        sa.Column("phone", sa.String(length=40), nullable=False),
        sa.Column("room_type", sa.String(length=100), nullable=False, server_default=""),
        sa.Column("room_title", sa.String(length=100), nullable=False),
        sa.Column("room_category", sa.String(length=40), nullable=False),
        sa.Column("room_image", sa.String(length=512), nullable=False, server_default=""),
        sa.Column("location", sa.String(length=200), nullable=False, server_default=""),
        sa.Column("check_in", sa.Date(), nullable=False),
        sa.Column("check_out", sa.Date(), nullable=False),
        sa.Column("nights", sa.Integer(), nullable=False),
        sa.Column("guests", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("special_requests", sa.Text(), nullable=False, server_default=""),
        sa.Column("base_price", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("tax_and_fees", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_price", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="pending"),
        sa.Column("payment_status", sa.String(length=20), nullable=False, server_default="pending"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("check_out > check_in", name="ck_bookings_check_out_after_check_in"),
    )
    op.create_index("ix_bookings_booking_id", "bookings", ["booking_id"], unique=True)
    op.create_index("ix_bookings_user_id", "bookings", ["user_id"])
    op.create_index("ix_bookings_email", "bookings", ["email"])
    op.create_index("ix_bookings_room_status", "bookings", ["room_category", "room_title", "status"])
    op.create_index("ix_bookings_dates", "bookings", ["check_in", "check_out"])

    op.create_table(
        "room_locks",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("room_category", sa.String(length=40), nullable=False),
        sa.Column("room_title", sa.String(length=100), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint("room_category", "room_title", name="uq_room_lock_identity"),
    )

    op.create_table(
        "refresh_tokens",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("user_id", sa.String(length=36), nullable=False),
        sa.Column("token_hash", sa.String(length=64), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("is_revoked", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("user_agent", sa.String(length=512), nullable=False, server_default="unknown"),
        sa.Column("ip_address", sa.String(length=64), nullable=False, server_default="unknown"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_refresh_tokens_user_id", "refresh_tokens", ["user_id"])
    op.create_index("ix_refresh_tokens_token_hash", "refresh_tokens", ["token_hash"], unique=True)
    op.create_index("ix_refresh_tokens_expires_at", "refresh_tokens", ["expires_at"])

def downgrade() -> None:
    op.drop_table("refresh_tokens")
    op.drop_table("room_locks")
    op.drop_table("bookings")
    op.drop_table("rooms")
    op.drop_table("users")
