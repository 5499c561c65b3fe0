"""Create users, halls, bookings, booking_days, payments, notifications

Revision ID: 4c2a91d7e3b5
Revises:
Create Date: 2026-10-19 10:12:31.518204

"""
from alembic import op
import sqlalchemy as sa


revision = "4c2a91d7e3b5"
down_revision = None
branch_labels = None
depends_on = None


def timestamps():
    return [
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
    ]


def upgrade():
    user_role = sa.Enum("customer", "admin", name="userrole")
    booking_status = sa.Enum("pending", "confirmed", "cancelled", "completed", name="bookingstatus")
    payment_method = sa.Enum("credit_card", "debit_card", "bank_transfer", "paypal", name="paymentmethod")
    payment_status = sa.Enum("pending", "completed", "failed", "refunded", name="paymentstatus")
    notification_type = sa.Enum("booking", "payment", "system", "reminder", name="notificationtype")
    related_model = sa.Enum("Booking", "Payment", name="relatedmodel")

    # 1️⃣ Users
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("phone", sa.String(), nullable=True),
        sa.Column("password_hash", sa.String(), nullable=False),
        sa.Column("role", user_role, nullable=False),
        *timestamps(),
    )
    op.create_index("ix_users_id", "users", ["id"])
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_role", "users", ["role"])

    # 2️⃣ Halls
    op.create_table(
        "halls",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("description", sa.String(1000), nullable=False),
        sa.Column("capacity", sa.Integer(), nullable=False),
        sa.Column("location", sa.String(), nullable=False),
        sa.Column("price_per_day", sa.Float(), nullable=False),
        sa.Column("amenities", sa.JSON(), nullable=False),
        sa.Column("images", sa.JSON(), nullable=False),
        sa.Column("availability", sa.Boolean(), nullable=False),
        sa.Column("deleted", sa.Boolean(), nullable=False),
        *timestamps(),
        sa.CheckConstraint("capacity > 0", name="ck_halls_capacity_positive"),
        sa.CheckConstraint("price_per_day > 0", name="ck_halls_price_positive"),
    )
    op.create_index("ix_halls_id", "halls", ["id"])

    # 3️⃣ Bookings
    op.create_table(
        "bookings",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("hall_id", sa.Integer(), sa.ForeignKey("halls.id"), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("guest_count", sa.Integer(), nullable=False),
        sa.Column("total_amount", sa.Float(), nullable=False),
        sa.Column("special_requests", sa.String(500), nullable=True),
        sa.Column("status", booking_status, nullable=False),
        *timestamps(),
    )
    op.create_index("ix_bookings_id", "bookings", ["id"])
    op.create_index("ix_bookings_user_id", "bookings", ["user_id"])
    op.create_index("ix_bookings_hall_dates", "bookings", ["hall_id", "start_date", "end_date"])

    # 4️⃣ Day claims (no double booking)
    op.create_table(
        "booking_days",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("booking_id", sa.Integer(), sa.ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False),
        sa.Column("hall_id", sa.Integer(), sa.ForeignKey("halls.id"), nullable=False),
        sa.Column("day", sa.Date(), nullable=False),
        sa.UniqueConstraint("hall_id", "day", name="uq_booking_days_hall_day"),
    )
    op.create_index("ix_booking_days_booking_id", "booking_days", ["booking_id"])

    # 5️⃣ Payments
    op.create_table(
        "payments",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("booking_id", sa.Integer(), sa.ForeignKey("bookings.id"), nullable=False),
        sa.Column("amount", sa.Float(), nullable=False),
        sa.Column("payment_method", payment_method, nullable=False),
        sa.Column("transaction_id", sa.String(), nullable=False),
        sa.Column("status", payment_status, nullable=False),
        sa.Column("paid_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        *timestamps(),
    )
    op.create_index("ix_payments_id", "payments", ["id"])
    op.create_index("ix_payments_booking_id", "payments", ["booking_id"])
    op.create_index(
        "uq_payments_completed_booking",
        "payments",
        ["booking_id"],
        unique=True,
        sqlite_where=sa.text("status = 'completed'"),
        postgresql_where=sa.text("status = 'completed'"),
    )

    # 6️⃣ Notifications
    op.create_table(
        "notifications",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("recipient_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("message", sa.String(), nullable=False),
        sa.Column("type", notification_type, nullable=False),
        sa.Column("read", sa.Boolean(), nullable=False),
        sa.Column("related_model", related_model, nullable=True),
        sa.Column("related_id", sa.Integer(), nullable=True),
        *timestamps(),
    )
    op.create_index("ix_notifications_id", "notifications", ["id"])
    op.create_index("ix_notifications_recipient_id", "notifications", ["recipient_id"])


def downgrade():
    op.drop_table("notifications")
    op.drop_table("payments")
    op.drop_table("booking_days")
    op.drop_table("bookings")
    op.drop_table("halls")
    op.drop_table("users")

    bind = op.get_bind()
    for name in ("relatedmodel", "notificationtype", "paymentstatus",
                 "paymentmethod", "bookingstatus", "userrole"):
        sa.Enum(name=name).drop(bind, checkfirst=True)
