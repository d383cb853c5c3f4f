from sqlalchemy import String, Integer, Date, DateTime, Text, Index, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column
from datetime import date, datetime, timezone
from app.db.session import Base

BOOKING_STATUSES = ("pending", "confirmed", "cancelled", "completed")
PAYMENT_STATUSES = ("pending", "paid", "refunded")

class Booking(Base):
    __tablename__ = "bookings"
    __table_args__ = (
        Index("ix_bookings_room_status", "room_category", "room_title", "status"),
        Index("ix_bookings_dates", "check_in", "check_out"),
        CheckConstraint("check_out > check_in", name="ck_bookings_check_out_after_check_in"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    booking_id: Mapped[str] = mapped_column(String(20), unique=True, index=True)  # BK-XXXXXXXX
    user_id: Mapped[str | None] = mapped_column(String(36), index=True, nullable=True)  # null for guest bookings

    first_name: Mapped[str] = mapped_column(String(100))
    last_name: Mapped[str] = mapped_column(String(100))
    email: Mapped[str] = mapped_column(String(320), index=True)
    phone: Mapped[str] = mapped_column(String(40))

    # (room_category, room_title) is the room identity; there is no FK to rooms
    room_type: Mapped[str] = mapped_column(String(100), default="")
    room_title: Mapped[str] = mapped_column(String(100))
    room_category: Mapped[str] = mapped_column(String(40))
    room_image: Mapped[str] = mapped_column(String(512), default="")
    location: Mapped[str] = mapped_column(String(200), default="")

    check_in: Mapped[date] = mapped_column(Date)
    check_out: Mapped[date] = mapped_column(Date)
    nights: Mapped[int] = mapped_column(Integer)
    guests: Mapped[int] = mapped_column(Integer, default=1)
    special_requests: Mapped[str] = mapped_column(Text, default="")

    base_price: Mapped[int] = mapped_column(Integer, default=0)
    tax_and_fees: Mapped[int] = mapped_column(Integer, default=0)
    total_price: Mapped[int] = mapped_column(Integer, default=0)

    status: Mapped[str] = mapped_column(String(20), default="pending")          # pending, confirmed, cancelled, completed
    payment_status: Mapped[str] = mapped_column(String(20), default="pending")  # pending, paid, refunded

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
