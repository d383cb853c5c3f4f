from sqlalchemy import String, Integer, Date, DateTime, Text, JSON, UniqueConstraint, Index
from sqlalchemy.orm import Mapped, mapped_column
from datetime import date, datetime, timezone
from app.db.session import Base

class Review(Base):
    __tablename__ = "reviews"
    __table_args__ = (
        UniqueConstraint("user_id", "booking_id", name="uq_review_user_booking"),  # one review per booking
        Index("ix_reviews_room", "room_category", "room_title"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    user_id: Mapped[str] = mapped_column(String(36), index=True)
    booking_id: Mapped[str] = mapped_column(String(36), index=True)  # bookings.id

    room_category: Mapped[str] = mapped_column(String(40))
    room_title: Mapped[str] = mapped_column(String(100))

    rating: Mapped[int] = mapped_column(Integer)  # 1..5
    title: Mapped[str] = mapped_column(String(100))
    comment: Mapped[str] = mapped_column(String(500))
    images: Mapped[list] = mapped_column(JSON, default=list)
    likes: Mapped[int] = mapped_column(Integer, default=0)
    status: Mapped[str] = mapped_column(String(20), default="pending", index=True)  # pending, approved, rejected
    stay_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
