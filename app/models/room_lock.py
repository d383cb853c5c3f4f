from sqlalchemy import String, DateTime, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime, timezone
from app.db.session import Base

class RoomLock(Base):
    """One row per room identity; selected FOR UPDATE to serialize bookings of that room."""
    __tablename__ = "room_locks"
    __table_args__ = (
        UniqueConstraint("room_category", "room_title", name="uq_room_lock_identity"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    room_category: Mapped[str] = mapped_column(String(40))
    room_title: Mapped[str] = mapped_column(String(100))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
