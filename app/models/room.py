from sqlalchemy import String, Integer, Float, Boolean, DateTime, Text, JSON
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime, timezone
from app.db.session import Base

ROOM_CATEGORIES = (
    "standard-room", "deluxe-room", "executive-suite",
    "presidential-suite", "honeymoon-suite", "family-room",
)
BED_TYPES = ("Single", "Double", "Queen", "King", "Twin", "Various")
DEFAULT_ADDITIONAL_AMENITIES = ["WiFi", "Air conditioning", "Daily housekeeping", "Mini bar"]

class Room(Base):
    __tablename__ = "rooms"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    title: Mapped[str] = mapped_column(String(100), index=True)
    description: Mapped[str] = mapped_column(String(500), default="")
    full_description: Mapped[str] = mapped_column(Text, default="")
    price: Mapped[int] = mapped_column(Integer)
    image_url: Mapped[str] = mapped_column(String(512), default="/images/room-placeholder.jpg")
    location: Mapped[str] = mapped_column(String(200), default="Taguig, Metro Manila")
    category: Mapped[str] = mapped_column(String(40), index=True)
    rating: Mapped[float] = mapped_column(Float, default=4.5)
    max_occupancy: Mapped[int] = mapped_column(Integer, default=2)
    bed_type: Mapped[str] = mapped_column(String(20), default="Queen")
    room_size: Mapped[str] = mapped_column(String(40), default="30 sq m")
    amenities: Mapped[list] = mapped_column(JSON, default=list)
    additional_amenities: Mapped[list] = mapped_column(JSON, default=lambda: list(DEFAULT_ADDITIONAL_AMENITIES))
    is_available: Mapped[bool] = mapped_column(Boolean, default=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    @property
    def href(self) -> str:
        return f"/hotelRoomDetails/{self.category}/{(self.title or '').lower().replace(' ', '-')}"
