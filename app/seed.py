import logging
import uuid

from sqlalchemy.orm import Session
from sqlalchemy import text
from sqlalchemy.exc import ProgrammingError, OperationalError

from app.db.session import SessionLocal
from app.core.config import settings
from app.core.security import hash_password
from app.models.user import User
from app.models.room import Room

logger = logging.getLogger(__name__)

ROOMS = [
    ("Standard Room - City View", "standard-room", 3200, 2, "Queen", "24 sq m", 4.1,
     ["Free WiFi", "TV", "Air conditioning", "Desk"]),
    ("Standard Room - Twin Beds", "standard-room", 3100, 2, "Twin", "24 sq m", 4.3,
     ["Free WiFi", "TV", "Air conditioning", "Coffee maker"]),
    ("Deluxe Room - High Floor", "deluxe-room", 5200, 3, "King", "32 sq m", 4.6,
     ["Free WiFi", "Smart TV", "Air conditioning", "Mini bar", "Bathtub"]),
    ("Deluxe Room - Corner Unit", "deluxe-room", 5500, 3, "King", "35 sq m", 4.7,
     ["Free WiFi", "Smart TV", "Air conditioning", "Mini bar", "Seating area"]),
    ("Executive Suite - Business", "executive-suite", 8200, 2, "King", "48 sq m", 4.8,
     ["Free WiFi", "Smart TV", "Work desk", "Lounge access", "Espresso machine"]),
    ("Family Room - Connecting Rooms", "family-room", 7500, 6, "Various", "65 sq m", 4.5,
     ["Free WiFi", "TV", "Air conditioning", "Kitchenette", "Game console"]),
    ("Honeymoon Suite - Anniversary Package", "honeymoon-suite", 12500, 2, "King", "60 sq m", 4.9,
     ["Free WiFi", "Smart TV", "Jacuzzi", "Champagne on arrival", "Rose petal turndown"]),
    ("Presidential Suite - Diplomat", "presidential-suite", 16000, 4, "King", "85 sq m", 4.9,
     ["Free WiFi", "Smart TV", "Air conditioning", "Mini bar", "Coffee machine", "Jacuzzi", "Private study"]),
]


def ensure_admin(db: Session) -> bool:
    """Create the admin account from SEED_ADMIN_EMAIL / SEED_ADMIN_PASSWORD, if both are set."""
    email = settings.SEED_ADMIN_EMAIL.strip().lower()
    if not email or not settings.SEED_ADMIN_PASSWORD:
        logger.info("SEED_ADMIN_EMAIL/SEED_ADMIN_PASSWORD not set; no admin account seeded")
        return False
    if db.query(User).filter(User.email == email).first():
        return False
    db.add(User(
        id=str(uuid.uuid4()),
        email=email,
        name="Hotel Admin",
        role="admin",
        password_hash=hash_password(settings.SEED_ADMIN_PASSWORD),
        is_active=True,
    ))
    db.commit()
    return True


def ensure_rooms(db: Session) -> int:
    added = 0
    for title, category, price, occupancy, bed, size, rating, amenities in ROOMS:
        if db.query(Room.id).filter(Room.title == title, Room.category == category).first():
            continue
        db.add(Room(
            id=str(uuid.uuid4()),
            title=title,
            description=title.split(" - ")[-1],
            price=price,
            category=category,
            max_occupancy=occupancy,
            bed_type=bed,
            room_size=size,
            rating=rating,
            amenities=amenities,
        ))
        added += 1
    db.commit()
    return added


def run(db=None):
    own = db is None
    if db is None:
        db = SessionLocal()
    try:
        # If migrations haven't been applied yet, seeding must not crash the API.
        try:
            db.execute(text("SELECT 1 FROM users LIMIT 1"))
        except (ProgrammingError, OperationalError):
            db.rollback()
            logger.warning("users table not found yet. Skipping seeding (run alembic upgrade head).")
            return
        ensure_admin(db)
        added = ensure_rooms(db)
        logger.info("seed complete: %d rooms added", added)
    finally:
        if own:
            db.close()


if __name__ == "__main__":
    from app.core.logging import setup_logging
    setup_logging()
    run()
