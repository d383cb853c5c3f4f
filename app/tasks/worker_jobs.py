import logging
from datetime import datetime, timezone
from sqlalchemy.orm import Session
from sqlalchemy.exc import ProgrammingError, OperationalError
from app.db.session import SessionLocal
from app.models.booking import Booking
from app.services import token_service

logger = logging.getLogger(__name__)


def purge_expired_refresh_tokens(db: Session | None = None):
    own = db is None
    db = db or SessionLocal()
    try:
        try:
            deleted = token_service.purge_expired(db)
        except (ProgrammingError, OperationalError):
            # DB not migrated yet; don't crash the worker.
            db.rollback()
            return {"skipped": True, "reason": "missing_tables"}
        logger.info("purged %d expired refresh tokens", deleted)
        return {"purged": deleted}
    finally:
        if own:
            db.close()


def complete_past_bookings(db: Session | None = None, today=None):
    """Confirmed stays whose check-out has passed become completed (and reviewable)."""
    own = db is None
    db = db or SessionLocal()
    try:
        today = today or datetime.now(timezone.utc).date()
        try:
            done = db.query(Booking).filter(
                Booking.status == "confirmed",
                Booking.check_out < today,
            ).all()
        except (ProgrammingError, OperationalError):
            db.rollback()
            return {"skipped": True, "reason": "missing_tables"}
        for b in done:
            b.status = "completed"
        db.commit()
        logger.info("marked %d bookings completed", len(done))
        return {"completed": len(done)}
    finally:
        if own:
            db.close()
