"""Room availability.

A room is identified by ``(room_category, room_title)``. Every booking with
that identity and a status other than ``cancelled`` occupies the half-open
range ``[check_in, check_out)``: a stay may start on the day another ends.
Booking creation and the public availability check both go through
``find_conflicts`` so they can never disagree.
"""
import logging
from datetime import date, timedelta

from sqlalchemy import and_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import ValidationError
from app.models.booking import Booking

logger = logging.getLogger(__name__)

MAX_SUGGESTIONS = 3
SUGGESTION_HORIZON_DAYS = 90


def validate_stay(check_in: date | None, check_out: date | None) -> None:
    if check_in is None or check_out is None:
        raise ValidationError("checkIn and checkOut are required", "INVALID_DATE_RANGE")
    if check_out <= check_in:
        raise ValidationError("checkOut must be after checkIn", "INVALID_DATE_RANGE")


def overlaps(check_in: date, check_out: date, other_in: date, other_out: date) -> bool:
    # Equivalent to: other_in <= check_in < other_out, or other_in < check_out <= other_out,
    # or [other_in, other_out) inside [check_in, check_out).
    return check_in < other_out and other_in < check_out


def active_bookings_query(db: Session, room_category: str, room_title: str):
    return db.query(Booking).filter(
        Booking.room_category == room_category,
        Booking.room_title == room_title,
        Booking.status != "cancelled",
    )


def find_conflicts(db: Session, room_category: str, room_title: str, check_in: date, check_out: date) -> list[Booking]:
    return (
        active_bookings_query(db, room_category, room_title)
        .filter(and_(Booking.check_in < check_out, Booking.check_out > check_in))
        .order_by(Booking.check_in)
        .all()
    )


def is_available(db: Session, room_category: str, room_title: str, check_in: date, check_out: date) -> bool:
    """True iff no non-cancelled booking of the room overlaps the stay.

    A failed lookup reports the room as unavailable.
    """
    try:
        return not find_conflicts(db, room_category, room_title, check_in, check_out)
    except SQLAlchemyError:
        logger.exception("availability lookup failed for %s/%s", room_category, room_title)
        db.rollback()
        return False


def suggest_alternatives(db: Session, room_category: str, room_title: str, check_in: date, check_out: date,
                         limit: int = MAX_SUGGESTIONS) -> list[dict]:
    """Same-length stays after the requested one that do not overlap known bookings.

    Advisory only: nothing is held, and creation re-checks availability.
    """
    nights = (check_out - check_in).days
    horizon = check_out + timedelta(days=SUGGESTION_HORIZON_DAYS)
    try:
        taken = [
            (b.check_in, b.check_out)
            for b in active_bookings_query(db, room_category, room_title)
            .filter(Booking.check_out > check_in, Booking.check_in < horizon)
            .order_by(Booking.check_in)
            .all()
        ]
    except SQLAlchemyError:
        logger.exception("suggestion lookup failed for %s/%s", room_category, room_title)
        db.rollback()
        return []

    suggestions: list[dict] = []
    # Candidate starts are the check-out days of blocking stays; they're the earliest free edges.
    starts = sorted({end for _, end in taken if end > check_in})
    for start in starts:
        end = start + timedelta(days=nights)
        if end > horizon:
            break
        if any(overlaps(start, end, b_in, b_out) for b_in, b_out in taken):
            continue
        suggestions.append({"checkIn": start.isoformat(), "checkOut": end.isoformat(), "nights": nights})
        if len(suggestions) >= limit:
            break
    return suggestions
