import logging
import random
import string
import uuid
from datetime import date

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import ConflictError, NotFoundError, ServerError, ValidationError
from app.models.booking import Booking, PAYMENT_STATUSES
from app.models.room_lock import RoomLock
from app.models.user import User
from app.services.availability_service import find_conflicts, validate_stay

logger = logging.getLogger(__name__)

# Allowed status moves; cancelled and completed are terminal.
STATUS_TRANSITIONS = {
    "pending": {"confirmed", "cancelled"},
    "confirmed": {"completed", "cancelled"},
    "cancelled": set(),
    "completed": set(),
}


def make_booking_ref() -> str:
    return "BK-" + "".join(random.choices(string.ascii_uppercase + string.digits, k=8))


def lock_room(db: Session, room_category: str, room_title: str) -> RoomLock:
    """Take the row lock for a room identity, creating the row on first use.

    Must open the transaction: a lost insert race rolls the session back.
    Held until the surrounding transaction commits or rolls back.
    """
    stmt = (
        select(RoomLock)
        .where(RoomLock.room_category == room_category, RoomLock.room_title == room_title)
        .with_for_update()
    )
    lock = db.execute(stmt).scalar_one_or_none()
    if lock is None:
        try:
            db.add(RoomLock(id=str(uuid.uuid4()), room_category=room_category, room_title=room_title))
            db.flush()
        except IntegrityError:
            # another request created it first; wait on its lock instead
            db.rollback()
        lock = db.execute(stmt).scalar_one()
    if db.get_bind().dialect.name == "sqlite":
        # SQLite drops FOR UPDATE; a no-op write holds its database lock until commit
        db.execute(
            update(RoomLock)
            .where(RoomLock.id == lock.id)
            .values(room_title=RoomLock.room_title)
            .execution_options(synchronize_session=False)
        )
    return lock


def allocate_booking_ref(db: Session) -> str:
    for _ in range(10):
        ref = make_booking_ref()
        if not db.query(Booking.id).filter(Booking.booking_id == ref).first():
            return ref
    raise ServerError("could not allocate booking reference")


def create_booking(db: Session, data: dict, user: User | None = None) -> Booking:
    """Persist a booking if its room is free for the requested stay.

    The availability check and insert run under the room's lock, so two
    overlapping requests for the same room cannot both succeed.
    """
    check_in: date = data["checkIn"]
    check_out: date = data["checkOut"]
    validate_stay(check_in, check_out)

    room_category = data["roomCategory"]
    room_title = data["roomTitle"]

    db.rollback()  # start a fresh transaction so the lock is its first statement
    try:
        lock_room(db, room_category, room_title)
        conflicts = find_conflicts(db, room_category, room_title, check_in, check_out)
        if conflicts:
            logger.info("booking rejected: %s/%s %s..%s overlaps %s", room_category, room_title,
                        check_in, check_out, [b.booking_id for b in conflicts])
            raise ConflictError("Room is not available for the selected dates", "ROOM_UNAVAILABLE")

        booking = Booking(
            id=str(uuid.uuid4()),
            booking_id=allocate_booking_ref(db),
            user_id=user.id if user else None,
            first_name=data["firstName"],
            last_name=data["lastName"],
            email=data["email"].lower(),
            phone=data["phone"],
            room_type=data.get("roomType") or "",
            room_title=room_title,
            room_category=room_category,
            room_image=data.get("roomImage") or "",
            location=data.get("location") or "",
            check_in=check_in,
            check_out=check_out,
            nights=(check_out - check_in).days,
            guests=data.get("guests") or 1,
            special_requests=data.get("specialRequests") or "",
            base_price=data["basePrice"],
            tax_and_fees=data["taxAndFees"],
            total_price=data["totalPrice"],
            status="confirmed",
            payment_status="pending",
        )
        db.add(booking)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(booking)
    logger.info("booking %s created for %s/%s %s..%s", booking.booking_id, room_category, room_title,
                check_in, check_out)
    return booking


def get_booking(db: Session, ref: str) -> Booking:
    """Look up by system id or public BK- reference."""
    b = db.get(Booking, ref)
    if not b:
        b = db.query(Booking).filter(Booking.booking_id == ref).first()
    if not b:
        raise NotFoundError("Booking not found")
    return b


def _mark_cancelled(booking: Booking) -> None:
    if booking.status == "cancelled":
        raise ConflictError("Booking is already cancelled", "ALREADY_CANCELLED")
    if booking.status == "completed":
        raise ConflictError("Completed bookings cannot be cancelled", "INVALID_STATUS_TRANSITION")
    booking.status = "cancelled"
    if booking.payment_status == "paid":
        booking.payment_status = "refunded"


def cancel_booking(db: Session, booking: Booking) -> Booking:
    _mark_cancelled(booking)
    db.commit()
    db.refresh(booking)
    logger.info("booking %s cancelled", booking.booking_id)
    return booking


def update_status(db: Session, booking: Booking, status: str | None = None, payment_status: str | None = None,
                  commit: bool = True) -> Booking:
    """Apply an admin status change. With commit=False the change is only staged on the session,
    so the caller can add related rows (the audit entry) to the same transaction."""
    if payment_status is not None and payment_status not in PAYMENT_STATUSES:
        raise ValidationError("invalid paymentStatus")
    if status is not None and status != booking.status:
        if status not in STATUS_TRANSITIONS.get(booking.status, set()):
            raise ValidationError(f"cannot move booking from {booking.status} to {status}", "INVALID_STATUS_TRANSITION")
        if status == "cancelled":
            _mark_cancelled(booking)
        else:
            booking.status = status
    # an explicit payment status overrides the automatic refund on cancel
    if payment_status is not None:
        booking.payment_status = payment_status
    if commit:
        db.commit()
        db.refresh(booking)
    logger.info("booking %s now %s/%s", booking.booking_id, booking.status, booking.payment_status)
    return booking


def list_bookings(db: Session, user: User | None = None, email: str | None = None,
                  limit: int = 50, offset: int = 0) -> tuple[int, list[Booking]]:
    q = db.query(Booking)
    if user is not None:
        q = q.filter((Booking.user_id == user.id) | (Booking.email == user.email))
    if email:
        q = q.filter(Booking.email == email.lower())
    total = q.count()
    items = q.order_by(Booking.created_at.desc()).limit(min(limit, 200)).offset(max(offset, 0)).all()
    return total, items
