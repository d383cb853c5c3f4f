from datetime import date, datetime, timedelta, timezone

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.models.booking import Booking
from app.models.room import Room
from app.models.user import User

# Only these statuses count towards revenue
REVENUE_STATUSES = ("confirmed", "completed")


def booking_history(db: Session, email: str | None = None) -> dict:
    """Booking totals plus a per-category breakdown, optionally for one guest email."""
    q = db.query(Booking)
    if email:
        q = q.filter(Booking.email == email.lower())
    bookings = q.order_by(Booking.created_at.desc()).all()

    def revenue(items):
        return sum(b.total_price for b in items if b.status in REVENUE_STATUSES)

    by_category: dict[str, list[Booking]] = {}
    for b in bookings:
        by_category.setdefault(b.room_category, []).append(b)

    room_stats = []
    for category, items in by_category.items():
        room_stats.append({
            "roomType": category,
            "roomTitle": items[0].room_title or "Unknown",
            "count": len(items),
            "totalRevenue": revenue(items),
            "imageUrl": items[0].room_image or "",
            "bookings": [
                {
                    "id": b.id,
                    "bookingId": b.booking_id,
                    "status": b.status,
                    "checkIn": b.check_in.isoformat(),
                    "checkOut": b.check_out.isoformat(),
                    "guests": b.guests,
                    "nights": b.nights,
                    "totalPrice": b.total_price,
                    "createdAt": b.created_at.isoformat() if b.created_at else None,
                }
                for b in items
            ],
        })

    return {
        "stats": {
            "totalBookings": len(bookings),
            "completedBookings": sum(1 for b in bookings if b.status == "completed"),
            "cancelledBookings": sum(1 for b in bookings if b.status == "cancelled"),
            "totalRevenue": revenue(bookings),
        },
        "roomStats": room_stats,
    }


def _month_start(d: date) -> datetime:
    return datetime(d.year, d.month, 1, tzinfo=timezone.utc)


def _revenue_between(db: Session, start: datetime, end: datetime) -> int:
    return int(
        db.query(func.coalesce(func.sum(Booking.total_price), 0))
        .filter(Booking.status.in_(REVENUE_STATUSES), Booking.created_at >= start, Booking.created_at < end)
        .scalar()
        or 0
    )


def admin_overview(db: Session, now: datetime | None = None) -> dict:
    now = now or datetime.now(timezone.utc)
    this_month = _month_start(now.date())
    last_month = _month_start((this_month - timedelta(days=1)).date())

    status_counts = dict(db.query(Booking.status, func.count(Booking.id)).group_by(Booking.status).all())
    today = now.date()
    occupied = (
        db.query(func.count(func.distinct(Booking.room_category + "|" + Booking.room_title)))
        .filter(Booking.status != "cancelled", Booking.check_in <= today, Booking.check_out > today)
        .scalar()
        or 0
    )
    rooms_total = db.query(func.count(Room.id)).scalar() or 0
    rooms_listed = db.query(func.count(Room.id)).filter(Room.is_available.is_(True)).scalar() or 0

    rev_this = _revenue_between(db, this_month, now + timedelta(seconds=1))
    rev_last = _revenue_between(db, last_month, this_month)
    growth = round((rev_this - rev_last) * 100 / rev_last) if rev_last else 0

    return {
        "users": {
            "total": db.query(func.count(User.id)).scalar() or 0,
            "newThisWeek": db.query(func.count(User.id)).filter(User.created_at >= now - timedelta(days=7)).scalar() or 0,
        },
        "bookings": {
            "total": sum(status_counts.values()),
            "pending": status_counts.get("pending", 0),
            "confirmed": status_counts.get("confirmed", 0),
            "completed": status_counts.get("completed", 0),
            "cancelled": status_counts.get("cancelled", 0),
        },
        "rooms": {
            "total": rooms_total,
            "listed": rooms_listed,
            "occupied": int(occupied),
            "available": max(rooms_listed - int(occupied), 0),
        },
        "revenue": {"thisMonth": rev_this, "lastMonth": rev_last, "growth": growth},
    }
