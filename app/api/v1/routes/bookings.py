from datetime import date
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from app.db.session import get_db
from app.models.user import User
from app.schemas.booking import BookingCreate, BookingOut
from app.core.errors import NotFoundError
from app.services import booking_service, stats_service
from app.services.availability_service import is_available, suggest_alternatives, validate_stay
from app.api.deps import get_current_user, get_optional_user, require_admin

router = APIRouter(tags=["bookings"])


def _visible_to(b, user: User) -> bool:
    return user.is_admin or b.user_id == user.id or b.email == user.email


@router.post("/bookings", status_code=201)
def create_booking(body: BookingCreate, db: Session = Depends(get_db),
                   me: User | None = Depends(get_optional_user)):
    booking = booking_service.create_booking(db, body.model_dump(), user=me)
    return {"success": True, "data": BookingOut.from_model(booking).model_dump(mode="json")}


@router.get("/bookings/check-availability")
def check_availability(roomCategory: str = Query(min_length=1), roomTitle: str = Query(min_length=1),
                       checkIn: date | None = None, checkOut: date | None = None,
                       db: Session = Depends(get_db)):
    validate_stay(checkIn, checkOut)
    available = is_available(db, roomCategory, roomTitle, checkIn, checkOut)
    out = {"success": True, "available": available}
    if not available:
        out["suggestions"] = suggest_alternatives(db, roomCategory, roomTitle, checkIn, checkOut)
    return out


@router.get("/bookings")
def list_bookings(email: str | None = None, limit: int = 50, offset: int = 0,
                  db: Session = Depends(get_db), me: User = Depends(get_current_user)):
    owner = None if me.is_admin else me
    total, items = booking_service.list_bookings(db, user=owner, email=email, limit=limit, offset=offset)
    return {
        "success": True,
        "count": len(items),
        "total": total,
        "data": [BookingOut.from_model(b).model_dump(mode="json") for b in items],
    }


@router.get("/bookings/history")
def booking_history(db: Session = Depends(get_db), me: User = Depends(require_admin)):
    return {"success": True, **stats_service.booking_history(db)}


@router.get("/bookings/history/me")
def my_booking_history(db: Session = Depends(get_db), me: User = Depends(get_current_user)):
    return {"success": True, **stats_service.booking_history(db, email=me.email)}


@router.get("/bookings/{booking_id}")
def get_booking(booking_id: str, db: Session = Depends(get_db), me: User = Depends(get_current_user)):
    b = booking_service.get_booking(db, booking_id)
    if not _visible_to(b, me):
        raise NotFoundError("Booking not found")
    return {"success": True, "data": BookingOut.from_model(b).model_dump(mode="json")}


@router.put("/bookings/{booking_id}/cancel")
def cancel_booking(booking_id: str, db: Session = Depends(get_db), me: User = Depends(get_current_user)):
    b = booking_service.get_booking(db, booking_id)
    if not _visible_to(b, me):
        raise NotFoundError("Booking not found")
    b = booking_service.cancel_booking(db, b)
    return {"success": True, "data": BookingOut.from_model(b).model_dump(mode="json")}
