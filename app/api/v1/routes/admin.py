import uuid
from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session
from sqlalchemy import func

from app.db.session import get_db
from app.api.deps import require_admin
from app.core.errors import NotFoundError, ValidationError
from app.models.user import User, ROLES
from app.models.room import Room, DEFAULT_ADDITIONAL_AMENITIES
from app.schemas.booking import BookingOut, BookingStatusUpdate
from app.schemas.room import RoomIn, RoomUpdate, ROOM_FIELDS, room_out
from app.services import audit_service, booking_service, stats_service, token_service
from app.services.audit_service import log_audit

router = APIRouter(tags=["admin"])


class UserUpdate(BaseModel):
    name: str | None = None
    role: str | None = None
    isActive: bool | None = None


def _user_row(u: User) -> dict:
    return {
        "id": u.id,
        "name": u.name,
        "email": u.email,
        "role": u.role,
        "phone": u.phone,
        "isActive": u.is_active,
        "lastLoginAt": u.last_login_at.isoformat() if u.last_login_at else None,
        "createdAt": u.created_at.isoformat() if u.created_at else None,
    }


@router.get("/admin/stats")
def admin_stats(db: Session = Depends(get_db), me: User = Depends(require_admin)):
    return {"success": True, "data": stats_service.admin_overview(db)}


@router.get("/admin/users")
def list_users(role: str | None = None, q: str | None = None, limit: int = 50, offset: int = 0,
               db: Session = Depends(get_db),
               me: User = Depends(require_admin)):
    query = db.query(User)
    if role:
        query = query.filter(User.role == role)
    if q:
        ql = f"%{q.lower()}%"
        query = query.filter(func.lower(User.email).like(ql) | func.lower(User.name).like(ql))
    total = query.count()
    users = query.order_by(User.created_at.desc()).limit(min(limit, 200)).offset(max(offset, 0)).all()
    return {"success": True, "total": total, "data": [_user_row(u) for u in users]}


@router.get("/admin/users/{user_id}")
def get_user(user_id: str, db: Session = Depends(get_db), me: User = Depends(require_admin)):
    u = db.get(User, user_id)
    if not u:
        raise NotFoundError("User not found")
    return {"success": True, "data": _user_row(u)}


@router.patch("/admin/users/{user_id}")
def update_user(user_id: str, body: UserUpdate,
                db: Session = Depends(get_db),
                me: User = Depends(require_admin)):
    u = db.get(User, user_id)
    if not u:
        raise NotFoundError("User not found")
    if body.name is not None:
        u.name = body.name
    if body.role is not None:
        if body.role not in ROLES:
            raise ValidationError("invalid role")
        u.role = body.role
    if body.isActive is not None:
        u.is_active = bool(body.isActive)
    log_audit(db, me, "user.update", u, {"role": u.role, "isActive": u.is_active})
    db.commit()
    if body.isActive is False:
        token_service.revoke_user_tokens(db, u.id)
    return {"success": True, "data": _user_row(u)}


@router.patch("/admin/bookings/{booking_id}/status")
def update_booking_status(booking_id: str, body: BookingStatusUpdate,
                          db: Session = Depends(get_db),
                          me: User = Depends(require_admin)):
    b = booking_service.get_booking(db, booking_id)
    b = booking_service.update_status(db, b, status=body.status, payment_status=body.paymentStatus, commit=False)
    log_audit(db, me, "booking.status", b, {"status": b.status, "paymentStatus": b.payment_status})
    db.commit()
    db.refresh(b)
    return {"success": True, "data": BookingOut.from_model(b).model_dump(mode="json")}


# -------------------------
# ADMIN: ROOMS
# -------------------------
@router.post("/admin/rooms", status_code=201)
def admin_create_room(body: RoomIn, db: Session = Depends(get_db), me: User = Depends(require_admin)):
    values = {col: getattr(body, api) for api, col in ROOM_FIELDS.items()}
    if values["additional_amenities"] is None:
        values["additional_amenities"] = list(DEFAULT_ADDITIONAL_AMENITIES)
    r = Room(id=str(uuid.uuid4()), **values)
    db.add(r)
    log_audit(db, me, "room.create", r, {"title": r.title, "category": r.category})
    db.commit()
    db.refresh(r)
    return {"success": True, "data": room_out(r)}


@router.put("/admin/rooms/{room_id}")
def admin_update_room(room_id: str, body: RoomUpdate, db: Session = Depends(get_db),
                      me: User = Depends(require_admin)):
    r = db.get(Room, room_id)
    if not r:
        raise NotFoundError("Room not found")
    changes = body.model_dump(exclude_none=True)
    for api, value in changes.items():
        setattr(r, ROOM_FIELDS[api], value)
    log_audit(db, me, "room.update", r, changes)
    db.commit()
    db.refresh(r)
    return {"success": True, "data": room_out(r)}


@router.delete("/admin/rooms/{room_id}")
def admin_delete_room(room_id: str, db: Session = Depends(get_db), me: User = Depends(require_admin)):
    r = db.get(Room, room_id)
    if not r:
        raise NotFoundError("Room not found")
    log_audit(db, me, "room.delete", r, {"title": r.title, "category": r.category})
    db.delete(r)
    db.commit()
    return {"success": True, "data": {}}


@router.get("/admin/audit")
def audit_trail(entityType: str | None = None, entityId: str | None = None, limit: int = 50, offset: int = 0,
                db: Session = Depends(get_db), me: User = Depends(require_admin)):
    total, rows = audit_service.recent_entries(db, entity_type=entityType, entity_id=entityId,
                                               limit=limit, offset=offset)
    return {"success": True, "total": total, "data": [audit_service.entry_out(r) for r in rows]}
