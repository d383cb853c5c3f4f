from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.db.session import get_db
from app.models.room import Room
from app.schemas.room import room_out
from app.core.errors import NotFoundError

router = APIRouter(tags=["rooms"])

@router.get("/rooms")
def list_rooms(category: str | None = None, db: Session = Depends(get_db)):
    q = db.query(Room)
    if category:
        q = q.filter(Room.category == category)
    rooms = q.order_by(Room.category, Room.price).all()
    return {"success": True, "count": len(rooms), "data": [room_out(r) for r in rooms]}

@router.get("/rooms/{room_id}")
def get_room(room_id: str, db: Session = Depends(get_db)):
    r = db.get(Room, room_id)
    if not r:
        raise NotFoundError("Room not found")
    return {"success": True, "data": room_out(r)}
