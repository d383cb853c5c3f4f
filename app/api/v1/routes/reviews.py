from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.db.session import get_db
from app.models.user import User
from app.schemas.review import ReviewCreate, ReviewUpdate, ReviewStatusUpdate
from app.services import review_service
from app.services.audit_service import log_audit
from app.api.deps import get_current_user, require_admin

router = APIRouter(tags=["reviews"])

@router.post("/reviews", status_code=201)
def create_review(body: ReviewCreate, db: Session = Depends(get_db), me: User = Depends(get_current_user)):
    r = review_service.create_review(db, me, body.bookingId, body.rating, body.title, body.comment, body.images)
    return {"success": True, "message": "Review submitted successfully", "data": review_service.review_out(r)}

@router.get("/reviews/room/{category}/{title}")
def room_reviews(category: str, title: str, page: int = 1, limit: int = 10, db: Session = Depends(get_db)):
    return {"success": True, "data": review_service.room_reviews(db, category, title, page, limit)}

@router.get("/reviews/user")
def my_reviews(page: int = 1, limit: int = 10, db: Session = Depends(get_db), me: User = Depends(get_current_user)):
    return {"success": True, "data": review_service.user_reviews(db, me, page, limit)}

@router.put("/reviews/{review_id}")
def update_review(review_id: str, body: ReviewUpdate, db: Session = Depends(get_db), me: User = Depends(get_current_user)):
    r = review_service.update_review(db, me, review_id, body.model_dump(exclude_none=True))
    return {"success": True, "message": "Review updated successfully", "data": review_service.review_out(r)}

@router.delete("/reviews/{review_id}")
def delete_review(review_id: str, db: Session = Depends(get_db), me: User = Depends(get_current_user)):
    review_service.delete_review(db, me, review_id)
    return {"success": True, "message": "Review deleted successfully"}

@router.patch("/reviews/{review_id}/status")
def set_review_status(review_id: str, body: ReviewStatusUpdate, db: Session = Depends(get_db),
                      me: User = Depends(require_admin)):
    r = review_service.set_review_status(db, review_id, body.status)
    log_audit(db, me, "review.status", r, {"status": r.status})
    db.commit()
    return {"success": True, "message": f"Review {r.status}", "data": review_service.review_out(r)}
