import math
import uuid

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import ConflictError, NotFoundError, ValidationError
from app.models.booking import Booking
from app.models.review import Review
from app.models.user import User

REVIEW_DECISIONS = ("approved", "rejected")


def paginate(page: int, limit: int) -> tuple[int, int, int]:
    page = max(page, 1)
    limit = min(max(limit, 1), 100)
    return page, limit, (page - 1) * limit


def pagination(page: int, limit: int, total: int) -> dict:
    return {"page": page, "limit": limit, "totalPages": math.ceil(total / limit) if limit else 0, "totalCount": total}


def create_review(db: Session, user: User, booking_id: str, rating: int, title: str, comment: str,
                  images: list[str] | None = None) -> Review:
    booking = db.query(Booking).filter(
        (Booking.id == booking_id) | (Booking.booking_id == booking_id),
        Booking.user_id == user.id,
    ).first()
    if not booking:
        raise NotFoundError("Booking not found or not associated with your account")
    if booking.status != "completed":
        raise ValidationError("Cannot review a booking that is not completed", "BOOKING_NOT_COMPLETED")

    existing = db.query(Review.id).filter(Review.booking_id == booking.id, Review.user_id == user.id).first()
    if existing:
        raise ConflictError("You have already reviewed this booking", "REVIEW_EXISTS")

    review = Review(
        id=str(uuid.uuid4()),
        user_id=user.id,
        booking_id=booking.id,
        room_category=booking.room_category,
        room_title=booking.room_title,
        rating=rating,
        title=title.strip(),
        comment=comment.strip(),
        images=images or [],
        status="pending",
        stay_date=booking.check_out,
    )
    db.add(review)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("You have already reviewed this booking", "REVIEW_EXISTS")
    db.refresh(review)
    return review


def room_reviews(db: Session, category: str, title: str, page: int = 1, limit: int = 10) -> dict:
    page, limit, skip = paginate(page, limit)
    base = db.query(Review).filter(
        Review.room_category == category,
        Review.room_title == title,
        Review.status == "approved",
    )
    total = base.count()
    rows = base.order_by(Review.created_at.desc()).offset(skip).limit(limit).all()

    avg = (
        db.query(func.avg(Review.rating))
        .filter(Review.room_category == category, Review.room_title == title, Review.status == "approved")
        .scalar()
    )
    counts = dict(
        db.query(Review.rating, func.count(Review.id))
        .filter(Review.room_category == category, Review.room_title == title, Review.status == "approved")
        .group_by(Review.rating)
        .all()
    )
    distribution = {str(r): int(counts.get(r, 0)) for r in (5, 4, 3, 2, 1)}

    reviewers = _reviewer_names(db, rows)
    return {
        "reviews": [review_out(r, reviewers.get(r.user_id)) for r in rows],
        "pagination": pagination(page, limit, total),
        "stats": {"averageRating": float(avg or 0), "ratingDistribution": distribution},
    }


def user_reviews(db: Session, user: User, page: int = 1, limit: int = 10) -> dict:
    page, limit, skip = paginate(page, limit)
    base = db.query(Review).filter(Review.user_id == user.id)
    total = base.count()
    rows = base.order_by(Review.created_at.desc()).offset(skip).limit(limit).all()
    return {"reviews": [review_out(r) for r in rows], "pagination": pagination(page, limit, total)}


def get_review(db: Session, review_id: str) -> Review:
    r = db.get(Review, review_id)
    if not r:
        raise NotFoundError("Review not found")
    return r


def update_review(db: Session, user: User, review_id: str, changes: dict) -> Review:
    r = get_review(db, review_id)
    if r.user_id != user.id:
        raise NotFoundError("Review not found or not associated with your account")
    for field in ("rating", "title", "comment", "images"):
        value = changes.get(field)
        if value is not None:
            setattr(r, field, value.strip() if isinstance(value, str) else value)
    # edits go back through moderation
    r.status = "pending"
    db.commit()
    db.refresh(r)
    return r


def delete_review(db: Session, user: User, review_id: str) -> None:
    r = get_review(db, review_id)
    if r.user_id != user.id and not user.is_admin:
        raise NotFoundError("Review not found or not associated with your account")
    db.delete(r)
    db.commit()


def set_review_status(db: Session, review_id: str, status: str) -> Review:
    if status not in REVIEW_DECISIONS:
        raise ValidationError("Please provide a valid status: approved or rejected")
    r = get_review(db, review_id)
    r.status = status
    db.commit()
    db.refresh(r)
    return r


def _reviewer_names(db: Session, rows: list[Review]) -> dict[str, dict]:
    ids = {r.user_id for r in rows}
    if not ids:
        return {}
    return {
        u.id: {"name": u.name, "profilePic": u.profile_pic}
        for u in db.query(User).filter(User.id.in_(ids)).all()
    }


def review_out(r: Review, reviewer: dict | None = None) -> dict:
    out = {
        "id": r.id,
        "bookingId": r.booking_id,
        "roomCategory": r.room_category,
        "roomTitle": r.room_title,
        "rating": r.rating,
        "title": r.title,
        "comment": r.comment,
        "images": r.images or [],
        "likes": r.likes,
        "status": r.status,
        "stayDate": r.stay_date.isoformat() if r.stay_date else None,
        "createdAt": r.created_at.isoformat() if r.created_at else None,
    }
    if reviewer is not None:
        out["user"] = reviewer
    return out
