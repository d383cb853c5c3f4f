import logging
import uuid
from fastapi import APIRouter, Cookie, Depends, Request, Response
from sqlalchemy.orm import Session
from app.db.session import get_db
from app.schemas.auth import LoginRequest, RegisterRequest, ProfileUpdate, AuthResponse, UserOut
from app.models.user import User
from app.core import errors
from app.core.clock import utcnow
from app.core.config import settings
from app.core.errors import AuthError, ConflictError
from app.core.security import hash_password, verify_password, create_access_token
from app.services import token_service
from app.api.deps import get_current_user, client_meta

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


def user_out(u: User) -> UserOut:
    return UserOut(id=u.id, name=u.name, email=u.email, profilePic=u.profile_pic or "", role=u.role)


def profile_out(u: User) -> dict:
    return {
        **user_out(u).model_dump(),
        "phone": u.phone,
        "address": u.address,
        "bio": u.bio,
        "createdAt": u.created_at.isoformat() if u.created_at else None,
    }


def set_refresh_cookie(response: Response, raw_token: str) -> None:
    response.set_cookie(
        key=settings.REFRESH_COOKIE_NAME,
        value=raw_token,
        max_age=settings.REFRESH_TOKEN_EXPIRE_DAYS * 24 * 60 * 60,
        path=settings.refresh_cookie_path,
        httponly=True,
        secure=settings.is_production,
        samesite="strict",
    )


def start_session(db: Session, request: Request, response: Response, user: User) -> AuthResponse:
    """Access token in the body, refresh token only in the cookie."""
    user_agent, ip = client_meta(request)
    raw = token_service.issue_refresh_token(db, user.id, user_agent=user_agent, ip_address=ip)
    set_refresh_cookie(response, raw)
    return AuthResponse(user=user_out(user), token=create_access_token(user.id))


@router.post("/auth/register", response_model=AuthResponse, status_code=201)
def register(body: RegisterRequest, request: Request, response: Response, db: Session = Depends(get_db)):
    email = body.email.strip().lower()
    if db.query(User.id).filter(User.email == email).first():
        raise ConflictError("User already exists", "USER_EXISTS")
    user = User(
        id=str(uuid.uuid4()),
        name=body.name.strip(),
        email=email,
        password_hash=hash_password(body.password),
        role="user",
        is_active=True,
    )
    db.add(user)
    db.commit()
    logger.info("user %s registered", user.id)
    return start_session(db, request, response, user)


@router.post("/auth/login", response_model=AuthResponse)
def login(body: LoginRequest, request: Request, response: Response, db: Session = Depends(get_db)):
    user = db.query(User).filter(User.email == body.email.strip().lower()).first()
    if not user or not user.is_active or not verify_password(body.password, user.password_hash):
        raise AuthError("Invalid credentials", errors.INVALID_CREDENTIALS)
    user.last_login_at = utcnow()
    db.commit()
    return start_session(db, request, response, user)


@router.post("/auth/refresh-token")
def refresh_token(
    db: Session = Depends(get_db),
    raw: str | None = Cookie(default=None, alias=settings.REFRESH_COOKIE_NAME),
):
    access, user = token_service.refresh_access_token(db, raw)
    return {"success": True, "token": access, "user": user_out(user).model_dump()}


def clear_refresh_cookie(response: Response) -> None:
    response.delete_cookie(
        settings.REFRESH_COOKIE_NAME,
        path=settings.refresh_cookie_path,
        httponly=True,
        secure=settings.is_production,
        samesite="strict",
    )


# The cookie is scoped to the refresh-token path, so the browser only sends it here.
@router.delete("/auth/refresh-token")
def end_session(
    response: Response,
    db: Session = Depends(get_db),
    raw: str | None = Cookie(default=None, alias=settings.REFRESH_COOKIE_NAME),
):
    revoked = token_service.revoke_refresh_token(db, raw)
    clear_refresh_cookie(response)
    return {"success": True, "revoked": revoked}


@router.post("/auth/logout")
def logout(response: Response, db: Session = Depends(get_db), me: User = Depends(get_current_user)):
    """Sign the caller out everywhere: every refresh token of the account is revoked."""
    count = token_service.revoke_user_tokens(db, me.id)
    clear_refresh_cookie(response)
    logger.info("user %s logged out, %d sessions revoked", me.id, count)
    return {"success": True, "revoked": count > 0, "sessions": count}


@router.get("/auth/me")
def me(me: User = Depends(get_current_user)):
    return {"success": True, "user": profile_out(me)}


@router.put("/auth/profile")
def update_profile(body: ProfileUpdate, db: Session = Depends(get_db), me: User = Depends(get_current_user)):
    if body.email:
        email = body.email.strip().lower()
        taken = db.query(User.id).filter(User.email == email, User.id != me.id).first()
        if taken:
            raise ConflictError("Email already in use", "USER_EXISTS")
        me.email = email
    for field in ("name", "phone", "address", "bio"):
        value = getattr(body, field)
        if value:
            setattr(me, field, value)
    db.commit()
    db.refresh(me)
    return {"success": True, "data": profile_out(me)}
