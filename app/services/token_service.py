"""Refresh token lifecycle.

A refresh token is ``active`` until it is revoked (logout, account
deactivation) or found past ``expires_at`` on use, at which point it is
marked revoked. Refreshing does not rotate the token: the same cookie keeps
working until it expires. Rows past ``expires_at`` are deleted by the
``purge_expired_refresh_tokens`` job.
"""
import logging
import uuid
from datetime import datetime, timedelta
from typing import Callable

from sqlalchemy import update
from sqlalchemy.orm import Session

from app.core import errors
from app.core.clock import as_utc, utcnow
from app.core.config import settings
from app.core.errors import AuthError
from app.core.security import create_access_token, hash_refresh_token, new_refresh_token
from app.models.refresh_token import RefreshToken
from app.models.user import User

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def issue_refresh_token(db: Session, user_id: str, user_agent: str = "unknown", ip_address: str = "unknown",
                        now: Clock = utcnow, expires_days: int | None = None) -> str:
    if expires_days is None:
        expires_days = settings.REFRESH_TOKEN_EXPIRE_DAYS
    raw, digest = new_refresh_token()
    db.add(RefreshToken(
        id=str(uuid.uuid4()),
        user_id=user_id,
        token_hash=digest,
        expires_at=now() + timedelta(days=expires_days),
        is_revoked=False,
        user_agent=(user_agent or "unknown")[:512],
        ip_address=(ip_address or "unknown")[:64],
    ))
    db.commit()
    return raw


def find_refresh_token(db: Session, raw_token: str) -> RefreshToken | None:
    return db.query(RefreshToken).filter(RefreshToken.token_hash == hash_refresh_token(raw_token)).first()


def refresh_access_token(db: Session, raw_token: str | None, now: Clock = utcnow) -> tuple[str, User]:
    """Exchange a refresh token for a new access token.

    Raises AuthError with one of REFRESH_TOKEN_MISSING, INVALID_REFRESH_TOKEN,
    REFRESH_TOKEN_EXPIRED or USER_NOT_FOUND.
    """
    if not raw_token:
        raise AuthError("Refresh token not found", errors.REFRESH_TOKEN_MISSING)

    rt = find_refresh_token(db, raw_token)
    if not rt or rt.is_revoked:
        raise AuthError("Invalid refresh token", errors.INVALID_REFRESH_TOKEN)

    if as_utc(rt.expires_at) < now():
        # Conditional update keeps concurrent detections from racing on the flag.
        db.execute(
            update(RefreshToken)
            .where(RefreshToken.id == rt.id, RefreshToken.is_revoked.is_(False))
            .values(is_revoked=True)
        )
        db.commit()
        logger.info("refresh token %s for user %s expired; revoked", rt.id, rt.user_id)
        raise AuthError("Refresh token expired", errors.REFRESH_TOKEN_EXPIRED)

    user = db.get(User, rt.user_id)
    if not user or not user.is_active:
        raise AuthError("User not found", errors.USER_NOT_FOUND)

    return create_access_token(user.id), user


def revoke_refresh_token(db: Session, raw_token: str | None) -> bool:
    if not raw_token:
        return False
    result = db.execute(
        update(RefreshToken)
        .where(RefreshToken.token_hash == hash_refresh_token(raw_token), RefreshToken.is_revoked.is_(False))
        .values(is_revoked=True)
    )
    db.commit()
    return result.rowcount > 0


def revoke_user_tokens(db: Session, user_id: str) -> int:
    result = db.execute(
        update(RefreshToken)
        .where(RefreshToken.user_id == user_id, RefreshToken.is_revoked.is_(False))
        .values(is_revoked=True)
    )
    db.commit()
    return result.rowcount


def purge_expired(db: Session, now: Clock = utcnow) -> int:
    deleted = db.query(RefreshToken).filter(RefreshToken.expires_at < now()).delete(synchronize_session=False)
    db.commit()
    return deleted
