"""Password hashing, access JWTs and opaque refresh tokens."""
import hashlib
import secrets
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt
from passlib.context import CryptContext

from app.core.config import settings

# PBKDF2 avoids bcrypt backend/version issues and the 72-byte bcrypt input limit.
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")
ALGO = "HS256"
ACCESS = "access"
REFRESH_TOKEN_BYTES = 40


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    return pwd_context.verify(password, password_hash)


def create_access_token(user_id: str, expires_minutes: int | None = None) -> str:
    minutes = settings.ACCESS_TOKEN_EXPIRE_MINUTES if expires_minutes is None else expires_minutes
    claims = {
        "id": user_id,
        "type": ACCESS,
        "exp": datetime.now(timezone.utc) + timedelta(minutes=minutes),
    }
    return jwt.encode(claims, settings.SECRET_KEY, algorithm=ALGO)


def decode_token(token: str) -> dict:
    return jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGO])


def decode_access_token(token: str) -> str:
    """Return the user id carried by a valid access token; raise JWTError otherwise."""
    claims = decode_token(token)
    if claims.get("type") != ACCESS or not claims.get("id"):
        raise JWTError("not an access token")
    return claims["id"]


def hash_refresh_token(raw_token: str) -> str:
    return hashlib.sha256(raw_token.encode("utf-8")).hexdigest()


def new_refresh_token() -> tuple[str, str]:
    """(raw, digest). The raw value goes to the client cookie, only the digest is stored."""
    raw = secrets.token_hex(REFRESH_TOKEN_BYTES)
    return raw, hash_refresh_token(raw)
