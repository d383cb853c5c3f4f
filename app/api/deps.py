from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError
from sqlalchemy.orm import Session
from app.db.session import get_db
from app.core.security import decode_access_token
from app.models.user import User

bearer = HTTPBearer(auto_error=False)

def _user_from_token(token: str, db: Session) -> User:
    try:
        user_id = decode_access_token(token)
    except JWTError:
        raise HTTPException(status_code=401, detail="Not authorized, token failed")
    user = db.get(User, user_id)
    if not user or not user.is_active:
        raise HTTPException(status_code=401, detail="User not found or inactive")
    return user

def get_current_user(
    creds: HTTPAuthorizationCredentials | None = Depends(bearer),
    db: Session = Depends(get_db),
) -> User:
    if not creds:
        raise HTTPException(status_code=401, detail="Not authorized, no token")
    return _user_from_token(creds.credentials, db)

def get_optional_user(
    creds: HTTPAuthorizationCredentials | None = Depends(bearer),
    db: Session = Depends(get_db),
) -> User | None:
    """Guest checkout: no header means anonymous, a bad header is still rejected."""
    if not creds:
        return None
    return _user_from_token(creds.credentials, db)

def require_admin(user: User = Depends(get_current_user)) -> User:
    if not user.is_admin:
        raise HTTPException(status_code=403, detail="Not authorized as an admin")
    return user

def client_meta(request: Request) -> tuple[str, str]:
    """(user agent, ip) recorded with each refresh token."""
    user_agent = request.headers.get("user-agent") or "unknown"
    ip = request.client.host if request.client else "unknown"
    return user_agent, ip
