from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from app.core.config import settings


class Base(DeclarativeBase):
    pass


def engine_kwargs(url: str) -> dict:
    """Bounded waits on every backend: connect, pool checkout and statement execution."""
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False, "timeout": settings.DB_CONNECT_TIMEOUT_S}}
    return {
        "pool_pre_ping": True,
        "pool_timeout": settings.DB_POOL_TIMEOUT_S,
        "connect_args": {
            "connect_timeout": settings.DB_CONNECT_TIMEOUT_S,
            "options": f"-c statement_timeout={settings.DB_STATEMENT_TIMEOUT_MS}",
        },
    }


engine = create_engine(settings.DATABASE_URL, **engine_kwargs(settings.DATABASE_URL))
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
