import logging
import time

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import settings
from app.core.errors import AppError
from app.core.logging import setup_logging
from app.api.v1.api import api_router

setup_logging()
logger = logging.getLogger("app")

if settings.DEV_SECRET_IN_USE:
    logger.warning(
        "SECRET_KEY is not set: tokens are signed with the built-in DEVELOPMENT key. "
        "Set SECRET_KEY before exposing this server; ENV=production refuses to start without it."
    )

app = FastAPI(title=settings.APP_NAME)

# CORS: use CORS_ORIGINS from env in production; default to localhost for dev
_default_origins = [
    "http://127.0.0.1:3000", "http://localhost:3000",
    "http://127.0.0.1:5173", "http://localhost:5173",
]
_origins = [o.strip() for o in settings.CORS_ORIGINS.split(",") if o.strip()] if settings.CORS_ORIGINS else _default_origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    logger.info("%s %s -> %s (%.1f ms)", request.method, request.url.path, response.status_code,
                (time.perf_counter() - start) * 1000)
    return response


def _error(status_code: int, message: str, code: str | None = None) -> JSONResponse:
    body = {"success": False, "message": message}
    if code:
        body["code"] = code
    return JSONResponse(status_code=status_code, content=body)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return _error(exc.status_code, exc.message, exc.code)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    first = exc.errors()[0] if exc.errors() else {}
    field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    message = f"{field}: {first.get('msg')}" if field else "Invalid request"
    return _error(400, message, "VALIDATION_ERROR")


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return _error(exc.status_code, str(exc.detail))


@app.exception_handler(SQLAlchemyError)
async def db_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception("database error on %s %s", request.method, request.url.path)
    return _error(500, "Server Error", "SERVER_ERROR")


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("unhandled error on %s %s", request.method, request.url.path)
    return _error(500, "Server Error", "SERVER_ERROR")


app.include_router(api_router)


@app.get("/health")
def health():
    return {"status": "ok"}
