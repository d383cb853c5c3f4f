from fastapi import APIRouter
from app.core.config import settings
from app.api.v1.routes.auth import router as auth_router
from app.api.v1.routes.bookings import router as bookings_router
from app.api.v1.routes.rooms import router as rooms_router
from app.api.v1.routes.reviews import router as reviews_router
from app.api.v1.routes.admin import router as admin_router

api_router = APIRouter(prefix=settings.API_PREFIX)
api_router.include_router(auth_router)
api_router.include_router(bookings_router)
api_router.include_router(rooms_router)
api_router.include_router(reviews_router)
api_router.include_router(admin_router)
