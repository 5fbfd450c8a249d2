"""Main API router aggregation."""

from fastapi import APIRouter

from nobby.api.auth import router as auth_router
from nobby.api.boards import router as boards_router
from nobby.api.topics import router as topics_router
from nobby.api.users import router as users_router

# Main API router
api_router = APIRouter(prefix="/api")

# Include all sub-routers
api_router.include_router(auth_router)
api_router.include_router(boards_router)
api_router.include_router(topics_router)
api_router.include_router(users_router)
