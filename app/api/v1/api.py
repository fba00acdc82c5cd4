# File: app/api/v1/api.py
from fastapi import APIRouter
from app.api.v1.endpoints import auth, events, participants, checkin, event_statistics, images

# Explicit route table: every path is registered once, with its method
api_router = APIRouter()

api_router.include_router(
    auth.router,
    prefix="/auth",
    tags=["authentication"]
)

api_router.include_router(
    events.router,
    prefix="/events",
    tags=["events"]
)

api_router.include_router(
    participants.router,
    prefix="/participants",
    tags=["participants"]
)

api_router.include_router(
    checkin.router,
    tags=["check-in"]
)

api_router.include_router(
    event_statistics.router,
    tags=["statistics"]
)

api_router.include_router(
    images.router,
    prefix="/images",
    tags=["images"]
)
