from fastapi import APIRouter

from app.api.v1.endpoints import (
    admin,
    auth,
    likes,
    matches,
    messages,
    notifications,
    preferences,
    profiles,
    reports,
    ws,
)

router = APIRouter()

router.include_router(auth.router, prefix="/auth")
router.include_router(profiles.router, prefix="/profiles")
router.include_router(preferences.router, prefix="/preferences")
router.include_router(matches.router, prefix="/matches")
router.include_router(likes.router, prefix="/likes")
router.include_router(messages.router, prefix="/messages")
router.include_router(notifications.router, prefix="/notifications")
router.include_router(reports.router, prefix="/reports")
router.include_router(admin.router, prefix="/admin")

# Mounted at the application root: /ws/notifications
ws_router = APIRouter()
ws_router.include_router(ws.router, prefix="/ws")
