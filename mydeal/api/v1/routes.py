from fastapi import APIRouter
from mydeal.api.v1.endpoints import ai, dashboard, health, notifications, requests, users

router = APIRouter(prefix="/v1")

router.include_router(ai.router, prefix="/ai", tags=["AI"])
router.include_router(dashboard.router, prefix="/dashboard", tags=["Dashboard"])
router.include_router(health.router, prefix="/health", tags=["Health"])
router.include_router(notifications.router, prefix="/notifications", tags=["Notifications"])
router.include_router(requests.router, prefix="/requests", tags=["Requests"])
router.include_router(users.router, prefix="/users", tags=["Users"])
