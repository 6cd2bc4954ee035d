from fastapi import APIRouter

from app.api.endpoints import auth, reports, trash, users

router = APIRouter()

router.include_router(auth.router)
router.include_router(reports.router)
router.include_router(trash.router)
router.include_router(users.router)
