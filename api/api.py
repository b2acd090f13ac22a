from fastapi import APIRouter
from .endpoints.trackers import router as trackers_router
from .endpoints.user import router as user_router

router = APIRouter()
router.include_router(user_router, prefix="/user", tags=["User"])
router.include_router(trackers_router, prefix="/trackers", tags=["Trackers"])

@router.get("/health", include_in_schema=False)
def health():
    return {"status": "ok"}
