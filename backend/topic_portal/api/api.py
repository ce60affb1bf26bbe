from fastapi import APIRouter
from topic_portal.api.endpoints import auth, export, submissions

api_router = APIRouter()
api_router.include_router(submissions.router, prefix="/submissions", tags=["submissions"])
api_router.include_router(export.router, prefix="/export", tags=["export"])
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
