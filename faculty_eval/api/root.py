from fastapi import APIRouter

from faculty_eval.core.config import settings

router = APIRouter()


@router.get("/")
def root():
    return {
        "name": "Faculty Evaluation API",
        "status": "ok",
        "docs": "/docs",
        "health": "/health",
        "api": settings.API_PREFIX,
    }
