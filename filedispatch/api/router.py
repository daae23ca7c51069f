from fastapi import APIRouter

from filedispatch.api.v1 import analytics, engine, folders, logs, preview, rules, settings, templates, undo
from filedispatch.config import settings as app_settings

router = APIRouter()

router.include_router(folders.router, prefix="/api/v1")
router.include_router(rules.router, prefix="/api/v1")
router.include_router(logs.router, prefix="/api/v1")
router.include_router(undo.router, prefix="/api/v1")
router.include_router(settings.router, prefix="/api/v1")
router.include_router(engine.router, prefix="/api/v1")
router.include_router(preview.router, prefix="/api/v1")
router.include_router(analytics.router, prefix="/api/v1")
router.include_router(templates.router, prefix="/api/v1")


@router.get("/")
async def root():
    return {
        "message": f"{app_settings.APP_NAME} API",
        "version": "1.0.0",
        "docs": "/docs",
    }


@router.get("/health")
async def health():
    return {"status": "healthy"}
