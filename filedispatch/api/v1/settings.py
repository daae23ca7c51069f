from fastapi import APIRouter, Depends

from filedispatch.api.schemas.settings import AppSettings
from filedispatch.dependencies import get_settings_service
from filedispatch.services.settings_service import SettingsService

router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("", response_model=AppSettings)
async def get_settings(service: SettingsService = Depends(get_settings_service)):
    return service.get()


@router.put("", response_model=AppSettings)
async def update_settings(data: AppSettings, service: SettingsService = Depends(get_settings_service)):
    return service.update(data)
