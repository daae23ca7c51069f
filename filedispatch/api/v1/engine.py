from fastapi import APIRouter, Depends

from filedispatch.api.schemas.engine import EngineStatusSnapshot, PauseRequest, PauseResponse
from filedispatch.dependencies import get_engine_service
from filedispatch.services.engine_service import EngineService

router = APIRouter(prefix="/engine", tags=["engine"])


@router.get("/status", response_model=EngineStatusSnapshot)
async def get_status(service: EngineService = Depends(get_engine_service)):
    """État du moteur et dossiers surveillés"""
    return service.get_status()


@router.post("/pause", response_model=PauseResponse)
async def set_paused(data: PauseRequest, service: EngineService = Depends(get_engine_service)):
    return PauseResponse(paused=service.set_paused(data.paused))


@router.post("/toggle", response_model=PauseResponse)
async def toggle_paused(service: EngineService = Depends(get_engine_service)):
    return PauseResponse(paused=service.toggle_paused())
