from typing import List

from fastapi import APIRouter, Depends, Query, status

from filedispatch.api.schemas.base import MessageResponse
from filedispatch.api.schemas.logs import LogEntry
from filedispatch.config import settings
from filedispatch.dependencies import get_ledger_service, get_settings_service
from filedispatch.services.ledger_service import LedgerService
from filedispatch.services.settings_service import SettingsService

router = APIRouter(prefix="/logs", tags=["logs"])


@router.get("", response_model=List[LogEntry])
async def list_logs(
        limit: int = Query(settings.LOG_PAGE_LIMIT, ge=1, le=1000),
        offset: int = Query(0, ge=0),
        ledger: LedgerService = Depends(get_ledger_service)
):
    """Entrées du journal, les plus récentes en premier"""
    return ledger.list(limit=limit, offset=offset)


@router.post("", response_model=LogEntry, status_code=status.HTTP_201_CREATED)
async def append_log(entry: LogEntry, ledger: LedgerService = Depends(get_ledger_service)):
    return ledger.append(entry)


@router.delete("", response_model=MessageResponse)
async def clear_logs(ledger: LedgerService = Depends(get_ledger_service)):
    deleted = ledger.clear()
    return MessageResponse(message=f"{deleted} log entries cleared")


@router.post("/retention")
async def apply_retention(
        ledger: LedgerService = Depends(get_ledger_service),
        settings_service: SettingsService = Depends(get_settings_service)
):
    """Appliquer la rétention configurée au journal et à l'historique d'annulation"""
    user_settings = settings_service.get()
    return ledger.apply_retention(user_settings.log_retention_days, settings.UNDO_HISTORY_LIMIT)
