from typing import List

from fastapi import APIRouter, Depends, Query, status

from filedispatch.api.schemas.logs import LogEntry, UndoEntry
from filedispatch.config import settings
from filedispatch.dependencies import get_ledger_service
from filedispatch.services.ledger_service import LedgerService

router = APIRouter(prefix="/undo", tags=["undo"])


@router.get("", response_model=List[UndoEntry])
async def list_undo(
        limit: int = Query(settings.UNDO_HISTORY_LIMIT, ge=1, le=1000),
        ledger: LedgerService = Depends(get_ledger_service)
):
    return ledger.list_undo(limit=limit)


@router.post("", response_model=UndoEntry, status_code=status.HTTP_201_CREATED)
async def record_undo(entry: UndoEntry, ledger: LedgerService = Depends(get_ledger_service)):
    return ledger.record_undo(entry)


@router.post("/{undo_id}/execute", response_model=LogEntry)
async def execute_undo(undo_id: str, ledger: LedgerService = Depends(get_ledger_service)):
    """Annuler une action; retourne l'entrée de journal de l'annulation"""
    return ledger.execute_undo(undo_id)
