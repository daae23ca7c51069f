from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Query

from filedispatch.api.schemas.analytics import AnalyticsSummary
from filedispatch.dependencies import get_ledger_service
from filedispatch.services import analytics
from filedispatch.services.ledger_service import LedgerService

router = APIRouter(prefix="/analytics", tags=["analytics"])


@router.get("/summary", response_model=AnalyticsSummary)
async def get_summary(
        limit: int = Query(500, ge=1, le=10000),
        ledger: LedgerService = Depends(get_ledger_service)
):
    """Statistiques calculées sur les entrées récentes du journal"""
    return analytics.summarize(ledger.list(limit=limit), now=datetime.now(timezone.utc))
