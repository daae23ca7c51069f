from datetime import datetime
from typing import Dict, List, Optional

from pydantic import Field

from filedispatch.api.schemas.base import CamelModel


class StatusCounts(CamelModel):
    success: int = 0
    error: int = 0
    skipped: int = 0
    deleted: int = 0


class ThroughputHistogram(CamelModel):
    """Histogramme à fenêtre fixe; l'indice 0 est le seau le plus ancien"""
    counts: List[int]
    heights: List[int]
    recent: int = 0
    anchored_at: Optional[datetime] = None
    bucket_seconds: int
    window: int


class RuleHealth(CamelModel):
    rule_id: str
    last_activity_at: Optional[datetime] = None
    recent_events: int = 0
    recent_errors: int = 0


class AnalyticsSummary(CamelModel):
    total: int
    status_counts: StatusCounts
    throughput: ThroughputHistogram
    rule_health: Dict[str, RuleHealth] = Field(default_factory=dict)
    generated_at: datetime
