from datetime import datetime, timezone
from typing import List, Optional

from pydantic import Field

from filedispatch.api.schemas.base import CamelModel


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class EngineEvent(CamelModel):
    path: str
    folder_id: str
    kind: str
    received_at: datetime = Field(default_factory=_utcnow)


class EngineError(CamelModel):
    message: str
    occurred_at: datetime = Field(default_factory=_utcnow)


class EngineStatus(CamelModel):
    paused: bool = False
    queue_depth: int = 0
    processed_count: int = 0
    last_event: Optional[EngineEvent] = None
    last_error: Optional[EngineError] = None
    updated_at: datetime = Field(default_factory=_utcnow)


class WatchedFolder(CamelModel):
    folder_id: str
    path: str
    scan_depth: int


class EngineStatusSnapshot(CamelModel):
    status: EngineStatus
    watched_folders: List[WatchedFolder] = Field(default_factory=list)
    dry_run: bool = False


class PauseRequest(CamelModel):
    paused: bool


class PauseResponse(CamelModel):
    paused: bool
