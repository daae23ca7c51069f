from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import ConfigDict

from filedispatch.api.schemas.actions import ActionDetails
from filedispatch.api.schemas.base import CamelModel


class LogStatus(str, Enum):
    SUCCESS = "success"
    ERROR = "error"
    SKIPPED = "skipped"


class LogEntry(CamelModel):
    """Trace immuable d'une action exécutée"""

    model_config = ConfigDict(frozen=True)

    id: str = ""
    rule_id: Optional[str] = None
    rule_name: Optional[str] = None
    file_path: str
    action_type: str
    action_detail: Optional[ActionDetails] = None
    status: LogStatus
    error_message: Optional[str] = None
    created_at: Optional[datetime] = None


class UndoEntry(CamelModel):
    """Action réversible rattachée à l'entrée de journal qu'elle annule"""

    model_config = ConfigDict(frozen=True)

    id: str = ""
    log_id: str
    action_type: str
    original_path: str
    current_path: str
    created_at: Optional[datetime] = None
