from datetime import datetime
from typing import List, Optional

from pydantic import Field

from filedispatch.api.schemas.actions import Action
from filedispatch.api.schemas.base import CamelModel
from filedispatch.api.schemas.conditions import ConditionGroup


class Rule(CamelModel):
    id: str = ""
    folder_id: str = ""
    name: str
    enabled: bool = True
    stop_processing: bool = True
    conditions: ConditionGroup = Field(default_factory=ConditionGroup)
    actions: List[Action] = Field(default_factory=list)
    position: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ReorderRequest(CamelModel):
    ordered_ids: List[str]


class ImportRequest(CamelModel):
    payload: str


class ExportResponse(CamelModel):
    folder_id: str
    payload: str
