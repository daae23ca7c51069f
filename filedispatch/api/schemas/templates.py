from datetime import datetime
from typing import List, Optional

from pydantic import Field

from filedispatch.api.schemas.actions import Action
from filedispatch.api.schemas.base import CamelModel
from filedispatch.api.schemas.conditions import ConditionGroup


class RuleTemplate(CamelModel):
    id: str = ""
    name: str
    description: Optional[str] = None
    conditions: ConditionGroup = Field(default_factory=ConditionGroup)
    actions: List[Action] = Field(default_factory=list)
    created_at: Optional[datetime] = None
