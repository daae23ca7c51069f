from sqlalchemy import Column, JSON, String, Text

from filedispatch.api.schemas.templates import RuleTemplate
from filedispatch.models.base import BaseModel, as_utc


class TemplateRecord(BaseModel):
    __tablename__ = "rule_templates"

    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    conditions = Column(JSON, nullable=False)
    actions = Column(JSON, nullable=False)

    def to_schema(self) -> RuleTemplate:
        return RuleTemplate.model_validate({
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "conditions": self.conditions,
            "actions": self.actions,
            "createdAt": as_utc(self.created_at),
        })
