from sqlalchemy import Boolean, Column, ForeignKey, Integer, JSON, String
from sqlalchemy.orm import relationship

from filedispatch.api.schemas.rules import Rule
from filedispatch.models.base import BaseModel, TimestampMixin, as_utc


class RuleRecord(BaseModel, TimestampMixin):
    __tablename__ = "rules"

    folder_id = Column(String(36), ForeignKey("folders.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(255), nullable=False)

    # Statut
    enabled = Column(Boolean, default=True, nullable=False)
    stop_processing = Column(Boolean, default=True, nullable=False)

    # Configuration (forme camelCase sérialisée)
    conditions = Column(JSON, nullable=False)
    actions = Column(JSON, nullable=False)

    # Ordre d'évaluation dans le dossier
    position = Column(Integer, nullable=False, default=0)

    folder = relationship("FolderRecord", back_populates="rules")

    def __repr__(self):
        return f"<RuleRecord(name='{self.name}', position={self.position}, enabled={self.enabled})>"

    def to_schema(self) -> Rule:
        return Rule.model_validate({
            "id": self.id,
            "folderId": self.folder_id,
            "name": self.name,
            "enabled": self.enabled,
            "stopProcessing": self.stop_processing,
            "conditions": self.conditions,
            "actions": self.actions,
            "position": self.position,
            "createdAt": as_utc(self.created_at),
            "updatedAt": as_utc(self.updated_at),
        })
