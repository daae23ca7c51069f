from sqlalchemy import Boolean, Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from filedispatch.api.schemas.folders import Folder
from filedispatch.models.base import BaseModel, TimestampMixin, as_utc


class FolderRecord(BaseModel, TimestampMixin):
    __tablename__ = "folders"

    # Les groupes n'ont pas de chemin
    path = Column(String(1024), unique=True, nullable=True)
    name = Column(String(255), nullable=False)
    enabled = Column(Boolean, default=True, nullable=False)

    # Réglages par dossier
    scan_depth = Column(Integer, default=0, nullable=False)
    remove_duplicates = Column(Boolean, default=False, nullable=False)
    trash_incomplete_downloads = Column(Boolean, default=False, nullable=False)
    incomplete_timeout_minutes = Column(Integer, default=60, nullable=False)

    # Arborescence de groupes
    is_group = Column(Boolean, default=False, nullable=False)
    parent_id = Column(String(36), ForeignKey("folders.id", ondelete="SET NULL"), nullable=True, index=True)

    rules = relationship(
        "RuleRecord",
        back_populates="folder",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self):
        return f"<FolderRecord(name='{self.name}', path='{self.path}', enabled={self.enabled})>"

    def to_schema(self, rule_count=None) -> Folder:
        return Folder(
            id=self.id,
            path=self.path,
            name=self.name,
            enabled=self.enabled,
            scan_depth=self.scan_depth,
            rule_count=rule_count,
            remove_duplicates=self.remove_duplicates,
            trash_incomplete_downloads=self.trash_incomplete_downloads,
            incomplete_timeout_minutes=self.incomplete_timeout_minutes,
            is_group=self.is_group,
            parent_id=self.parent_id,
            created_at=as_utc(self.created_at),
            updated_at=as_utc(self.updated_at),
        )
