from typing import List, Optional
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from filedispatch.models.folder import FolderRecord
from filedispatch.repositories.base_repository import BaseRepository


class FolderRepository(BaseRepository[FolderRecord]):
    """Repository pour les dossiers surveillés et les groupes"""

    def __init__(self, db: Session):
        super().__init__(FolderRecord, db)

    def list_ordered(self) -> List[FolderRecord]:
        """Tous les dossiers, triés par nom"""
        try:
            return self.db.query(FolderRecord).order_by(FolderRecord.name.asc(), FolderRecord.id.asc()).all()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise e

    def get_by_path(self, path: str) -> Optional[FolderRecord]:
        return self.get_by_field("path", path)

    def get_watched(self) -> List[FolderRecord]:
        """Dossiers actifs réellement surveillés (hors groupes)"""
        return (self.db.query(FolderRecord)
                .filter(FolderRecord.enabled == True, FolderRecord.is_group == False)  # noqa: E712
                .order_by(FolderRecord.name.asc())
                .all())

    def children_of(self, parent_id: str) -> List[FolderRecord]:
        return self.get_many_by_field("parent_id", parent_id)
