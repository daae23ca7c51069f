from datetime import datetime
from typing import List
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from filedispatch.models.log_entry import LogRecord, UndoRecord
from filedispatch.repositories.base_repository import BaseRepository


class LogRepository(BaseRepository[LogRecord]):
    """Journal en ajout seul: insertion, lecture paginée, purge"""

    def __init__(self, db: Session):
        super().__init__(LogRecord, db)

    def list_recent(self, limit: int = 100, offset: int = 0) -> List[LogRecord]:
        """Entrées les plus récentes en premier"""
        try:
            return (self.db.query(LogRecord)
                    .order_by(LogRecord.created_at.desc(), LogRecord.id.desc())
                    .offset(offset)
                    .limit(limit)
                    .all())
        except SQLAlchemyError as e:
            self.db.rollback()
            raise e

    def clear(self) -> int:
        """Supprime toutes les entrées ainsi que les annulations qui les référencent"""
        try:
            self.db.query(UndoRecord).delete(synchronize_session=False)
            deleted = self.db.query(LogRecord).delete(synchronize_session=False)
            self.db.commit()
            return deleted
        except SQLAlchemyError as e:
            self.db.rollback()
            raise e

    def delete_older_than(self, cutoff: datetime) -> int:
        try:
            stale = self.db.query(LogRecord.id).filter(LogRecord.created_at < cutoff)
            self.db.query(UndoRecord).filter(UndoRecord.log_id.in_(stale.scalar_subquery())).delete(
                synchronize_session=False
            )
            deleted = self.db.query(LogRecord).filter(LogRecord.created_at < cutoff).delete(
                synchronize_session=False
            )
            self.db.commit()
            return deleted
        except SQLAlchemyError as e:
            self.db.rollback()
            raise e


class UndoRepository(BaseRepository[UndoRecord]):
    """Entrées d'annulation, liées causalement au journal"""

    def __init__(self, db: Session):
        super().__init__(UndoRecord, db)

    def list_recent(self, limit: int = 50) -> List[UndoRecord]:
        try:
            return (self.db.query(UndoRecord)
                    .order_by(UndoRecord.created_at.desc(), UndoRecord.id.desc())
                    .limit(limit)
                    .all())
        except SQLAlchemyError as e:
            self.db.rollback()
            raise e

    def keep_most_recent(self, max_entries: int) -> int:
        """Ne conserve que les `max_entries` annulations les plus récentes"""
        try:
            keep = [entry.id for entry in self.list_recent(limit=max_entries)]
            query = self.db.query(UndoRecord)
            if keep:
                query = query.filter(UndoRecord.id.notin_(keep))
            deleted = query.delete(synchronize_session=False)
            self.db.commit()
            return deleted
        except SQLAlchemyError as e:
            self.db.rollback()
            raise e
