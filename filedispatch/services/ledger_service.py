"""Journal des actions exécutées et registre d'annulation."""
import logging
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from sqlalchemy.orm import Session

from filedispatch.api.schemas.actions import ActionDetails
from filedispatch.api.schemas.logs import LogEntry, LogStatus, UndoEntry
from filedispatch.core.exceptions import FileDispatchError, NotFoundError
from filedispatch.external.undo_executor import LocalUndoExecutor, UndoExecutor
from filedispatch.models.base import as_utc, new_id, utcnow
from filedispatch.repositories.log_repository import LogRepository, UndoRepository
from filedispatch.repositories.rule_repository import RuleRepository

logger = logging.getLogger(__name__)

UNDO_ACTION_TYPE = "undo"
UNDO_RULE_NAME = "Undo"


class LedgerService:
    """Écriture en ajout seul du journal, et exécution des annulations"""

    def __init__(self, db: Session, executor: Optional[UndoExecutor] = None):
        self.db = db
        self.log_repo = LogRepository(db)
        self.undo_repo = UndoRepository(db)
        self.rule_repo = RuleRepository(db)
        self.executor = executor or LocalUndoExecutor()

    # === Journal ===

    def append(self, entry: LogEntry) -> LogEntry:
        """Seul chemin d'écriture du journal; l'entrée n'est plus jamais modifiée ensuite"""
        if entry.rule_id and not self.rule_repo.exists(entry.rule_id):
            raise NotFoundError(f"Rule not found: {entry.rule_id}")
        record = self.log_repo.create({
            "id": entry.id or new_id(),
            "rule_id": entry.rule_id,
            "rule_name": entry.rule_name,
            "file_path": entry.file_path,
            "action_type": entry.action_type,
            "action_detail": entry.action_detail.to_payload() if entry.action_detail else None,
            "status": entry.status.value,
            "error_message": entry.error_message,
            "created_at": as_utc(entry.created_at) or utcnow(),
        })
        logger.debug(f"Log entry {record.id} appended ({record.action_type}, {record.status})")
        return record.to_schema()

    def list(self, limit: int = 100, offset: int = 0) -> List[LogEntry]:
        """Entrées les plus récentes en premier"""
        return [record.to_schema() for record in self.log_repo.list_recent(limit=limit, offset=offset)]

    def clear(self) -> int:
        """Vide le journal; les annulations liées deviennent introuvables"""
        deleted = self.log_repo.clear()
        logger.info(f"Log cleared ({deleted} entries)")
        return deleted

    # === Annulation ===

    def record_undo(self, entry: UndoEntry) -> UndoEntry:
        if not self.log_repo.exists(entry.log_id):
            raise NotFoundError(f"Log entry not found: {entry.log_id}")
        record = self.undo_repo.create({
            "id": entry.id or new_id(),
            "log_id": entry.log_id,
            "action_type": entry.action_type,
            "original_path": entry.original_path,
            "current_path": entry.current_path,
            "created_at": as_utc(entry.created_at) or utcnow(),
        })
        return record.to_schema()

    def list_undo(self, limit: int = 50) -> List[UndoEntry]:
        return [record.to_schema() for record in self.undo_repo.list_recent(limit=limit)]

    def execute_undo(self, undo_id: str) -> LogEntry:
        """Rétablit `currentPath` vers `originalPath` et journalise la tentative.

        En cas de succès l'entrée d'annulation est consommée. En cas de conflit
        une entrée d'erreur est journalisée, l'entrée d'annulation est conservée
        et l'erreur remonte à l'appelant.
        """
        record = self.undo_repo.get_by_id(undo_id)
        if record is None:
            raise NotFoundError(f"Undo entry not found: {undo_id}")
        if not self.log_repo.exists(record.log_id):
            raise NotFoundError(f"Log entry for undo {undo_id} no longer exists")
        entry = record.to_schema()

        try:
            self.executor.restore(entry)
        except FileDispatchError as e:
            logger.warning(f"Undo {undo_id} failed: {e.message}")
            self.append(self._undo_log(entry, LogStatus.ERROR, e.message))
            raise

        log_entry = self.append(self._undo_log(entry, LogStatus.SUCCESS))
        self.undo_repo.delete(undo_id)
        logger.info(f"Undo {undo_id} applied ({entry.action_type})")
        return log_entry

    def _undo_log(self, entry: UndoEntry, status: LogStatus, error_message: Optional[str] = None) -> LogEntry:
        return LogEntry(
            rule_name=UNDO_RULE_NAME,
            file_path=entry.current_path,
            action_type=UNDO_ACTION_TYPE,
            action_detail=ActionDetails(
                source_path=entry.current_path,
                destination_path=entry.original_path,
                metadata={"undo_action": entry.action_type},
            ),
            status=status,
            error_message=error_message,
        )

    # === Rétention ===

    def apply_retention(self, log_retention_days: int, max_undo_entries: int,
                        now: Optional[datetime] = None) -> dict:
        """Purge les entrées plus anciennes que la rétention et les annulations au-delà du plafond"""
        now = now or datetime.now(timezone.utc)
        cutoff = as_utc(now) - timedelta(days=max(0, log_retention_days))
        logs_deleted = self.log_repo.delete_older_than(cutoff)
        undo_deleted = self.undo_repo.keep_most_recent(max(0, max_undo_entries))
        if logs_deleted or undo_deleted:
            logger.info(f"Retention applied: {logs_deleted} log entries, {undo_deleted} undo entries removed")
        return {"logsDeleted": logs_deleted, "undoDeleted": undo_deleted}
