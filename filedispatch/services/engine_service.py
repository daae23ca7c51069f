"""État du moteur d'automatisation exposé à l'interface."""
import logging
import threading
from typing import Optional

from sqlalchemy.orm import Session

from filedispatch.api.schemas.engine import (
    EngineError,
    EngineEvent,
    EngineStatus,
    EngineStatusSnapshot,
    WatchedFolder,
)
from filedispatch.models.base import utcnow
from filedispatch.repositories.folder_repository import FolderRepository
from filedispatch.services.settings_service import SettingsService
from filedispatch.services.snapshot_cache import SnapshotCache

logger = logging.getLogger(__name__)


class EngineState:
    """État du moteur partagé par tout le processus; chaque changement est publié"""

    def __init__(self):
        self._lock = threading.RLock()
        self.cache: SnapshotCache[EngineStatus] = SnapshotCache(loader=EngineStatus)

    @property
    def status(self) -> EngineStatus:
        return self.cache.get()

    def _apply(self, **changes) -> EngineStatus:
        with self._lock:
            updated = self.status.model_copy(update={**changes, "updated_at": utcnow()})
            self.cache.publish(updated)
            return updated

    def set_paused(self, paused: bool) -> bool:
        return self._apply(paused=paused).paused

    def toggle_paused(self) -> bool:
        with self._lock:
            return self.set_paused(not self.status.paused)

    def record_event(self, event: EngineEvent, queue_depth: Optional[int] = None) -> EngineStatus:
        changes = {"last_event": event}
        if queue_depth is not None:
            changes["queue_depth"] = max(0, queue_depth)
        return self._apply(**changes)

    def record_processed(self, count: int = 1) -> EngineStatus:
        with self._lock:
            return self._apply(processed_count=self.status.processed_count + count)

    def record_error(self, message: str) -> EngineStatus:
        logger.error(f"Engine error: {message}")
        return self._apply(last_error=EngineError(message=message))

    def reset(self) -> None:
        self.cache.publish(EngineStatus())


engine_state = EngineState()


class EngineService:
    """Contrat lecture / pause du moteur"""

    def __init__(self, db: Session, state: EngineState = engine_state):
        self.db = db
        self.state = state
        self.folder_repo = FolderRepository(db)
        self.settings_service = SettingsService(db)

    def get_status(self) -> EngineStatusSnapshot:
        watched = [
            WatchedFolder(folder_id=folder.id, path=folder.path, scan_depth=folder.scan_depth)
            for folder in self.folder_repo.get_watched()
            if folder.path
        ]
        return EngineStatusSnapshot(
            status=self.state.status,
            watched_folders=watched,
            dry_run=self.settings_service.get().dry_run,
        )

    def set_paused(self, paused: bool) -> bool:
        result = self.state.set_paused(paused)
        logger.info(f"Engine {'paused' if result else 'resumed'}")
        return result

    def toggle_paused(self) -> bool:
        result = self.state.toggle_paused()
        logger.info(f"Engine {'paused' if result else 'resumed'}")
        return result
