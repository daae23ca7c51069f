import logging
from typing import Any, Dict, Union

import pydantic
from sqlalchemy.orm import Session

from filedispatch.api.schemas.settings import AppSettings
from filedispatch.core.exceptions import ValidationError
from filedispatch.repositories.settings_repository import SettingsRepository
from filedispatch.services.snapshot_cache import SnapshotCache

logger = logging.getLogger(__name__)

# Réglages partagés par tout le processus (moteur, aperçu, rétention)
settings_cache: SnapshotCache[AppSettings] = SnapshotCache()


class SettingsService:
    """Lecture et mise à jour de l'objet de réglages utilisateur"""

    def __init__(self, db: Session, cache: SnapshotCache[AppSettings] = settings_cache):
        self.db = db
        self.repo = SettingsRepository(db)
        self.cache = cache

    def _load(self) -> AppSettings:
        payload = self.repo.load()
        if payload is None:
            return AppSettings()
        return AppSettings.model_validate(payload)

    def get(self) -> AppSettings:
        return self.cache.get(self._load)

    def update(self, settings: Union[AppSettings, Dict[str, Any]]) -> AppSettings:
        """Remplace l'objet de réglages; les clés inconnues sont conservées"""
        if not isinstance(settings, AppSettings):
            try:
                settings = AppSettings.model_validate(settings)
            except pydantic.ValidationError as e:
                raise ValidationError(f"Invalid settings: {e}") from e
        saved = AppSettings.model_validate(self.repo.save(settings.to_payload()))
        self.cache.publish(saved)
        logger.info("Settings updated")
        return saved
