import logging
from typing import List

from sqlalchemy.orm import Session

from filedispatch.api.schemas.templates import RuleTemplate
from filedispatch.core.exceptions import NotFoundError, ValidationError
from filedispatch.models.base import as_utc, new_id, utcnow
from filedispatch.repositories.settings_repository import TemplateRepository
from filedispatch.services.snapshot_cache import SnapshotCache

logger = logging.getLogger(__name__)

template_cache: SnapshotCache[List[RuleTemplate]] = SnapshotCache()


class TemplateService:
    """Modèles de règles enregistrés par l'utilisateur"""

    def __init__(self, db: Session, cache: SnapshotCache[List[RuleTemplate]] = template_cache):
        self.db = db
        self.repo = TemplateRepository(db)
        self.cache = cache

    def _load(self) -> List[RuleTemplate]:
        return [record.to_schema() for record in self.repo.list_recent()]

    def list(self) -> List[RuleTemplate]:
        """Modèles, les plus récents en premier"""
        return list(self.cache.get(self._load) or [])

    def save(self, template: RuleTemplate) -> RuleTemplate:
        """Crée ou remplace un modèle (par identifiant)"""
        if not template.name.strip():
            raise ValidationError("Template name is required")
        data = {
            "name": template.name.strip(),
            "description": template.description,
            "conditions": template.conditions.to_payload(),
            "actions": [action.to_payload() for action in template.actions],
        }
        if template.id and self.repo.exists(template.id):
            record = self.repo.update(template.id, data)
        else:
            data["id"] = template.id or new_id()
            data["created_at"] = as_utc(template.created_at) or utcnow()
            record = self.repo.create(data)
        logger.info(f"Template '{record.name}' saved")
        self._refresh()
        return record.to_schema()

    def remove(self, template_id: str) -> None:
        if not self.repo.delete(template_id):
            raise NotFoundError(f"Template not found: {template_id}")
        logger.info(f"Template {template_id} removed")
        self._refresh()

    def _refresh(self) -> None:
        self.cache.invalidate()
        self.cache.publish(self._load())
