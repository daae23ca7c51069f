import logging
import os
from typing import List, Optional

from sqlalchemy.orm import Session

from filedispatch.api.schemas.folders import Folder, FolderSettingsUpdate
from filedispatch.core.exceptions import NotFoundError, ValidationError
from filedispatch.models.folder import FolderRecord
from filedispatch.repositories.folder_repository import FolderRepository
from filedispatch.repositories.rule_repository import RuleRepository

logger = logging.getLogger(__name__)


def validate_scan_depth(scan_depth: int) -> int:
    """0 = ce dossier, N = N niveaux, -1 = illimité; aucune autre valeur négative"""
    if isinstance(scan_depth, bool) or not isinstance(scan_depth, int) or scan_depth < -1:
        raise ValidationError(f"Scan depth must be an integer >= -1, got {scan_depth!r}")
    return scan_depth


class FolderService:
    """Service de gestion des dossiers surveillés et des groupes"""

    def __init__(self, db: Session):
        self.db = db
        self.folder_repo = FolderRepository(db)
        self.rule_repo = RuleRepository(db)

    def _get_record(self, folder_id: str) -> FolderRecord:
        record = self.folder_repo.get_by_id(folder_id)
        if record is None:
            raise NotFoundError(f"Folder not found: {folder_id}")
        return record

    def _to_schema(self, record: FolderRecord) -> Folder:
        return record.to_schema(rule_count=self.rule_repo.count_by_folder(record.id))

    def list(self) -> List[Folder]:
        """Tous les dossiers triés par nom, avec leur nombre de règles"""
        counts = self.rule_repo.counts_by_folder()
        return [record.to_schema(rule_count=counts.get(record.id, 0)) for record in self.folder_repo.list_ordered()]

    def get(self, folder_id: str) -> Folder:
        return self._to_schema(self._get_record(folder_id))

    def add(self, path: str, name: Optional[str] = None) -> Folder:
        """Ajoute un dossier surveillé; le chemin doit être unique"""
        if not path or not path.strip():
            raise ValidationError("Folder path is required")
        path = os.path.normpath(path.strip())
        if self.folder_repo.get_by_path(path) is not None:
            raise ValidationError(f"Folder is already watched: {path}")
        name = (name or "").strip() or os.path.basename(path) or path
        record = self.folder_repo.create({"path": path, "name": name})
        logger.info(f"Folder '{name}' added ({path})")
        return self._to_schema(record)

    def remove(self, folder_id: str) -> None:
        """Supprime un dossier et, en cascade, ses règles"""
        self._get_record(folder_id)
        self.folder_repo.delete(folder_id)
        logger.info(f"Folder {folder_id} removed")

    def toggle(self, folder_id: str, enabled: bool) -> Folder:
        self._get_record(folder_id)
        record = self.folder_repo.update(folder_id, {"enabled": enabled})
        logger.info(f"Folder {folder_id} {'enabled' if enabled else 'disabled'}")
        return self._to_schema(record)

    def update_settings(self, folder_id: str, update: FolderSettingsUpdate) -> Folder:
        """Met à jour les réglages par dossier; seuls les champs fournis changent"""
        self._get_record(folder_id)
        changes = update.model_dump(exclude_none=True)
        if "scan_depth" in changes:
            validate_scan_depth(changes["scan_depth"])
        if not changes:
            return self.get(folder_id)
        record = self.folder_repo.update(folder_id, changes)
        logger.info(f"Folder {folder_id} settings updated: {', '.join(sorted(changes))}")
        return self._to_schema(record)

    def create_group(self, name: str, parent_id: Optional[str] = None) -> Folder:
        """Crée un groupe (dossier sans chemin) servant à organiser l'arborescence"""
        if not name or not name.strip():
            raise ValidationError("Group name is required")
        if parent_id is not None:
            self._require_group(parent_id)
        record = self.folder_repo.create({"name": name.strip(), "is_group": True, "parent_id": parent_id})
        logger.info(f"Group '{record.name}' created")
        return self._to_schema(record)

    def move(self, folder_id: str, parent_id: Optional[str]) -> Folder:
        """Déplace un dossier ou un groupe sous un autre groupe (ou à la racine)"""
        self._get_record(folder_id)
        if parent_id is not None:
            self._require_group(parent_id)
            if parent_id == folder_id or self._is_descendant(parent_id, folder_id):
                raise ValidationError("A folder cannot be moved under itself or one of its descendants")
        record = self.folder_repo.update(folder_id, {"parent_id": parent_id})
        logger.info(f"Folder {folder_id} moved under {parent_id or 'root'}")
        return self._to_schema(record)

    def rename(self, folder_id: str, name: str) -> Folder:
        if not name or not name.strip():
            raise ValidationError("Folder name is required")
        self._get_record(folder_id)
        record = self.folder_repo.update(folder_id, {"name": name.strip()})
        return self._to_schema(record)

    def _require_group(self, group_id: str) -> FolderRecord:
        group = self.folder_repo.get_by_id(group_id)
        if group is None:
            raise NotFoundError(f"Group not found: {group_id}")
        if not group.is_group:
            raise ValidationError(f"Folder {group_id} is not a group")
        return group

    def _is_descendant(self, candidate_id: str, ancestor_id: str) -> bool:
        """Vrai si `candidate_id` est sous `ancestor_id` dans l'arborescence"""
        pending = [child.id for child in self.folder_repo.children_of(ancestor_id)]
        seen = set()
        while pending:
            current = pending.pop()
            if current == candidate_id:
                return True
            if current in seen:
                continue
            seen.add(current)
            pending.extend(child.id for child in self.folder_repo.children_of(current))
        return False
