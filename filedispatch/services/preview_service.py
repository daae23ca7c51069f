import logging
import os
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy.orm import Session

from filedispatch.api.schemas.actions import describe_action
from filedispatch.api.schemas.preview import PreviewItem
from filedispatch.api.schemas.rules import Rule
from filedispatch.core.exceptions import NotFoundError, ValidationError
from filedispatch.external.file_inspector import FileInspector
from filedispatch.models.folder import FolderRecord
from filedispatch.repositories.folder_repository import FolderRepository
from filedispatch.services.condition_evaluator import EvaluationContext, ShellRunner, evaluate_detailed, uses_condition
from filedispatch.services.rule_registry import RuleRegistry
from filedispatch.services.settings_service import SettingsService

logger = logging.getLogger(__name__)

DEFAULT_DRAFT_MAX_FILES = 100


class PreviewService:
    """Aperçu sans effet de bord des fichiers qu'une règle traiterait"""

    def __init__(self, db: Session, shell_runner: Optional[ShellRunner] = None):
        self.db = db
        self.registry = RuleRegistry(db)
        self.folder_repo = FolderRepository(db)
        self.settings_service = SettingsService(db)
        self.shell_runner = shell_runner

    def _inspector(self) -> FileInspector:
        settings = self.settings_service.get()
        return FileInspector(
            max_text_bytes=settings.content_max_text_bytes,
            ignore_patterns=settings.ignore_patterns,
        )

    def _context(self) -> EvaluationContext:
        return EvaluationContext(now=datetime.now(timezone.utc), shell_runner=self.shell_runner)

    def _folder_for(self, rule: Rule) -> FolderRecord:
        folder = self.folder_repo.get_by_id(rule.folder_id)
        if folder is None:
            raise NotFoundError(f"Folder not found: {rule.folder_id}")
        if not folder.path or not os.path.isdir(folder.path):
            raise NotFoundError(f"Folder path does not exist: {folder.path}")
        return folder

    def _preview_path(self, rule: Rule, path: str, inspector: FileInspector,
                      context: EvaluationContext) -> PreviewItem:
        facts = inspector.inspect(path, with_contents=uses_condition(rule.conditions, "contents"))
        result = evaluate_detailed(rule.conditions, facts, context)
        return PreviewItem(
            file_path=path,
            matched=result.matched,
            condition_results=result.condition_results,
            actions=[describe_action(action) for action in rule.actions] if result.matched else [],
        )

    def _preview_folder(self, rule: Rule, max_files: Optional[int] = None) -> List[PreviewItem]:
        folder = self._folder_for(rule)
        inspector = self._inspector()
        context = self._context()
        items = []
        for path in inspector.scan(folder.path, folder.scan_depth):
            if max_files is not None and len(items) >= max_files:
                break
            items.append(self._preview_path(rule, path, inspector, context))
        logger.debug(f"Preview of rule '{rule.name}': {sum(item.matched for item in items)}/{len(items)} matched")
        return items

    def preview_rule(self, rule_id: str) -> List[PreviewItem]:
        """Évalue la règle sur chaque fichier de son dossier (selon la profondeur de scan)"""
        return self._preview_folder(self.registry.get(rule_id))

    def preview_draft(self, rule: Rule, max_files: int = DEFAULT_DRAFT_MAX_FILES) -> List[PreviewItem]:
        """Aperçu d'une règle non enregistrée, limité à `max_files` fichiers"""
        if max_files < 1:
            raise ValidationError("max_files must be at least 1")
        return self._preview_folder(rule, max_files=max_files)

    def preview_file(self, rule_id: str, file_path: str) -> PreviewItem:
        rule = self.registry.get(rule_id)
        if not os.path.exists(file_path):
            raise NotFoundError(f"File not found: {file_path}")
        return self._preview_path(rule, file_path, self._inspector(), self._context())
