import logging
from typing import Any, Dict, List

import pydantic
from sqlalchemy.orm import Session

from filedispatch.api.schemas.rules import Rule
from filedispatch.core.exceptions import NotFoundError, ValidationError
from filedispatch.models.base import new_id
from filedispatch.models.rule import RuleRecord
from filedispatch.repositories.folder_repository import FolderRepository
from filedispatch.repositories.rule_repository import RuleRepository
from filedispatch.services.rule_transfer import dump_rules_yaml, load_rule_objects

logger = logging.getLogger(__name__)

COPY_SUFFIX = " (Copy)"


def plan_reorder(current_ids: List[str], ordered_ids: List[str]) -> Dict[str, int]:
    """Vérifie que `ordered_ids` est une permutation de `current_ids` et calcule les positions"""
    if len(set(ordered_ids)) != len(ordered_ids):
        raise ValidationError("Reorder contains duplicate rule ids")
    missing = set(current_ids) - set(ordered_ids)
    unknown = set(ordered_ids) - set(current_ids)
    if missing or unknown:
        details = []
        if missing:
            details.append(f"missing: {', '.join(sorted(missing))}")
        if unknown:
            details.append(f"unknown: {', '.join(sorted(unknown))}")
        raise ValidationError(f"Reorder must list every rule of the folder exactly once ({'; '.join(details)})")
    return {rule_id: index for index, rule_id in enumerate(ordered_ids)}


class RuleRegistry:
    """Collection ordonnée des règles de chaque dossier"""

    def __init__(self, db: Session):
        self.db = db
        self.rule_repo = RuleRepository(db)
        self.folder_repo = FolderRepository(db)

    def _record_data(self, rule: Rule) -> Dict[str, Any]:
        return {
            "name": rule.name,
            "enabled": rule.enabled,
            "stop_processing": rule.stop_processing,
            "conditions": rule.conditions.to_payload(),
            "actions": [action.to_payload() for action in rule.actions],
        }

    def _get_record(self, rule_id: str) -> RuleRecord:
        record = self.rule_repo.get_by_id(rule_id)
        if record is None:
            raise NotFoundError(f"Rule not found: {rule_id}")
        return record

    def _require_folder(self, folder_id: str) -> None:
        if not folder_id or not self.folder_repo.exists(folder_id):
            raise ValidationError(f"Folder does not exist: {folder_id}")

    def list(self, folder_id: str) -> List[Rule]:
        """Règles du dossier dans l'ordre d'évaluation"""
        return [record.to_schema() for record in self.rule_repo.list_by_folder(folder_id)]

    def get(self, rule_id: str) -> Rule:
        return self._get_record(rule_id).to_schema()

    def create(self, rule: Rule) -> Rule:
        """Crée une règle en fin de liste"""
        self._require_folder(rule.folder_id)
        data = self._record_data(rule)
        data.update({
            "id": new_id(),
            "folder_id": rule.folder_id,
            "position": self.rule_repo.next_position(rule.folder_id),
        })
        record = self.rule_repo.create(data)
        logger.info(f"Rule '{record.name}' created in folder {record.folder_id} at position {record.position}")
        return record.to_schema()

    def update(self, rule: Rule) -> Rule:
        """Remplace le contenu d'une règle; position et dossier sont conservés"""
        self._get_record(rule.id)
        record = self.rule_repo.update(rule.id, self._record_data(rule))
        logger.info(f"Rule '{record.name}' ({record.id}) updated")
        return record.to_schema()

    def delete(self, rule_id: str) -> None:
        # Les positions suivantes ne sont pas compactées
        if not self.rule_repo.delete(rule_id):
            raise NotFoundError(f"Rule not found: {rule_id}")
        logger.info(f"Rule {rule_id} deleted")

    def toggle(self, rule_id: str, enabled: bool) -> Rule:
        self._get_record(rule_id)
        record = self.rule_repo.set_enabled(rule_id, enabled)
        logger.info(f"Rule {rule_id} {'enabled' if enabled else 'disabled'}")
        return record.to_schema()

    def duplicate(self, rule_id: str) -> Rule:
        """Copie profonde d'une règle, ajoutée en fin de liste sous un nouvel identifiant"""
        source = self.get(rule_id)
        copy = source.model_copy(deep=True, update={"name": f"{source.name}{COPY_SUFFIX}"})
        return self.create(copy)

    def reorder(self, folder_id: str, ordered_ids: List[str]) -> List[Rule]:
        """Réassigne les positions selon l'ordre fourni, en une seule transaction"""
        if not self.folder_repo.exists(folder_id):
            raise NotFoundError(f"Folder not found: {folder_id}")
        plan_reorder(self.rule_repo.ids_for_folder(folder_id), ordered_ids)
        self.rule_repo.rewrite_positions(folder_id, ordered_ids)
        logger.info(f"Rules of folder {folder_id} reordered ({len(ordered_ids)} rules)")
        return self.list(folder_id)

    def export(self, folder_id: str) -> str:
        """Export YAML de toutes les règles du dossier, dans l'ordre des positions"""
        if not self.folder_repo.exists(folder_id):
            raise NotFoundError(f"Folder not found: {folder_id}")
        return dump_rules_yaml([rule.to_payload() for rule in self.list(folder_id)])

    def import_rules(self, folder_id: str, payload: str) -> List[Rule]:
        """Importe des règles (JSON ou YAML) dans un dossier; tout ou rien"""
        self._require_folder(folder_id)
        rules = []
        for index, item in enumerate(load_rule_objects(payload)):
            try:
                data = {key: value for key, value in item.items() if key != "folder_id"}
                rules.append(Rule.model_validate({**data, "folderId": folder_id}))
            except pydantic.ValidationError as e:
                raise ValidationError(f"Rule #{index + 1} in import is invalid: {e}") from e
            except RecursionError as e:
                raise ValidationError(f"Rule #{index + 1} in import nests condition groups too deeply") from e

        records = self.rule_repo.append_many(
            folder_id,
            [{**self._record_data(rule), "id": new_id()} for rule in rules],
        )
        logger.info(f"Imported {len(records)} rules into folder {folder_id}")
        return [record.to_schema() for record in records]
