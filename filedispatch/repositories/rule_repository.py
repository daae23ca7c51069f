from typing import Dict, List, Optional, Any
from sqlalchemy import func
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from filedispatch.models.base import utcnow
from filedispatch.models.rule import RuleRecord
from filedispatch.repositories.base_repository import BaseRepository


class RuleRepository(BaseRepository[RuleRecord]):
    """Repository pour la gestion des règles d'un dossier"""

    def __init__(self, db: Session):
        super().__init__(RuleRecord, db)

    def list_by_folder(self, folder_id: str) -> List[RuleRecord]:
        """Règles d'un dossier par position croissante (égalités départagées par identifiant)"""
        try:
            return (self.db.query(RuleRecord)
                    .filter(RuleRecord.folder_id == folder_id)
                    .order_by(RuleRecord.position.asc(), RuleRecord.id.asc())
                    .all())
        except SQLAlchemyError as e:
            self.db.rollback()
            raise e

    def ids_for_folder(self, folder_id: str) -> List[str]:
        return [rule.id for rule in self.list_by_folder(folder_id)]

    def count_by_folder(self, folder_id: str) -> int:
        return self.db.query(RuleRecord).filter(RuleRecord.folder_id == folder_id).count()

    def counts_by_folder(self) -> Dict[str, int]:
        rows = (self.db.query(RuleRecord.folder_id, func.count(RuleRecord.id))
                .group_by(RuleRecord.folder_id)
                .all())
        return {folder_id: count for folder_id, count in rows}

    def next_position(self, folder_id: str) -> int:
        """Position de fin de liste: max + 1, soit le nombre de règles tant que les positions sont denses"""
        current_max = (self.db.query(func.max(RuleRecord.position))
                       .filter(RuleRecord.folder_id == folder_id)
                       .scalar())
        return 0 if current_max is None else current_max + 1

    def append_many(self, folder_id: str, rules_data: List[Dict[str, Any]]) -> List[RuleRecord]:
        """Ajoute plusieurs règles en fin de liste, en une seule transaction"""
        position = self.next_position(folder_id)
        objects_data = []
        for offset, data in enumerate(rules_data):
            objects_data.append({**data, "folder_id": folder_id, "position": position + offset})
        return self.bulk_create(objects_data)

    def set_enabled(self, rule_id: str, enabled: bool) -> Optional[RuleRecord]:
        return self.update(rule_id, {"enabled": enabled})

    def rewrite_positions(self, folder_id: str, ordered_ids: List[str]) -> None:
        """Réécrit toutes les positions d'un dossier dans une seule transaction"""
        try:
            now = utcnow()
            rules = {rule.id: rule for rule in self.list_by_folder(folder_id)}
            for position, rule_id in enumerate(ordered_ids):
                rule = rules[rule_id]
                if rule.position != position:
                    rule.position = position
                    rule.updated_at = now
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise e
