from typing import Any, Dict, List, Optional
from sqlalchemy.orm import Session
from filedispatch.models.app_setting import SettingsRecord
from filedispatch.models.template import TemplateRecord
from filedispatch.repositories.base_repository import BaseRepository

SETTINGS_ROW_ID = "default"


class SettingsRepository(BaseRepository[SettingsRecord]):
    """Stockage de l'objet de réglages (une seule ligne)"""

    def __init__(self, db: Session):
        super().__init__(SettingsRecord, db)

    def load(self) -> Optional[Dict[str, Any]]:
        record = self.get_by_id(SETTINGS_ROW_ID)
        return dict(record.payload) if record else None

    def save(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        if self.exists(SETTINGS_ROW_ID):
            record = self.update(SETTINGS_ROW_ID, {"payload": payload})
        else:
            record = self.create({"id": SETTINGS_ROW_ID, "payload": payload})
        return dict(record.payload)


class TemplateRepository(BaseRepository[TemplateRecord]):
    """Modèles de règles définis par l'utilisateur"""

    def __init__(self, db: Session):
        super().__init__(TemplateRecord, db)

    def list_recent(self) -> List[TemplateRecord]:
        return (self.db.query(TemplateRecord)
                .order_by(TemplateRecord.created_at.desc(), TemplateRecord.id.desc())
                .all())
