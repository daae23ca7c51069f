from sqlalchemy import Column, JSON

from filedispatch.models.base import BaseModel, TimestampMixin


class SettingsRecord(BaseModel, TimestampMixin):
    """Ligne unique contenant l'objet de réglages utilisateur"""
    __tablename__ = "app_settings"

    payload = Column(JSON, nullable=False)
