from sqlalchemy import Column, ForeignKey, JSON, String, Text

from filedispatch.api.schemas.logs import LogEntry, UndoEntry
from filedispatch.models.base import BaseModel, as_utc


class LogRecord(BaseModel):
    __tablename__ = "logs"

    rule_id = Column(String(36), ForeignKey("rules.id", ondelete="SET NULL"), nullable=True, index=True)
    rule_name = Column(String(255), nullable=True)
    file_path = Column(Text, nullable=False)
    action_type = Column(String(50), nullable=False)
    action_detail = Column(JSON, nullable=True)
    status = Column(String(20), nullable=False)  # success, error, skipped
    error_message = Column(Text, nullable=True)

    def to_schema(self) -> LogEntry:
        return LogEntry.model_validate({
            "id": self.id,
            "ruleId": self.rule_id,
            "ruleName": self.rule_name,
            "filePath": self.file_path,
            "actionType": self.action_type,
            "actionDetail": self.action_detail,
            "status": self.status,
            "errorMessage": self.error_message,
            "createdAt": as_utc(self.created_at),
        })


class UndoRecord(BaseModel):
    __tablename__ = "undo_entries"

    log_id = Column(String(36), ForeignKey("logs.id", ondelete="CASCADE"), nullable=False, index=True)
    action_type = Column(String(50), nullable=False)
    original_path = Column(Text, nullable=False)
    current_path = Column(Text, nullable=False)

    def to_schema(self) -> UndoEntry:
        return UndoEntry(
            id=self.id,
            log_id=self.log_id,
            action_type=self.action_type,
            original_path=self.original_path,
            current_path=self.current_path,
            created_at=as_utc(self.created_at),
        )
