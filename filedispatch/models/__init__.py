from .base import BaseModel
from .folder import FolderRecord
from .rule import RuleRecord
from .log_entry import LogRecord, UndoRecord
from .app_setting import SettingsRecord
from .template import TemplateRecord

__all__ = ["BaseModel", "FolderRecord", "RuleRecord", "LogRecord", "UndoRecord", "SettingsRecord", "TemplateRecord"]
