from enum import Enum
from typing import List

from pydantic import ConfigDict, Field

from filedispatch.api.schemas.base import CamelModel

MB = 1024 * 1024


class ThemeMode(str, Enum):
    LIGHT = "light"
    DARK = "dark"
    SYSTEM = "system"


def _default_ignore_patterns() -> List[str]:
    return [".DS_Store", "Thumbs.db", ".git", "node_modules", "*.tmp", "*.part"]


class AppSettings(CamelModel):
    """Réglages utilisateur, transmis tels quels au moteur (les clés inconnues sont conservées)"""

    model_config = ConfigDict(extra="allow")

    start_at_login: bool = True
    show_notifications: bool = True
    minimize_to_tray: bool = True
    debounce_ms: int = Field(default=500, ge=0)
    max_concurrent_rules: int = Field(default=4, ge=1)
    polling_fallback: bool = False
    ignore_patterns: List[str] = Field(default_factory=_default_ignore_patterns)
    log_retention_days: int = Field(default=30, ge=0)
    theme: ThemeMode = ThemeMode.SYSTEM
    date_format: str = "%Y-%m-%d"
    time_format: str = "%H-%M-%S"
    use_short_date_names: bool = True
    content_enable_ocr: bool = True
    content_max_text_bytes: int = 10 * MB
    content_max_ocr_image_bytes: int = 15 * MB
    content_max_ocr_pdf_bytes: int = 30 * MB
    content_max_ocr_pdf_pages: int = 25
    content_ocr_timeout_image_ms: int = 15_000
    content_ocr_timeout_pdf_ms: int = 120_000
    dry_run: bool = False
    allow_permanent_delete: bool = False
