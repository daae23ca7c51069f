from datetime import datetime
from typing import Optional

from pydantic import Field

from filedispatch.api.schemas.base import CamelModel


class Folder(CamelModel):
    id: str
    path: Optional[str] = None
    name: str
    enabled: bool = True
    # 0 = ce dossier uniquement, N = N niveaux, -1 = illimité
    scan_depth: int = Field(default=0, ge=-1)
    rule_count: Optional[int] = None
    remove_duplicates: bool = False
    trash_incomplete_downloads: bool = False
    incomplete_timeout_minutes: int = 60
    is_group: bool = False
    parent_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class FolderCreate(CamelModel):
    path: str
    name: str


class FolderSettingsUpdate(CamelModel):
    scan_depth: Optional[int] = None
    remove_duplicates: Optional[bool] = None
    trash_incomplete_downloads: Optional[bool] = None
    incomplete_timeout_minutes: Optional[int] = Field(default=None, ge=1)


class GroupCreate(CamelModel):
    name: str
    parent_id: Optional[str] = None


class FolderMove(CamelModel):
    parent_id: Optional[str] = None


class FolderRename(CamelModel):
    name: str
