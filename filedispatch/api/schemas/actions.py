from enum import Enum
from typing import Annotated, Dict, Literal, Optional, Union

from pydantic import Field

from filedispatch.api.schemas.base import CamelModel


class ConflictResolution(str, Enum):
    RENAME = "rename"
    REPLACE = "replace"
    SKIP = "skip"


class ArchiveFormat(str, Enum):
    ZIP = "zip"
    TAR = "tar"
    TAR_GZ = "tarGz"


class ActionType(str, Enum):
    MOVE = "move"
    COPY = "copy"
    RENAME = "rename"
    SORT_INTO_SUBFOLDER = "sortIntoSubfolder"
    ARCHIVE = "archive"
    UNARCHIVE = "unarchive"
    DELETE = "delete"
    DELETE_PERMANENTLY = "deletePermanently"
    RUN_SCRIPT = "runScript"
    NOTIFY = "notify"
    OPEN = "open"
    PAUSE = "pause"
    CONTINUE = "continue"
    IGNORE = "ignore"


class MoveAction(CamelModel):
    type: Literal["move"] = "move"
    destination: str
    on_conflict: ConflictResolution = ConflictResolution.RENAME
    skip_duplicates: bool = False


class CopyAction(CamelModel):
    type: Literal["copy"] = "copy"
    destination: str
    on_conflict: ConflictResolution = ConflictResolution.RENAME
    skip_duplicates: bool = False


class RenameAction(CamelModel):
    type: Literal["rename"] = "rename"
    pattern: str
    on_conflict: ConflictResolution = ConflictResolution.RENAME


class SortIntoSubfolderAction(CamelModel):
    type: Literal["sortIntoSubfolder"] = "sortIntoSubfolder"
    destination: str
    on_conflict: ConflictResolution = ConflictResolution.RENAME


class ArchiveAction(CamelModel):
    type: Literal["archive"] = "archive"
    destination: str
    format: ArchiveFormat = ArchiveFormat.ZIP
    delete_after: bool = False
    on_conflict: ConflictResolution = ConflictResolution.RENAME


class UnarchiveAction(CamelModel):
    type: Literal["unarchive"] = "unarchive"
    destination: Optional[str] = None
    delete_after: bool = False


class DeleteAction(CamelModel):
    type: Literal["delete"] = "delete"
    permanent: bool = False


class DeletePermanentlyAction(CamelModel):
    type: Literal["deletePermanently"] = "deletePermanently"
    permanent: bool = True


class RunScriptAction(CamelModel):
    type: Literal["runScript"] = "runScript"
    command: str


class NotifyAction(CamelModel):
    type: Literal["notify"] = "notify"
    message: str


class OpenAction(CamelModel):
    type: Literal["open"] = "open"


class PauseAction(CamelModel):
    type: Literal["pause"] = "pause"
    duration_seconds: int = Field(ge=0)


class ContinueAction(CamelModel):
    type: Literal["continue"] = "continue"


class IgnoreAction(CamelModel):
    type: Literal["ignore"] = "ignore"


Action = Annotated[
    Union[
        MoveAction,
        CopyAction,
        RenameAction,
        SortIntoSubfolderAction,
        ArchiveAction,
        UnarchiveAction,
        DeleteAction,
        DeletePermanentlyAction,
        RunScriptAction,
        NotifyAction,
        OpenAction,
        PauseAction,
        ContinueAction,
        IgnoreAction,
    ],
    Field(discriminator="type"),
]


class ActionDetails(CamelModel):
    """Détail structuré d'une action exécutée, attaché à une entrée du journal"""
    source_path: str
    destination_path: Optional[str] = None
    metadata: Dict[str, str] = Field(default_factory=dict)


def describe_action(action: Action) -> str:
    """Libellé court d'une action, utilisé par l'aperçu"""
    if isinstance(action, (MoveAction, CopyAction, SortIntoSubfolderAction)):
        return f"{action.type} → {action.destination or '…'} (on conflict: {action.on_conflict.value})"
    if isinstance(action, RenameAction):
        return f"rename → {action.pattern or '…'} (on conflict: {action.on_conflict.value})"
    if isinstance(action, ArchiveAction):
        return f"archive ({action.format.value}) → {action.destination or '…'}"
    if isinstance(action, UnarchiveAction):
        return f"unarchive → {action.destination or 'same folder'}"
    if isinstance(action, RunScriptAction):
        return f"run script {action.command!r}"
    if isinstance(action, NotifyAction):
        return f"notify {action.message!r}"
    if isinstance(action, PauseAction):
        return f"pause {action.duration_seconds}s"
    return action.type
