import logging
import os
import shutil
from typing import Protocol

from filedispatch.api.schemas.logs import UndoEntry
from filedispatch.core.exceptions import ConflictError, ValidationError

logger = logging.getLogger(__name__)

# Types d'actions dont le fichier peut être remis à sa place d'origine
RELOCATING_ACTIONS = {"move", "rename", "sortIntoSubfolder"}


class UndoExecutor(Protocol):
    def restore(self, entry: UndoEntry) -> None:
        ...


class LocalUndoExecutor:
    """Annule une action sur le système de fichiers local"""

    def restore(self, entry: UndoEntry) -> None:
        current = entry.current_path
        original = entry.original_path

        if not os.path.exists(current):
            raise ConflictError(f"File no longer exists at current path: {current}")

        try:
            if entry.action_type in RELOCATING_ACTIONS:
                if os.path.exists(original):
                    raise ConflictError(f"Original path already exists: {original}")
                parent = os.path.dirname(original)
                if parent:
                    os.makedirs(parent, exist_ok=True)
                shutil.move(current, original)
                logger.info(f"Restored {current} -> {original}")
            elif entry.action_type == "copy":
                if os.path.isdir(current):
                    shutil.rmtree(current)
                else:
                    os.remove(current)
                logger.info(f"Removed copy {current}")
            else:
                raise ValidationError(f"Action is not undoable: {entry.action_type}")
        except OSError as e:
            raise ConflictError(f"Undo failed for {current}: {e}") from e
