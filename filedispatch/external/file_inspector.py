"""Collecte des faits d'un fichier sur le disque local."""
import fnmatch
import logging
import mimetypes
import os
from datetime import datetime, timezone
from typing import Iterator, List, Optional, Sequence

from filedispatch.api.schemas.conditions import FileKind
from filedispatch.services.condition_evaluator import FileFacts

logger = logging.getLogger(__name__)

CODE_EXTENSIONS = {
    "rs", "js", "ts", "tsx", "jsx", "py", "go", "java", "kt", "swift", "cpp", "c", "h", "hpp",
    "cs", "rb", "php", "html", "css", "scss", "json", "yaml", "yml", "toml",
}
ARCHIVE_MIME_MARKERS = ("zip", "archive", "tar", "compressed", "x-7z", "x-rar", "gzip", "x-bzip")
DEFAULT_MAX_TEXT_BYTES = 10 * 1024 * 1024


def detect_kind(path: str, is_dir: bool, extension: str) -> FileKind:
    """Type d'un fichier d'après son extension et son type MIME"""
    if is_dir:
        return FileKind.FOLDER
    if extension in CODE_EXTENSIONS:
        return FileKind.CODE

    mime, _ = mimetypes.guess_type(path, strict=False)
    if mime:
        if mime.startswith("image/"):
            return FileKind.IMAGE
        if mime.startswith("video/"):
            return FileKind.VIDEO
        if mime.startswith("audio/"):
            return FileKind.AUDIO
        if mime.startswith("text/") or mime == "application/pdf":
            return FileKind.DOCUMENT
        if any(marker in mime for marker in ARCHIVE_MIME_MARKERS):
            return FileKind.ARCHIVE

    if not extension:
        return FileKind.FILE
    return FileKind.OTHER


def _timestamp(seconds: float) -> datetime:
    return datetime.fromtimestamp(seconds, tz=timezone.utc)


class FileInspector:
    """Construit les `FileFacts` d'un chemin et parcourt les dossiers surveillés"""

    def __init__(self, max_text_bytes: int = DEFAULT_MAX_TEXT_BYTES,
                 ignore_patterns: Optional[Sequence[str]] = None):
        self.max_text_bytes = max_text_bytes
        self.ignore_patterns = list(ignore_patterns or [])

    def inspect(self, path: str, last_matched_at: Optional[datetime] = None,
                with_contents: bool = True) -> FileFacts:
        stat = os.stat(path)
        is_dir = os.path.isdir(path)
        full_name = os.path.basename(os.path.normpath(path))
        name, dot_extension = os.path.splitext(full_name)
        extension = dot_extension[1:].lower()
        kind = detect_kind(path, is_dir, extension)

        # st_birthtime n'existe pas partout: la date de modification sert de repli
        created = getattr(stat, "st_birthtime", None) or stat.st_mtime
        contents = None
        if with_contents and kind in (FileKind.DOCUMENT, FileKind.CODE):
            contents = self.read_text(path, stat.st_size)

        return FileFacts(
            path=path,
            name=name,
            extension=extension,
            full_name=full_name,
            size=0 if is_dir else stat.st_size,
            kind=kind,
            created_at=_timestamp(created),
            modified_at=_timestamp(stat.st_mtime),
            added_at=_timestamp(created),
            last_matched_at=last_matched_at,
            contents=contents,
        )

    def read_text(self, path: str, size: int) -> Optional[str]:
        """Contenu texte d'un fichier, ignoré au-delà de `max_text_bytes`"""
        if size > self.max_text_bytes:
            logger.debug(f"Skipping contents of {path}: {size} bytes exceeds limit")
            return None
        try:
            with open(path, "rb") as handle:
                raw = handle.read(self.max_text_bytes)
        except OSError as e:
            logger.warning(f"Could not read contents of {path}: {e}")
            return None
        if b"\x00" in raw:
            return None
        return raw.decode("utf-8", errors="replace")

    def is_ignored(self, name: str) -> bool:
        return any(fnmatch.fnmatch(name, pattern) for pattern in self.ignore_patterns)

    def scan(self, root: str, scan_depth: int = 0) -> Iterator[str]:
        """Fichiers sous `root`: 0 = ce dossier, N = N sous-niveaux, -1 = illimité"""
        pending: List[tuple] = [(root, 0)]
        while pending:
            directory, level = pending.pop()
            try:
                with os.scandir(directory) as entries:
                    children = sorted(entries, key=lambda entry: entry.name)
            except OSError as e:
                logger.warning(f"Could not scan {directory}: {e}")
                continue
            subdirectories = []
            for entry in children:
                if self.is_ignored(entry.name):
                    continue
                if entry.is_dir(follow_symlinks=False):
                    if scan_depth == -1 or level < scan_depth:
                        subdirectories.append((entry.path, level + 1))
                elif entry.is_file():
                    yield entry.path
            pending.extend(reversed(subdirectories))
