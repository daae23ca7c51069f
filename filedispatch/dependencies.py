from functools import lru_cache

from fastapi import Depends
from sqlalchemy.orm import Session

from filedispatch.config import settings
from filedispatch.core.database import get_db
from filedispatch.external.backend_client import BackendClient
from filedispatch.external.shell_runner import SubprocessShellRunner
from filedispatch.external.undo_executor import LocalUndoExecutor
from filedispatch.services.engine_service import EngineService
from filedispatch.services.folder_service import FolderService
from filedispatch.services.ledger_service import LedgerService
from filedispatch.services.preview_service import PreviewService
from filedispatch.services.rule_registry import RuleRegistry
from filedispatch.services.settings_service import SettingsService
from filedispatch.services.template_service import TemplateService


# === COLLABORATEURS EXTERNES ===
@lru_cache()
def get_shell_runner() -> SubprocessShellRunner:
    return SubprocessShellRunner()


@lru_cache()
def get_undo_executor() -> LocalUndoExecutor:
    return LocalUndoExecutor()


@lru_cache()
def get_backend_client() -> BackendClient:
    return BackendClient(base_url=settings.BACKEND_URL, timeout=settings.BACKEND_TIMEOUT_SECONDS)


# === SERVICES ===
def get_folder_service(db: Session = Depends(get_db)) -> FolderService:
    return FolderService(db)


def get_rule_registry(db: Session = Depends(get_db)) -> RuleRegistry:
    return RuleRegistry(db)


def get_ledger_service(
        db: Session = Depends(get_db),
        executor: LocalUndoExecutor = Depends(get_undo_executor)
) -> LedgerService:
    return LedgerService(db, executor=executor)


def get_settings_service(db: Session = Depends(get_db)) -> SettingsService:
    return SettingsService(db)


def get_engine_service(db: Session = Depends(get_db)) -> EngineService:
    return EngineService(db)


def get_preview_service(
        db: Session = Depends(get_db),
        shell_runner: SubprocessShellRunner = Depends(get_shell_runner)
) -> PreviewService:
    return PreviewService(db, shell_runner=shell_runner)


def get_template_service(db: Session = Depends(get_db)) -> TemplateService:
    return TemplateService(db)
