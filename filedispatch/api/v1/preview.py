from typing import List

from fastapi import APIRouter, Depends, Query

from filedispatch.api.schemas.preview import PreviewFileRequest, PreviewItem
from filedispatch.api.schemas.rules import Rule
from filedispatch.dependencies import get_preview_service
from filedispatch.services.preview_service import DEFAULT_DRAFT_MAX_FILES, PreviewService

router = APIRouter(prefix="/preview", tags=["preview"])


@router.get("/rules/{rule_id}", response_model=List[PreviewItem])
async def preview_rule(rule_id: str, service: PreviewService = Depends(get_preview_service)):
    """Fichiers du dossier que la règle traiterait actuellement"""
    return service.preview_rule(rule_id)


@router.post("/rules/{rule_id}/file", response_model=PreviewItem)
async def preview_file(rule_id: str, data: PreviewFileRequest, service: PreviewService = Depends(get_preview_service)):
    return service.preview_file(rule_id, data.file_path)


@router.post("/draft", response_model=List[PreviewItem])
async def preview_draft(
        rule: Rule,
        max_files: int = Query(DEFAULT_DRAFT_MAX_FILES, ge=1, alias="maxFiles"),
        service: PreviewService = Depends(get_preview_service)
):
    """Aperçu d'une règle en cours d'édition, non enregistrée"""
    return service.preview_draft(rule, max_files=max_files)
