from typing import List

from fastapi import APIRouter, Depends, status

from filedispatch.api.schemas.base import MessageResponse
from filedispatch.api.schemas.templates import RuleTemplate
from filedispatch.dependencies import get_template_service
from filedispatch.services.template_service import TemplateService

router = APIRouter(prefix="/templates", tags=["templates"])


@router.get("", response_model=List[RuleTemplate])
async def list_templates(service: TemplateService = Depends(get_template_service)):
    return service.list()


@router.post("", response_model=RuleTemplate, status_code=status.HTTP_201_CREATED)
async def save_template(template: RuleTemplate, service: TemplateService = Depends(get_template_service)):
    """Enregistrer (ou remplacer) un modèle de règle"""
    return service.save(template)


@router.delete("/{template_id}", response_model=MessageResponse)
async def remove_template(template_id: str, service: TemplateService = Depends(get_template_service)):
    service.remove(template_id)
    return MessageResponse(message="Template removed")
