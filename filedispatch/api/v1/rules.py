from typing import List

from fastapi import APIRouter, Depends, status

from filedispatch.api.schemas.base import MessageResponse, ToggleRequest
from filedispatch.api.schemas.rules import ExportResponse, ImportRequest, ReorderRequest, Rule
from filedispatch.dependencies import get_rule_registry
from filedispatch.services.rule_registry import RuleRegistry
from filedispatch.services.rule_transfer import normalize_import_payload

router = APIRouter(prefix="/rules", tags=["rules"])


@router.post("", response_model=Rule, status_code=status.HTTP_201_CREATED)
async def create_rule(rule: Rule, registry: RuleRegistry = Depends(get_rule_registry)):
    """Créer une règle en fin de liste du dossier"""
    return registry.create(rule)


@router.post("/normalize-import", response_model=ImportRequest)
async def normalize_import(data: ImportRequest):
    """Canonicaliser un fichier d'import en tableau JSON de règles"""
    return ImportRequest(payload=normalize_import_payload(data.payload))


@router.get("/folder/{folder_id}", response_model=List[Rule])
async def list_rules(folder_id: str, registry: RuleRegistry = Depends(get_rule_registry)):
    return registry.list(folder_id)


@router.post("/folder/{folder_id}/reorder", response_model=List[Rule])
async def reorder_rules(folder_id: str, data: ReorderRequest, registry: RuleRegistry = Depends(get_rule_registry)):
    """Réordonner toutes les règles d'un dossier"""
    return registry.reorder(folder_id, data.ordered_ids)


@router.get("/folder/{folder_id}/export", response_model=ExportResponse)
async def export_rules(folder_id: str, registry: RuleRegistry = Depends(get_rule_registry)):
    return ExportResponse(folder_id=folder_id, payload=registry.export(folder_id))


@router.post("/folder/{folder_id}/import", response_model=List[Rule], status_code=status.HTTP_201_CREATED)
async def import_rules(folder_id: str, data: ImportRequest, registry: RuleRegistry = Depends(get_rule_registry)):
    return registry.import_rules(folder_id, data.payload)


@router.get("/{rule_id}", response_model=Rule)
async def get_rule(rule_id: str, registry: RuleRegistry = Depends(get_rule_registry)):
    return registry.get(rule_id)


@router.put("/{rule_id}", response_model=Rule)
async def update_rule(rule_id: str, rule: Rule, registry: RuleRegistry = Depends(get_rule_registry)):
    """Mettre à jour une règle"""
    return registry.update(rule.model_copy(update={"id": rule_id}))


@router.delete("/{rule_id}", response_model=MessageResponse)
async def delete_rule(rule_id: str, registry: RuleRegistry = Depends(get_rule_registry)):
    registry.delete(rule_id)
    return MessageResponse(message="Rule deleted")


@router.post("/{rule_id}/toggle", response_model=Rule)
async def toggle_rule(rule_id: str, data: ToggleRequest, registry: RuleRegistry = Depends(get_rule_registry)):
    return registry.toggle(rule_id, data.enabled)


@router.post("/{rule_id}/duplicate", response_model=Rule, status_code=status.HTTP_201_CREATED)
async def duplicate_rule(rule_id: str, registry: RuleRegistry = Depends(get_rule_registry)):
    return registry.duplicate(rule_id)
