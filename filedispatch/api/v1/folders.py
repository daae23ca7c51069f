from typing import List

from fastapi import APIRouter, Depends, status

from filedispatch.api.schemas.base import MessageResponse, ToggleRequest
from filedispatch.api.schemas.folders import Folder, FolderCreate, FolderMove, FolderRename, FolderSettingsUpdate, GroupCreate
from filedispatch.dependencies import get_folder_service
from filedispatch.services.folder_service import FolderService

router = APIRouter(prefix="/folders", tags=["folders"])


@router.get("", response_model=List[Folder])
async def list_folders(service: FolderService = Depends(get_folder_service)):
    """Lister les dossiers surveillés et les groupes"""
    return service.list()


@router.post("", response_model=Folder, status_code=status.HTTP_201_CREATED)
async def add_folder(data: FolderCreate, service: FolderService = Depends(get_folder_service)):
    return service.add(data.path, data.name)


@router.post("/groups", response_model=Folder, status_code=status.HTTP_201_CREATED)
async def create_group(data: GroupCreate, service: FolderService = Depends(get_folder_service)):
    return service.create_group(data.name, data.parent_id)


@router.get("/{folder_id}", response_model=Folder)
async def get_folder(folder_id: str, service: FolderService = Depends(get_folder_service)):
    return service.get(folder_id)


@router.delete("/{folder_id}", response_model=MessageResponse)
async def remove_folder(folder_id: str, service: FolderService = Depends(get_folder_service)):
    """Supprimer un dossier et ses règles"""
    service.remove(folder_id)
    return MessageResponse(message="Folder removed")


@router.post("/{folder_id}/toggle", response_model=Folder)
async def toggle_folder(folder_id: str, data: ToggleRequest, service: FolderService = Depends(get_folder_service)):
    return service.toggle(folder_id, data.enabled)


@router.patch("/{folder_id}/settings", response_model=Folder)
async def update_folder_settings(
        folder_id: str,
        data: FolderSettingsUpdate,
        service: FolderService = Depends(get_folder_service)
):
    return service.update_settings(folder_id, data)


@router.post("/{folder_id}/move", response_model=Folder)
async def move_folder(folder_id: str, data: FolderMove, service: FolderService = Depends(get_folder_service)):
    return service.move(folder_id, data.parent_id)


@router.post("/{folder_id}/rename", response_model=Folder)
async def rename_folder(folder_id: str, data: FolderRename, service: FolderService = Depends(get_folder_service)):
    return service.rename(folder_id, data.name)
