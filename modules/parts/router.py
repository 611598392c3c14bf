from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.orm import Session

from core.database import get_db
from core.security import get_current_user
from modules.inventory.service import InventoryService
from modules.parts import schemas, service

router = APIRouter(prefix="/api/parts", tags=["parts"], dependencies=[Depends(get_current_user)])


def get_part_service(db: Session = Depends(get_db)) -> InventoryService:
    return service.build_part_service(db)


@router.post("", response_model=schemas.PartRead, status_code=status.HTTP_201_CREATED)
def add_part_endpoint(payload: Dict[str, Any] = Body(...), parts: InventoryService = Depends(get_part_service)):
    return parts.add(payload)


@router.get("", response_model=list[schemas.PartRead])
def list_parts_endpoint(parts: InventoryService = Depends(get_part_service)):
    return parts.list()


@router.get("/id/{part_id}", response_model=schemas.PartRead)
def get_part_endpoint(part_id: str, parts: InventoryService = Depends(get_part_service)):
    return parts.get(part_id)


@router.get("/name/", response_model=list[schemas.PartRead])
@router.get("/name/{name}", response_model=list[schemas.PartRead])
def search_parts_endpoint(name: str = "", parts: InventoryService = Depends(get_part_service)):
    return parts.search(name)


@router.put("/{part_id}", response_model=schemas.PartRead)
def update_part_endpoint(
    part_id: str, payload: Dict[str, Any] = Body(...), parts: InventoryService = Depends(get_part_service)
):
    return parts.update(part_id, payload)


@router.delete("/{part_id}", response_model=schemas.MessageRead)
def delete_part_endpoint(part_id: str, parts: InventoryService = Depends(get_part_service)):
    return parts.delete(part_id)
