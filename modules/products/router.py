from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.orm import Session

from core.database import get_db
from core.security import get_current_user
from modules.inventory.service import InventoryService
from modules.parts.schemas import MessageRead
from modules.products import schemas, service

router = APIRouter(prefix="/api/products", tags=["products"], dependencies=[Depends(get_current_user)])


def get_product_service(db: Session = Depends(get_db)) -> InventoryService:
    return service.build_product_service(db)


@router.post("", response_model=schemas.ProductRead, status_code=status.HTTP_201_CREATED)
def add_product_endpoint(payload: Dict[str, Any] = Body(...), products: InventoryService = Depends(get_product_service)):
    return products.add(payload)


@router.get("", response_model=list[schemas.ProductRead])
def list_products_endpoint(products: InventoryService = Depends(get_product_service)):
    return products.list()


@router.get("/id/{product_id}", response_model=schemas.ProductRead)
def get_product_endpoint(product_id: str, products: InventoryService = Depends(get_product_service)):
    return products.get(product_id)


@router.get("/name/", response_model=list[schemas.ProductRead])
@router.get("/name/{name}", response_model=list[schemas.ProductRead])
def search_products_endpoint(name: str = "", products: InventoryService = Depends(get_product_service)):
    return products.search(name)


@router.put("/{product_id}", response_model=schemas.ProductRead)
def update_product_endpoint(
    product_id: str, payload: Dict[str, Any] = Body(...), products: InventoryService = Depends(get_product_service)
):
    return products.update(product_id, payload)


@router.delete("/{product_id}", response_model=MessageRead)
def delete_product_endpoint(product_id: str, products: InventoryService = Depends(get_product_service)):
    return products.delete(product_id)
