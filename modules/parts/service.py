from typing import Any, Dict, List, Sequence

from sqlalchemy.orm import Session

from core.models import isoformat_utc
from modules.inventory.integrity import on_part_deleted
from modules.inventory.repository import ProductRepository, SqlAlchemyRepository
from modules.inventory.service import EntityPolicy, InventoryService
from modules.inventory.validation import normalize_part_fields, validate_part
from modules.parts import models
from modules.products import models as product_models

PART_FIELDS = ("name", "price", "stock", "min", "max", "type", "machine_id", "company_name")


def serialize_part(part: models.Part) -> Dict[str, Any]:
    return {
        "id": part.id,
        "name": part.name,
        "price": part.price,
        "stock": part.stock,
        "min": part.min,
        "max": part.max,
        "type": part.type,
        "machine_id": part.machine_id,
        "company_name": part.company_name,
        "created_at": isoformat_utc(part.created_at),
        "updated_at": isoformat_utc(part.updated_at),
    }


def serialize_parts(parts: Sequence[models.Part]) -> List[Dict[str, Any]]:
    return [serialize_part(p) for p in parts]


def build_part_service(db: Session) -> InventoryService:
    parts = SqlAlchemyRepository(db, models.Part, "Part")
    products = ProductRepository(db, product_models.Product, "Product")
    policy = EntityPolicy(
        entity_name="Part",
        fields=PART_FIELDS,
        normalize=normalize_part_fields,
        validate=validate_part,
        serialize_many=serialize_parts,
        # Same session as the part delete, so both commit together
        before_delete=lambda part: on_part_deleted(products, part.id),
    )
    return InventoryService(parts, policy)
