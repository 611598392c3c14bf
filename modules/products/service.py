from typing import Any, Callable, Dict, List, Sequence

from sqlalchemy.orm import Session

from core.models import isoformat_utc
from modules.inventory.integrity import ensure_product_deletable
from modules.inventory.repository import ProductRepository, SqlAlchemyRepository
from modules.inventory.service import EntityPolicy, InventoryService
from modules.inventory.validation import validate_product
from modules.parts import models as part_models
from modules.parts.service import serialize_part
from modules.products import models

PRODUCT_FIELDS = ("name", "price", "stock", "min", "max", "associated_parts")


def _serialize_product(product: models.Product, parts_by_id: Dict[str, Dict[str, Any]]) -> Dict[str, Any]:
    return {
        "id": product.id,
        "name": product.name,
        "price": product.price,
        "stock": product.stock,
        "min": product.min,
        "max": product.max,
        "associated_parts": [
            {
                "part_id": entry["partId"],
                "name": entry["name"],
                "part": parts_by_id.get(entry["partId"]),
            }
            for entry in product.associated_parts or []
        ],
        "created_at": isoformat_utc(product.created_at),
        "updated_at": isoformat_utc(product.updated_at),
    }


def product_serializer(parts: SqlAlchemyRepository) -> Callable[[Sequence[models.Product]], List[Dict[str, Any]]]:
    """Serialize products, joining every referenced part in a single query."""

    def serialize_products(products: Sequence[models.Product]) -> List[Dict[str, Any]]:
        part_ids = {entry["partId"] for product in products for entry in product.associated_parts or []}
        parts_by_id = {part.id: serialize_part(part) for part in parts.find_by_ids(part_ids)}
        return [_serialize_product(product, parts_by_id) for product in products]

    return serialize_products


def build_product_service(db: Session) -> InventoryService:
    products = ProductRepository(db, models.Product, "Product")
    parts = SqlAlchemyRepository(db, part_models.Part, "Part")
    policy = EntityPolicy(
        entity_name="Product",
        fields=PRODUCT_FIELDS,
        validate=validate_product,
        serialize_many=product_serializer(parts),
        before_delete=ensure_product_deletable,
    )
    return InventoryService(products, policy)
