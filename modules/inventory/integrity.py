"""Reference rules between products and the parts they list."""

import logging

from core.errors import IntegrityViolation
from modules.inventory.repository import ProductRepository

logger = logging.getLogger(__name__)


def on_part_deleted(products: ProductRepository, part_id: str) -> int:
    """Drop every association to ``part_id`` from every product.

    Other entries keep their order. Changes are staged on the repository and
    committed together with the part removal by the caller; storage errors
    propagate so the part is not reported deleted. Returns the number of
    products touched.
    """
    touched = 0
    for product in products.find_referencing(part_id):
        remaining = [entry for entry in product.associated_parts if entry.get("partId") != part_id]
        products.replace_associations(product, remaining)
        touched += 1
    if touched:
        logger.info("Removed part %s from %d product(s)", part_id, touched)
    return touched


def can_delete_product(product) -> bool:
    return not (product.associated_parts or [])


def ensure_product_deletable(product) -> None:
    if not can_delete_product(product):
        raise IntegrityViolation("Cannot delete a product with associated parts")
