import pytest

from core.errors import IntegrityViolation, StorageException
from modules.inventory.integrity import can_delete_product, ensure_product_deletable, on_part_deleted
from modules.inventory.repository import ProductRepository
from modules.parts.service import build_part_service
from modules.products.models import Product
from modules.products.service import build_product_service
from tests.payloads import gear_payload, gearbox_payload


@pytest.fixture
def products(db):
    return ProductRepository(db, Product, "Product")


def make_product(products, name, entries):
    product = products.create({"name": name, "price": 1, "stock": 1, "min": 0, "max": 2, "associated_parts": entries})
    products.commit()
    return product


def test_cascade_removes_only_matching_entries(products):
    gear = {"partId": "gear", "name": "Gear"}
    bolt = {"partId": "bolt", "name": "Bolt"}
    nut = {"partId": "nut", "name": "Nut"}
    mixed = make_product(products, "Mixed", [bolt, gear, nut, gear])
    untouched = make_product(products, "Untouched", [bolt])

    touched = on_part_deleted(products, "gear")
    products.commit()

    assert touched == 1
    assert products.find_by_id(mixed.id).associated_parts == [bolt, nut]
    assert products.find_by_id(untouched.id).associated_parts == [bolt]


def test_cascade_for_unreferenced_part_changes_nothing(products):
    bolt = {"partId": "bolt", "name": "Bolt"}
    product = make_product(products, "Bolted", [bolt])
    version = product.version

    assert on_part_deleted(products, "gear") == 0
    products.commit()

    reloaded = products.find_by_id(product.id)
    assert reloaded.associated_parts == [bolt]
    assert reloaded.version == version


def test_can_delete_product_predicate():
    assert can_delete_product(Product(associated_parts=[]))
    assert can_delete_product(Product(associated_parts=None))
    assert not can_delete_product(Product(associated_parts=[{"partId": "x", "name": "X"}]))


def test_ensure_product_deletable_message():
    with pytest.raises(IntegrityViolation) as exc_info:
        ensure_product_deletable(Product(associated_parts=[{"partId": "x", "name": "X"}]))
    assert exc_info.value.message == "Cannot delete a product with associated parts"


def test_failed_cascade_keeps_the_part(db, session_factory, monkeypatch):
    parts = build_part_service(db)
    gear = parts.add(gear_payload())
    build_product_service(db).add(gearbox_payload([{"partId": gear["id"], "name": "Gear"}]))

    def broken_replace(self, product, entries):
        raise StorageException("Unable to update product")

    monkeypatch.setattr(ProductRepository, "replace_associations", broken_replace)

    with pytest.raises(StorageException):
        parts.delete(gear["id"])

    other = session_factory()
    try:
        assert build_part_service(other).get(gear["id"])["name"] == "Gear"
        product = build_product_service(other).list()[0]
        assert [entry["part_id"] for entry in product["associated_parts"]] == [gear["id"]]
    finally:
        other.close()


def test_interrupted_cascade_is_rolled_back(db, monkeypatch):
    parts = build_part_service(db)
    gear = parts.add(gear_payload())
    products = build_product_service(db)
    gearbox = products.add(gearbox_payload([{"partId": gear["id"], "name": "Gear"}]))

    def cascade_then_fail(repository, part_id):
        on_part_deleted(repository, part_id)
        raise RuntimeError("cascade interrupted")

    monkeypatch.setattr("modules.parts.service.on_part_deleted", cascade_then_fail)

    with pytest.raises(RuntimeError):
        parts.delete(gear["id"])

    # Same session: the staged association rewrite must be gone
    entries = products.get(gearbox["id"])["associated_parts"]
    assert [entry["part_id"] for entry in entries] == [gear["id"]]
    assert parts.get(gear["id"])["name"] == "Gear"
