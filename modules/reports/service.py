"""Timestamp and stock reports over parts and products."""

from collections import OrderedDict
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Tuple

from sqlalchemy.orm import Session

from core.errors import NotFoundException
from core.models import isoformat_utc
from core.settings import Settings
from modules.parts.models import Part
from modules.parts.types import InHouse, PartType
from modules.products.models import Product


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _timestamp_row(record) -> Dict[str, Any]:
    return {
        "id": record.id,
        "name": record.name,
        "createdAt": isoformat_utc(record.created_at),
        "updatedAt": isoformat_utc(record.updated_at),
    }


class ReportService:
    def __init__(self, db: Session, settings: Settings):
        self.db = db
        self.settings = settings

    def _parts(self) -> List[Part]:
        return self.db.query(Part).order_by(Part.created_at).all()

    def _products(self) -> List[Product]:
        return self.db.query(Product).order_by(Product.created_at).all()

    def parts_timestamp(self) -> Dict[str, Any]:
        return {
            "title": "Parts Creation/Modification Report",
            "date": _now(),
            "parts": [_timestamp_row(p) for p in self._parts()],
        }

    def products_timestamp(self) -> Dict[str, Any]:
        return {
            "title": "Products Creation/Modification Report",
            "date": _now(),
            "products": [_timestamp_row(p) for p in self._products()],
        }

    def low_stock(self) -> Dict[str, Any]:
        margin = self.settings.low_stock_margin
        items = []
        for kind, records in (("part", self._parts()), ("product", self._products())):
            for record in records:
                if record.stock <= record.min + margin:
                    items.append(
                        {
                            "kind": kind,
                            "id": record.id,
                            "name": record.name,
                            "stock": record.stock,
                            "min": record.min,
                            "max": record.max,
                        }
                    )
        # Closest to (or furthest below) the minimum first
        items.sort(key=lambda item: (item["stock"] - item["min"], item["name"]))
        return {"title": "Low Stock Report", "date": _now(), "margin": margin, "items": items}

    def parts_by_type(self) -> Dict[str, Any]:
        groups: "OrderedDict[str, Dict[str, Any]]" = OrderedDict(
            (part_type.value, {"type": part_type.value, "count": 0, "totalStock": 0, "parts": []})
            for part_type in PartType
        )
        for part in self._parts():
            source = part.source
            group = groups[source.type.value]
            group["count"] += 1
            group["totalStock"] += part.stock
            group["parts"].append(
                {
                    "id": part.id,
                    "name": part.name,
                    "source": source.machine_id if isinstance(source, InHouse) else source.company_name,
                }
            )
        return {"title": "Parts by Type Report", "date": _now(), "types": list(groups.values())}

    def product_parts_association(self) -> Dict[str, Any]:
        products = self._products()
        referenced = {entry["partId"] for product in products for entry in product.associated_parts or []}
        existing = set()
        if referenced:
            existing = {part_id for (part_id,) in self.db.query(Part.id).filter(Part.id.in_(referenced)).all()}
        rows = []
        for product in products:
            entries = product.associated_parts or []
            rows.append(
                {
                    "id": product.id,
                    "name": product.name,
                    "partCount": len(entries),
                    "parts": [
                        {"partId": entry["partId"], "name": entry["name"], "exists": entry["partId"] in existing}
                        for entry in entries
                    ],
                }
            )
        return {"title": "Product Parts Association Report", "date": _now(), "products": rows}

    def table(self, report_name: str) -> Tuple[Dict[str, Any], List[str], List[List[Any]]]:
        """Report data plus a flat table view of it, for spreadsheet export."""
        builder, columns, to_rows = self._entry(report_name)
        data = builder(self)
        return data, columns, to_rows(data)

    @staticmethod
    def _entry(report_name: str):
        try:
            return REPORTS[report_name]
        except KeyError:
            raise NotFoundException(f"Unknown report: {report_name}") from None


def _timestamp_rows(key: str) -> Callable[[Dict[str, Any]], List[List[Any]]]:
    def to_rows(data: Dict[str, Any]) -> List[List[Any]]:
        return [[row["name"], row["id"], row["createdAt"], row["updatedAt"]] for row in data[key]]

    return to_rows


def _low_stock_rows(data: Dict[str, Any]) -> List[List[Any]]:
    return [[item["kind"], item["name"], item["stock"], item["min"], item["max"]] for item in data["items"]]


def _parts_by_type_rows(data: Dict[str, Any]) -> List[List[Any]]:
    return [[group["type"], part["name"], part["source"]] for group in data["types"] for part in group["parts"]]


def _association_rows(data: Dict[str, Any]) -> List[List[Any]]:
    rows = []
    for product in data["products"]:
        if not product["parts"]:
            rows.append([product["name"], "-", "-"])
        for part in product["parts"]:
            rows.append([product["name"], part["name"], "Yes" if part["exists"] else "Missing"])
    return rows


TIMESTAMP_COLUMNS = ["Name", "ID", "Created", "Updated"]

REPORTS = {
    "parts-timestamp": (ReportService.parts_timestamp, TIMESTAMP_COLUMNS, _timestamp_rows("parts")),
    "products-timestamp": (ReportService.products_timestamp, TIMESTAMP_COLUMNS, _timestamp_rows("products")),
    "low-stock": (ReportService.low_stock, ["Kind", "Name", "Stock", "Min", "Max"], _low_stock_rows),
    "parts-by-type": (ReportService.parts_by_type, ["Type", "Part", "Machine ID / Company"], _parts_by_type_rows),
    "product-parts-association": (
        ReportService.product_parts_association,
        ["Product", "Part", "Part exists"],
        _association_rows,
    ),
}
