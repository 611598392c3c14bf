"""Validity rules for parts and products.

Candidates are plain field bags as decoded from a JSON body. Wire keys
(``machineId``, ``companyName``, ``associatedParts``) and record keys
(``machine_id``, ...) are both accepted. Every rule is checked on its own so
a caller gets the full list of problems in one pass; nothing here touches
the database.
"""

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from core.errors import FieldError, InventoryValidationError
from modules.parts.types import InHouse, Outsourced, PartSource, PartType, source_columns

WIRE_TO_RECORD = {
    "machineId": "machine_id",
    "companyName": "company_name",
    "associatedParts": "associated_parts",
}

STOCK_FIELDS = ("stock", "min", "max")

# Stock levels are stored in 64-bit integer columns
WHOLE_MIN = -(2 ** 63)
WHOLE_MAX = 2 ** 63 - 1

STOCK_MESSAGES = {
    "Part": {
        "stock": "Part stock is required",
        "min": "Part min is required",
        "max": "Part max is required",
        "min_order": "Min should be less than max",
        "max_order": "Max should be greater than min",
    },
    "Product": {
        "stock": "Product stock is required",
        "min": "Minimum stock is required",
        "max": "Maximum stock is required",
        "min_order": "Min should be less than Max",
        "max_order": "Max should be greater than Min",
    },
}


@dataclass(frozen=True)
class AssociatedPart:
    part_id: str
    name: str

    def to_dict(self) -> Dict[str, str]:
        return {"partId": self.part_id, "name": self.name}


@dataclass(frozen=True)
class ValidPart:
    name: str
    price: float
    stock: int
    min: int
    max: int
    source: PartSource

    @property
    def type(self) -> PartType:
        return self.source.type

    def to_record(self) -> Dict[str, Any]:
        record = {"name": self.name, "price": self.price, "stock": self.stock, "min": self.min, "max": self.max}
        record.update(source_columns(self.source))
        return record


@dataclass(frozen=True)
class ValidProduct:
    name: str
    price: float
    stock: int
    min: int
    max: int
    associated_parts: List[AssociatedPart] = field(default_factory=list)

    def to_record(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "price": self.price,
            "stock": self.stock,
            "min": self.min,
            "max": self.max,
            "associated_parts": [entry.to_dict() for entry in self.associated_parts],
        }


def canonical_fields(candidate: Mapping[str, Any]) -> Dict[str, Any]:
    return {WIRE_TO_RECORD.get(key, key): value for key, value in candidate.items()}


def normalize_part_fields(candidate: Mapping[str, Any]) -> Dict[str, Any]:
    """Null out the source field that does not belong to the part's type.

    Applied before validation on both create and update, so switching a part
    from InHouse to Outsourced drops the stale machine ID instead of failing.
    """
    fields = canonical_fields(candidate)
    part_type = fields.get("type")
    if part_type != PartType.IN_HOUSE.value:
        fields["machine_id"] = None
    if part_type != PartType.OUTSOURCED.value:
        fields["company_name"] = None
    return fields


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _as_number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return None
    if isinstance(value, int):
        try:
            float(value)
        except OverflowError:
            return None
        return value
    if isinstance(value, float) and math.isfinite(value):
        return value
    return None


def _as_whole(value: Any) -> Optional[int]:
    number = _as_number(value)
    if number is None:
        return None
    if isinstance(number, float):
        if not number.is_integer():
            return None
        return int(number)
    return number


def _check_name(fields: Dict[str, Any], label: str, errors: List[FieldError]) -> Optional[str]:
    name = fields.get("name")
    if _is_blank(name):
        errors.append(FieldError("name", f"{label} name is required"))
        return None
    if not isinstance(name, str):
        errors.append(FieldError("name", f"{label} name must be text"))
        return None
    return name


def _check_price(fields: Dict[str, Any], label: str, errors: List[FieldError]) -> Optional[float]:
    raw = fields.get("price")
    if _is_blank(raw):
        errors.append(FieldError("price", f"{label} price is required"))
        return None
    price = _as_number(raw)
    if price is None:
        errors.append(FieldError("price", f"{label} price must be a number"))
        return None
    if price < 0:
        errors.append(FieldError("price", f"{label} price cannot be negative"))
        return None
    return float(price)


def _check_stock_levels(fields: Dict[str, Any], label: str, errors: List[FieldError]) -> Dict[str, int]:
    messages = STOCK_MESSAGES[label]
    levels: Dict[str, int] = {}
    for name in STOCK_FIELDS:
        raw = fields.get(name)
        if _is_blank(raw):
            errors.append(FieldError(name, messages[name]))
            continue
        number = _as_whole(raw)
        if number is None:
            errors.append(FieldError(name, f"{label} {name} must be a whole number"))
            continue
        if not WHOLE_MIN <= number <= WHOLE_MAX:
            errors.append(FieldError(name, f"{label} {name} is out of range"))
            continue
        levels[name] = number

    stock, minimum, maximum = levels.get("stock"), levels.get("min"), levels.get("max")
    if stock is not None and minimum is not None and maximum is not None:
        if not minimum <= stock <= maximum:
            errors.append(FieldError("stock", "Stock must be between min and max values"))
    if minimum is not None and maximum is not None and not minimum < maximum:
        errors.append(FieldError("min", messages["min_order"]))
        errors.append(FieldError("max", messages["max_order"]))
    return levels


def _check_source(fields: Dict[str, Any], errors: List[FieldError]) -> Optional[PartSource]:
    raw_type = fields.get("type")
    part_type = None
    if _is_blank(raw_type):
        errors.append(FieldError("type", "Part type is required"))
    else:
        try:
            part_type = PartType(raw_type)
        except ValueError:
            errors.append(FieldError("type", "Part type must be either InHouse or Outsourced"))

    machine_id = fields.get("machine_id")
    company_name = fields.get("company_name")
    if part_type is PartType.IN_HOUSE:
        if _is_blank(machine_id):
            errors.append(FieldError("machineId", "InHouse parts must have a machine ID"))
        if not _is_blank(company_name):
            errors.append(FieldError("companyName", "InHouse parts must not have a company name"))
        if _is_blank(machine_id) or not _is_blank(company_name):
            return None
        return InHouse(machine_id=str(machine_id))
    if part_type is PartType.OUTSOURCED:
        if _is_blank(company_name):
            errors.append(FieldError("companyName", "Outsourced parts must have a company name"))
        if not _is_blank(machine_id):
            errors.append(FieldError("machineId", "Outsourced parts must not have a machine ID"))
        if _is_blank(company_name) or not _is_blank(machine_id):
            return None
        return Outsourced(company_name=str(company_name))
    return None


def _check_associated_parts(fields: Dict[str, Any], errors: List[FieldError]) -> List[AssociatedPart]:
    raw = fields.get("associated_parts")
    if raw is None:
        return []
    if not isinstance(raw, list):
        errors.append(FieldError("associatedParts", "Associated parts must be a list"))
        return []

    entries: List[AssociatedPart] = []
    for position, entry in enumerate(raw, start=1):
        if not isinstance(entry, Mapping):
            errors.append(FieldError("associatedParts", f"Associated part #{position} must be an object"))
            continue
        part_id = entry.get("partId", entry.get("part_id"))
        name = entry.get("name")
        ok = True
        if _is_blank(part_id):
            errors.append(FieldError("associatedParts", f"Associated part #{position} must have a partId"))
            ok = False
        if _is_blank(name):
            errors.append(FieldError("associatedParts", f"Associated part #{position} must have a name"))
            ok = False
        if ok:
            entries.append(AssociatedPart(part_id=str(part_id), name=str(name)))
    return entries


def check_part(candidate: Mapping[str, Any]) -> List[FieldError]:
    errors: List[FieldError] = []
    _collect_part(canonical_fields(candidate), errors)
    return errors


def check_product(candidate: Mapping[str, Any]) -> List[FieldError]:
    errors: List[FieldError] = []
    _collect_product(canonical_fields(candidate), errors)
    return errors


def _collect_part(fields: Dict[str, Any], errors: List[FieldError]) -> Optional[ValidPart]:
    name = _check_name(fields, "Part", errors)
    price = _check_price(fields, "Part", errors)
    levels = _check_stock_levels(fields, "Part", errors)
    source = _check_source(fields, errors)
    if errors:
        return None
    return ValidPart(name=name, price=price, source=source, **levels)


def _collect_product(fields: Dict[str, Any], errors: List[FieldError]) -> Optional[ValidProduct]:
    name = _check_name(fields, "Product", errors)
    price = _check_price(fields, "Product", errors)
    levels = _check_stock_levels(fields, "Product", errors)
    associated_parts = _check_associated_parts(fields, errors)
    if errors:
        return None
    return ValidProduct(name=name, price=price, associated_parts=associated_parts, **levels)


def validate_part(candidate: Mapping[str, Any]) -> ValidPart:
    errors: List[FieldError] = []
    part = _collect_part(canonical_fields(candidate), errors)
    if errors:
        raise InventoryValidationError(errors)
    return part


def validate_product(candidate: Mapping[str, Any]) -> ValidProduct:
    errors: List[FieldError] = []
    product = _collect_product(canonical_fields(candidate), errors)
    if errors:
        raise InventoryValidationError(errors)
    return product
