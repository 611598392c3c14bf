from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union


class PartType(str, Enum):
    IN_HOUSE = "InHouse"
    OUTSOURCED = "Outsourced"


@dataclass(frozen=True)
class InHouse:
    machine_id: str

    @property
    def type(self) -> PartType:
        return PartType.IN_HOUSE


@dataclass(frozen=True)
class Outsourced:
    company_name: str

    @property
    def type(self) -> PartType:
        return PartType.OUTSOURCED


PartSource = Union[InHouse, Outsourced]


def source_columns(source: PartSource) -> dict:
    """Flatten a part source into the legacy type/machine_id/company_name columns."""
    if isinstance(source, InHouse):
        return {"type": PartType.IN_HOUSE.value, "machine_id": source.machine_id, "company_name": None}
    return {"type": PartType.OUTSOURCED.value, "machine_id": None, "company_name": source.company_name}


def source_from_columns(type_value: str, machine_id: Optional[str], company_name: Optional[str]) -> PartSource:
    if type_value == PartType.IN_HOUSE.value:
        return InHouse(machine_id=machine_id)
    return Outsourced(company_name=company_name)
