from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from modules.parts.types import PartType


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class PartRead(CamelModel):
    id: str
    name: str
    price: float
    stock: int
    min: int
    max: int
    type: PartType
    machine_id: Optional[str] = None
    company_name: Optional[str] = None
    created_at: str
    updated_at: str


class MessageRead(CamelModel):
    message: str
