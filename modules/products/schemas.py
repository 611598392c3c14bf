from typing import List, Optional

from pydantic import Field

from modules.parts.schemas import CamelModel, PartRead


class AssociatedPartRead(CamelModel):
    part_id: str
    name: str
    # Current part record, joined at read time; None once the part is gone
    part: Optional[PartRead] = None


class ProductRead(CamelModel):
    id: str
    name: str
    price: float
    stock: int
    min: int
    max: int
    associated_parts: List[AssociatedPartRead] = Field(default_factory=list)
    created_at: str
    updated_at: str
