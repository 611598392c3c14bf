from sqlalchemy import Column, Float, Integer, String

from core.models import Base, IdMixin, TimestampMixin
from modules.parts.types import PartSource, source_from_columns


class Part(Base, IdMixin, TimestampMixin):
    __tablename__ = "parts"

    name = Column(String(255), nullable=False, index=True)
    price = Column(Float, nullable=False)
    stock = Column(Integer, nullable=False)
    min = Column(Integer, nullable=False)
    max = Column(Integer, nullable=False)
    type = Column(String(32), nullable=False)
    machine_id = Column(String(255), nullable=True)
    company_name = Column(String(255), nullable=True)

    # Optimistic concurrency: a stale write raises StaleDataError
    version = Column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}

    @property
    def source(self) -> PartSource:
        return source_from_columns(self.type, self.machine_id, self.company_name)
