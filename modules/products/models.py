from sqlalchemy import JSON, Column, Float, Integer, String

from core.models import Base, IdMixin, TimestampMixin


class Product(Base, IdMixin, TimestampMixin):
    __tablename__ = "products"

    name = Column(String(255), nullable=False, index=True)
    price = Column(Float, nullable=False)
    stock = Column(Integer, nullable=False)
    min = Column(Integer, nullable=False)
    max = Column(Integer, nullable=False)
    # Denormalized [{"partId": ..., "name": ...}]; replace the list to persist changes
    associated_parts = Column(JSON, nullable=False, default=list)

    # Optimistic concurrency: a stale write raises StaleDataError
    version = Column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}
