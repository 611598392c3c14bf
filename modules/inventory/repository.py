"""Persistence contract for inventory records and its SQLAlchemy implementation."""

import logging
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Any, Dict, Generic, Iterable, List, Mapping, Type, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from core.errors import ConflictException, NotFoundException, StorageException

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT")

LIKE_ESCAPE = "\\"


class InventoryRepository(ABC, Generic[ModelT]):
    """What the inventory services need from storage.

    Writes are staged until ``commit``; a service commits once per operation
    so a delete and its cascade land together or not at all.
    """

    entity_name: str

    @abstractmethod
    def create(self, fields: Mapping[str, Any]) -> ModelT:
        ...

    @abstractmethod
    def find_all(self) -> List[ModelT]:
        ...

    @abstractmethod
    def find_by_id(self, record_id: str) -> ModelT:
        ...

    @abstractmethod
    def find_by_name_substring(self, text: str) -> List[ModelT]:
        ...

    @abstractmethod
    def update(self, record_id: str, fields: Mapping[str, Any]) -> ModelT:
        ...

    @abstractmethod
    def delete(self, record_id: str) -> None:
        ...

    @abstractmethod
    def commit(self) -> None:
        ...

    @abstractmethod
    def rollback(self) -> None:
        ...


def escape_like(text: str) -> str:
    return (
        text.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


class SqlAlchemyRepository(InventoryRepository[ModelT]):
    def __init__(self, db: Session, model: Type[ModelT], entity_name: str):
        self.db = db
        self.model = model
        self.entity_name = entity_name

    @contextmanager
    def _storage(self, action: str):
        try:
            yield
        except StaleDataError as exc:
            self.db.rollback()
            logger.warning("Concurrent modification while trying to %s %s", action, self.entity_name)
            raise ConflictException(f"{self.entity_name} was modified concurrently") from exc
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("Storage failure while trying to %s %s", action, self.entity_name)
            raise StorageException(f"Unable to {action} {self.entity_name.lower()}") from exc

    def create(self, fields: Mapping[str, Any]) -> ModelT:
        record = self.model(**fields)
        with self._storage("create"):
            self.db.add(record)
            self.db.flush()
        return record

    def find_all(self) -> List[ModelT]:
        with self._storage("list"):
            return self.db.query(self.model).order_by(self.model.created_at).all()

    def find_by_id(self, record_id: str) -> ModelT:
        with self._storage("load"):
            record = self.db.query(self.model).filter(self.model.id == record_id).first()
        if not record:
            raise NotFoundException(f"{self.entity_name} not found")
        return record

    def find_by_name_substring(self, text: str) -> List[ModelT]:
        if text is None or not text.strip():
            return self.find_all()
        pattern = f"%{escape_like(text)}%"
        with self._storage("search"):
            return (
                self.db.query(self.model)
                .filter(self.model.name.ilike(pattern, escape=LIKE_ESCAPE))
                .order_by(self.model.created_at)
                .all()
            )

    def find_by_ids(self, record_ids: Iterable[str]) -> List[ModelT]:
        record_ids = list(record_ids)
        if not record_ids:
            return []
        with self._storage("load"):
            return self.db.query(self.model).filter(self.model.id.in_(record_ids)).all()

    def update(self, record_id: str, fields: Mapping[str, Any]) -> ModelT:
        record = self.find_by_id(record_id)
        for key, value in fields.items():
            setattr(record, key, value)
        with self._storage("update"):
            self.db.flush()
        return record

    def delete(self, record_id: str) -> None:
        record = self.find_by_id(record_id)
        with self._storage("delete"):
            self.db.delete(record)
            self.db.flush()

    def commit(self) -> None:
        with self._storage("save"):
            self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()


class ProductRepository(SqlAlchemyRepository):
    """Products repository with the association scan the integrity rule needs."""

    def find_referencing(self, part_id: str) -> List[Any]:
        # No reverse index on parts; membership is found by scanning products
        return [
            product
            for product in self.find_all()
            if any(entry.get("partId") == part_id for entry in product.associated_parts or [])
        ]

    def replace_associations(self, product, entries: List[Dict[str, Any]]):
        return self.update(product.id, {"associated_parts": entries})
