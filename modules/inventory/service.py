"""Shared create/read/update/delete flow for inventory records.

Parts and products differ only in the policy they hand to
``InventoryService``: how a payload is normalized and validated, what must
happen before a record is deleted, and how records are serialized.
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Sequence, Tuple

from core.errors import InvalidIdException, NotFoundException
from core.models import is_valid_id
from modules.inventory.repository import InventoryRepository
from modules.inventory.validation import canonical_fields

logger = logging.getLogger(__name__)


def _no_hook(record: Any) -> None:
    return None


@dataclass
class EntityPolicy:
    entity_name: str
    fields: Tuple[str, ...]
    validate: Callable[[Mapping[str, Any]], Any]
    serialize_many: Callable[[Sequence[Any]], List[Dict[str, Any]]]
    normalize: Callable[[Mapping[str, Any]], Dict[str, Any]] = canonical_fields
    before_delete: Callable[[Any], Any] = _no_hook


class InventoryService:
    def __init__(self, repository: InventoryRepository, policy: EntityPolicy):
        self.repository = repository
        self.policy = policy

    @property
    def entity_name(self) -> str:
        return self.policy.entity_name

    def _serialize(self, record: Any) -> Dict[str, Any]:
        return self.policy.serialize_many([record])[0]

    def _load(self, record_id: str) -> Any:
        if not is_valid_id(record_id):
            raise InvalidIdException("Invalid ID format")
        return self.repository.find_by_id(record_id)

    def _current_fields(self, record: Any) -> Dict[str, Any]:
        return {name: getattr(record, name) for name in self.policy.fields}

    @contextmanager
    def _transaction(self):
        """Discard everything staged by an operation that does not finish."""
        try:
            yield
        except Exception:
            self.repository.rollback()
            raise

    def add(self, payload: Mapping[str, Any]) -> Dict[str, Any]:
        valid = self.policy.validate(self.policy.normalize(payload))
        with self._transaction():
            record = self.repository.create(valid.to_record())
            self.repository.commit()
        logger.info("Created %s %s (%s)", self.entity_name.lower(), record.id, record.name)
        return self._serialize(record)

    def list(self) -> List[Dict[str, Any]]:
        return self.policy.serialize_many(self.repository.find_all())

    def get(self, record_id: str) -> Dict[str, Any]:
        return self._serialize(self._load(record_id))

    def search(self, name: str) -> List[Dict[str, Any]]:
        records = self.repository.find_by_name_substring(name)
        if name and name.strip() and not records:
            raise NotFoundException(f"No {self.entity_name.lower()}s found")
        return self.policy.serialize_many(records)

    def update(self, record_id: str, payload: Mapping[str, Any]) -> Dict[str, Any]:
        record = self._load(record_id)
        # Fields missing from the payload keep their stored value
        merged = {**self._current_fields(record), **canonical_fields(payload)}
        valid = self.policy.validate(self.policy.normalize(merged))
        with self._transaction():
            record = self.repository.update(record.id, valid.to_record())
            self.repository.commit()
        logger.info("Updated %s %s", self.entity_name.lower(), record.id)
        return self._serialize(record)

    def delete(self, record_id: str) -> Dict[str, str]:
        record = self._load(record_id)
        with self._transaction():
            self.policy.before_delete(record)
            self.repository.delete(record.id)
            self.repository.commit()
        logger.info("Deleted %s %s", self.entity_name.lower(), record_id)
        return {"message": f"{self.entity_name} removed"}
