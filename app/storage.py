# app/storage.py
import threading
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Optional, Union

from typing_extensions import Literal

from .models import AuthorRecord, BookRecord, RecordKind


Record = Union[BookRecord, AuthorRecord]
OrderBy = Literal["created_desc", "name_asc"]

_RECORD_TYPES = {
    "book": BookRecord,
    "author": AuthorRecord,
}


class Repository(ABC):
    """Storage port for book and author records.

    Both kinds share one id space. ``get`` and ``get_many`` return records
    of any kind; callers check ``record.kind`` themselves.
    """

    @abstractmethod
    def create(self, kind: RecordKind, fields: Dict[str, Any]) -> Record:
        ...

    @abstractmethod
    def get(self, record_id: int) -> Optional[Record]:
        ...

    @abstractmethod
    def list(self, kind: RecordKind, order_by: OrderBy = "created_desc") -> List[Record]:
        ...

    @abstractmethod
    def update(self, record_id: int, fields: Dict[str, Any]) -> Record:
        """Overwrite ``fields`` on an existing record. Raises ``KeyError`` if missing."""

    @abstractmethod
    def delete(self, record_id: int) -> bool:
        ...

    @abstractmethod
    def get_many(self, record_ids: Iterable[int]) -> List[Record]:
        """Fetch records in request order, silently skipping unknown ids."""


class InMemoryRepository(Repository):
    """Map of id -> record with a monotonically increasing id counter."""

    def __init__(self) -> None:
        self._records: Dict[int, Record] = {}
        self._next_id = 1
        self._lock = threading.Lock()

    def reset(self) -> None:
        with self._lock:
            self._records.clear()
            self._next_id = 1

    def create(self, kind: RecordKind, fields: Dict[str, Any]) -> Record:
        model = _RECORD_TYPES[kind]
        with self._lock:
            record = model(**{**fields, "id": self._next_id})
            self._records[record.id] = record
            self._next_id += 1
        return record

    def get(self, record_id: int) -> Optional[Record]:
        with self._lock:
            return self._records.get(record_id)

    def list(self, kind: RecordKind, order_by: OrderBy = "created_desc") -> List[Record]:
        with self._lock:
            records = [r for r in self._records.values() if r.kind == kind]
        if order_by == "name_asc":
            # Only authors carry a name; ties keep creation order.
            records.sort(key=lambda r: (getattr(r, "name", ""), r.id))
        else:
            # ids grow with creation, so they double as a creation sequence.
            records.sort(key=lambda r: r.id, reverse=True)
        return records

    def update(self, record_id: int, fields: Dict[str, Any]) -> Record:
        with self._lock:
            current = self._records[record_id]
            data = current.model_dump()
            data.update(fields)
            data["id"] = record_id
            record = type(current).model_validate(data)
            self._records[record_id] = record
        return record

    def delete(self, record_id: int) -> bool:
        with self._lock:
            return self._records.pop(record_id, None) is not None

    def get_many(self, record_ids: Iterable[int]) -> List[Record]:
        found: List[Record] = []
        with self._lock:
            for rid in record_ids:
                record = self._records.get(rid)
                if record is not None:
                    found.append(record)
        return found
