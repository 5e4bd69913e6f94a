"""
Ordered entity store.

Wraps a byte-level backend with encoding for one entity kind. Records
are encoded as compact JSON and must fit the size bound fixed when the
store is created, so block-limited backends can be swapped in.
"""

import logging
from typing import Generic, Iterator, Optional, TypeVar

from pydantic import BaseModel, ValidationError

from .config import MAX_RECORD_SIZE
from .errors import RECORD_CORRUPT, RECORD_TOO_LARGE, StorageFault

logger = logging.getLogger(__name__)

EntityT = TypeVar("EntityT", bound=BaseModel)


class EntityStore(Generic[EntityT]):
    """
    Map from id to entity, iterated in ascending id order.

    The store does not look inside records beyond encoding them: it does
    not check that entity.id matches the key, nor any foreign key.
    """

    def __init__(
        self,
        model: type[EntityT],
        backend,
        max_record_size: int = MAX_RECORD_SIZE,
        name: Optional[str] = None,
    ):
        self.model = model
        self.backend = backend
        self.max_record_size = max_record_size
        self.name = name or model.__name__

    def insert(self, entity_id: int, entity: EntityT) -> Optional[EntityT]:
        """
        Upsert entity at entity_id.

        Returns:
            The entity previously stored at that id, or None on a fresh insert
        """
        encoded = self._encode(entity)
        previous = self.backend.write(entity_id, encoded)
        return self._decode(previous) if previous is not None else None

    def check(self, entity: EntityT) -> None:
        """Encode without writing; raises StorageFault if the record cannot be stored."""
        self._encode(entity)

    def get(self, entity_id: int) -> Optional[EntityT]:
        raw = self.backend.read(entity_id)
        return self._decode(raw) if raw is not None else None

    def scan(self) -> Iterator[tuple[int, EntityT]]:
        """
        Lazily yield (id, entity) pairs in ascending id order.

        Each call starts a fresh pass over the keys present at that moment.
        """
        for entity_id in self.backend.keys():
            raw = self.backend.read(entity_id)
            if raw is None:
                continue  # removed after the key snapshot was taken
            yield entity_id, self._decode(raw)

    def remove(self, entity_id: int) -> Optional[EntityT]:
        """Delete the entity at entity_id and return it, or None if absent."""
        raw = self.backend.delete(entity_id)
        return self._decode(raw) if raw is not None else None

    def __contains__(self, entity_id: int) -> bool:
        return self.backend.read(entity_id) is not None

    def __len__(self) -> int:
        return len(self.backend)

    def _encode(self, entity: EntityT) -> bytes:
        encoded = entity.model_dump_json().encode("utf-8")
        if len(encoded) > self.max_record_size:
            logger.error(
                "[Store:%s] Record of %d bytes exceeds bound of %d",
                self.name, len(encoded), self.max_record_size,
            )
            raise StorageFault(
                f"{self.name} record is {len(encoded)} bytes, limit is {self.max_record_size}",
                code=RECORD_TOO_LARGE,
            )
        return encoded

    def _decode(self, raw: bytes) -> EntityT:
        try:
            return self.model.model_validate_json(raw)
        except ValidationError as e:
            logger.error("[Store:%s] Undecodable record: %s", self.name, e)
            raise StorageFault(f"Corrupt {self.name} record", code=RECORD_CORRUPT) from e
