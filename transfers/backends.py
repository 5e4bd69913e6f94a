"""
Byte-level persistence backends.

Record backends map an integer key to an encoded record; counter cells
hold the single id counter. Both come in two flavours: in-memory for
tests and throwaway runs, and JSON files under a data directory.

File writes go through a temporary file and os.replace, so a crash in
the middle of a write leaves the previous file intact. Any I/O failure
is raised as StorageFault.
"""

import json
import logging
import os
from pathlib import Path
from typing import Optional

from .errors import StorageFault

logger = logging.getLogger(__name__)


def _atomic_write_json(path: Path, data) -> None:
    """Write data as JSON to path, replacing the old file in one step."""
    tmp_path = path.with_name(path.name + ".tmp")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, path)
    except OSError as e:
        logger.error("[Storage] Failed to write %s: %s", path, e)
        raise StorageFault(f"Cannot persist {path.name}: {e}") from e


def _read_json(path: Path, default):
    if not path.exists():
        return default
    try:
        with open(path, encoding="utf-8") as f:
            return json.load(f)
    except (OSError, ValueError) as e:
        logger.error("[Storage] Failed to read %s: %s", path, e)
        raise StorageFault(f"Cannot load {path.name}: {e}") from e


class MemoryBackend:
    """Ordered integer-keyed map of encoded records, held in memory."""

    def __init__(self):
        self._records: dict[int, bytes] = {}

    def read(self, key: int) -> Optional[bytes]:
        return self._records.get(key)

    def write(self, key: int, value: bytes) -> Optional[bytes]:
        previous = self._records.get(key)
        self._records[key] = value
        return previous

    def delete(self, key: int) -> Optional[bytes]:
        return self._records.pop(key, None)

    def keys(self) -> list[int]:
        """All keys in ascending order, snapshotted at call time."""
        return sorted(self._records)

    def __len__(self) -> int:
        return len(self._records)


class JsonFileBackend(MemoryBackend):
    """
    MemoryBackend mirrored to a JSON file after every mutation.

    File layout: {"<id>": "<encoded record>", ...}. Records are kept as
    the exact text the store produced so decoding sees the same bytes.
    """

    def __init__(self, path: Path):
        super().__init__()
        self.path = Path(path)
        raw = _read_json(self.path, default={})
        try:
            self._records = {int(k): v.encode("utf-8") for k, v in raw.items()}
        except (AttributeError, ValueError) as e:
            raise StorageFault(f"Malformed record file {self.path.name}: {e}") from e
        logger.debug("[Storage] Loaded %d records from %s", len(self._records), self.path)

    def write(self, key: int, value: bytes) -> Optional[bytes]:
        records = dict(self._records)
        previous = records.get(key)
        records[key] = value
        self._commit(records)
        return previous

    def delete(self, key: int) -> Optional[bytes]:
        if key not in self._records:
            return None
        records = dict(self._records)
        removed = records.pop(key)
        self._commit(records)
        return removed

    def _commit(self, records: dict[int, bytes]) -> None:
        """Persist records, then make them visible. A failed write leaves memory unchanged."""
        data = {str(k): v.decode("utf-8") for k, v in sorted(records.items())}
        _atomic_write_json(self.path, data)
        self._records = records


class MemoryCounter:
    """The id counter for a single process lifetime."""

    def __init__(self, initial: int = 0):
        self._value = initial

    def get(self) -> int:
        return self._value

    def set(self, value: int) -> None:
        self._value = value


class FileCounter(MemoryCounter):
    """Counter persisted as {"value": n}; set() only returns once the file is replaced."""

    def __init__(self, path: Path):
        self.path = Path(path)
        raw = _read_json(self.path, default={"value": 0})
        try:
            initial = int(raw["value"])
        except (KeyError, TypeError, ValueError) as e:
            raise StorageFault(f"Malformed counter file {self.path.name}: {e}") from e
        super().__init__(initial)

    def set(self, value: int) -> None:
        _atomic_write_json(self.path, {"value": value})
        super().set(value)
