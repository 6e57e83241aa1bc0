"""Provider configuration row stores.

Rows are keyed by provider identifier. ``save_if_absent`` is atomic in both
stores so that concurrent bootstraps never duplicate or overwrite a row.
"""

from __future__ import annotations

import os
import re
import tempfile
import threading
from pathlib import Path
from typing import Final

import yaml

from message_sender.types import SenderConfigRecord
from message_sender.utils.logging import get_logger

__all__ = ["InMemorySenderConfigStore", "StorageError", "YamlSenderConfigStore"]

logger = get_logger(__name__)

_NAME_PATTERN: Final[re.Pattern[str]] = re.compile(r"^[a-z][a-z0-9_]*$")
_SUFFIX: Final[str] = ".yaml"


class StorageError(Exception):
    """Raised when a configuration row cannot be read or written."""


def _validate_name(name: str) -> str:
    if not _NAME_PATTERN.match(name):
        msg = f"Invalid provider name for storage: {name!r}"
        raise StorageError(msg)
    return name


class InMemorySenderConfigStore:
    """Dictionary-backed store guarded by a lock."""

    def __init__(self, records: tuple[SenderConfigRecord, ...] = ()) -> None:
        self._lock: threading.Lock = threading.Lock()
        self._records: dict[str, SenderConfigRecord] = {record.name: record for record in records}

    def get(self, name: str) -> SenderConfigRecord | None:
        with self._lock:
            return self._records.get(name)

    def save(self, record: SenderConfigRecord) -> None:
        _ = _validate_name(record.name)
        with self._lock:
            self._records[record.name] = record

    def save_if_absent(self, record: SenderConfigRecord) -> bool:
        _ = _validate_name(record.name)
        with self._lock:
            if record.name in self._records:
                return False
            self._records[record.name] = record
            return True

    def list(self) -> tuple[SenderConfigRecord, ...]:
        with self._lock:
            return tuple(self._records[name] for name in sorted(self._records))


class YamlSenderConfigStore:
    """One YAML file per provider under a directory.

    Each file holds ``name`` and ``addition`` keys. Writes go through a
    temporary file in the same directory; ``save_if_absent`` publishes it
    with a hard link, which fails atomically if the row already exists.
    """

    def __init__(self, directory: Path) -> None:
        self._directory: Path = directory
        self._lock: threading.Lock = threading.Lock()

    @property
    def directory(self) -> Path:
        return self._directory

    def _path_for(self, name: str) -> Path:
        return self._directory / f"{_validate_name(name)}{_SUFFIX}"

    def get(self, name: str) -> SenderConfigRecord | None:
        path = self._path_for(name)
        if not path.exists():
            return None
        return self._read(path)

    def save(self, record: SenderConfigRecord) -> None:
        path = self._path_for(record.name)
        with self._lock:
            tmp_path = self._write_temp(record)
            try:
                os.replace(tmp_path, path)
            except OSError as exc:
                tmp_path.unlink(missing_ok=True)
                msg = f"Failed to save configuration for {record.name!r}: {exc}"
                raise StorageError(msg) from exc
        logger.debug("Saved provider configuration row %s", record.name)

    def save_if_absent(self, record: SenderConfigRecord) -> bool:
        path = self._path_for(record.name)
        with self._lock:
            if path.exists():
                return False
            tmp_path = self._write_temp(record)
            try:
                os.link(tmp_path, path)
            except FileExistsError:
                return False
            except OSError as exc:
                msg = f"Failed to save configuration for {record.name!r}: {exc}"
                raise StorageError(msg) from exc
            finally:
                tmp_path.unlink(missing_ok=True)
        logger.debug("Created provider configuration row %s", record.name)
        return True

    def list(self) -> tuple[SenderConfigRecord, ...]:
        if not self._directory.exists():
            return ()
        records: list[SenderConfigRecord] = []
        for path in sorted(self._directory.glob(f"*{_SUFFIX}")):
            if _NAME_PATTERN.match(path.stem):
                records.append(self._read(path))
        return tuple(records)

    def _write_temp(self, record: SenderConfigRecord) -> Path:
        try:
            self._directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self._directory, prefix=f".{record.name}.", suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                yaml.safe_dump(
                    {"name": record.name, "addition": record.addition},
                    handle,
                    allow_unicode=True,
                    sort_keys=False,
                )
        except (OSError, yaml.YAMLError) as exc:
            msg = f"Failed to write configuration for {record.name!r}: {exc}"
            raise StorageError(msg) from exc
        return Path(tmp_name)

    @staticmethod
    def _read(path: Path) -> SenderConfigRecord:
        try:
            with path.open("r", encoding="utf-8") as handle:
                raw: object = yaml.safe_load(handle)  # pyright: ignore[reportAny]  # YAML boundary
        except (OSError, yaml.YAMLError) as exc:
            msg = f"Failed to read configuration row {path}: {exc}"
            raise StorageError(msg) from exc

        if not isinstance(raw, dict):
            msg = f"Configuration row {path} must be a mapping"
            raise StorageError(msg)
        addition = raw.get("addition", "")  # pyright: ignore[reportUnknownMemberType, reportUnknownVariableType]
        if not isinstance(addition, str):
            msg = f"Configuration row {path} has a non-string 'addition'"
            raise StorageError(msg)
        return SenderConfigRecord(name=path.stem, addition=addition)
