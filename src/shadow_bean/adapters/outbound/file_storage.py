from __future__ import annotations

import os
import re
import tempfile
from dataclasses import dataclass
from pathlib import Path

from returns.result import Failure, Result, Success

from shadow_bean.core.domain.model.errors import CommerceError, PersistenceError
from shadow_bean.core.ports.outbound.storage import KeyValueStorage

_SAFE_KEY = re.compile(r"^[A-Za-z0-9._-]+$")


@dataclass
class FileKeyValueStorage(KeyValueStorage):
    """One ``<key>.json`` file per key under ``directory``."""

    directory: Path

    def __post_init__(self) -> None:
        self.directory = Path(self.directory)

    def get(self, key: str) -> Result[str | None, CommerceError]:
        path = self._path(key)
        if path is None:
            return Failure(PersistenceError(message=f"invalid storage key: {key!r}"))
        try:
            return Success(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return Success(None)
        except OSError as e:
            return Failure(PersistenceError(message=f"read failed: {e}"))

    def set(self, key: str, value: str) -> Result[None, CommerceError]:
        path = self._path(key)
        if path is None:
            return Failure(PersistenceError(message=f"invalid storage key: {key!r}"))
        tmp: str | None = None
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            # write-then-rename so a crash never leaves a half-written record
            fd, tmp = tempfile.mkstemp(dir=self.directory, suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(value)
            os.replace(tmp, path)
        except OSError as e:
            if tmp is not None:
                Path(tmp).unlink(missing_ok=True)
            return Failure(PersistenceError(message=f"write failed: {e}"))
        return Success(None)

    def remove(self, key: str) -> Result[None, CommerceError]:
        path = self._path(key)
        if path is None:
            return Failure(PersistenceError(message=f"invalid storage key: {key!r}"))
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            return Failure(PersistenceError(message=f"remove failed: {e}"))
        return Success(None)

    def _path(self, key: str) -> Path | None:
        if not _SAFE_KEY.match(key):
            return None
        return self.directory / f"{key}.json"
