"""
File storage used for uploaded curriculum documents.

Paths are relative ('uploads/cp_matematika_1700000000000.xlsx') and resolved
against the store's root, so the same path can be kept in the database.
"""

from __future__ import annotations
from pathlib import Path
from typing import Dict, Protocol


class FileStore(Protocol):
    def write_bytes(self, path: str, data: bytes) -> None: ...

    def read_bytes(self, path: str) -> bytes: ...

    def exists(self, path: str) -> bool: ...


class LocalFileStore:
    """Files on local disk under `root`. Parent folders are created on write."""

    def __init__(self, root: str | Path = "."):
        self.root = Path(root)

    def _resolve(self, path: str) -> Path:
        return self.root / path

    def write_bytes(self, path: str, data: bytes) -> None:
        target = self._resolve(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)

    def read_bytes(self, path: str) -> bytes:
        return self._resolve(path).read_bytes()

    def exists(self, path: str) -> bool:
        return self._resolve(path).is_file()


class MemoryFileStore:
    """In-process store, mainly for tests."""

    def __init__(self):
        self.files: Dict[str, bytes] = {}

    def write_bytes(self, path: str, data: bytes) -> None:
        self.files[path] = bytes(data)

    def read_bytes(self, path: str) -> bytes:
        try:
            return self.files[path]
        except KeyError:
            raise FileNotFoundError(path) from None

    def exists(self, path: str) -> bool:
        return path in self.files
