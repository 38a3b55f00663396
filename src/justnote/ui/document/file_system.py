from __future__ import annotations

from pathlib import Path
from typing import Protocol


class FileSystem(Protocol):
    def read_file(self, path: str) -> bytes: ...

    def write_file(self, path: str, data: bytes) -> None: ...


class LocalFileSystem:
    """Synchronous disk access; ``OSError`` propagates to the caller."""

    def read_file(self, path: str) -> bytes:
        return Path(path).read_bytes()

    def write_file(self, path: str, data: bytes) -> None:
        with open(path, "wb") as handle:
            handle.write(data)
