"""Filesystem protocol -- the port for candidate path enumeration."""
from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class FileSystem(Protocol):
    """Protocol for the universe of candidate paths.

    Decouples selection from how files are discovered. Implementations
    return absolute paths.
    """

    def get_all_files(self) -> list[str]: ...

    def exists(self, path: str) -> bool: ...
