"""SCM protocol -- the port for version-control adapters."""
from __future__ import annotations

from typing import Protocol, runtime_checkable

from TestPathSelection.shared.types import ChangedFilesOptions


@runtime_checkable
class ChangedFilesProvider(Protocol):
    """Protocol for one version-control system.

    ``is_repository`` returns the repository root for ``path``, or None
    when ``path`` is not managed by this SCM. ``find_changed_files``
    returns absolute paths.
    """

    @property
    def name(self) -> str: ...

    async def is_repository(self, path: str) -> str | None: ...

    async def find_changed_files(
        self, repo_root: str, options: ChangedFilesOptions
    ) -> list[str]: ...
