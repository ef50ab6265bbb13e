from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

logger = logging.getLogger(__name__)

SKIPPED_DIRS = frozenset({
    ".git",
    ".hg",
    ".svn",
    "__pycache__",
    ".pytest_cache",
    ".mypy_cache",
    ".tox",
})


class ProjectFileSystem:
    """Indexes every file under the configured roots.

    The walk happens once, on first use. Roots are resolved through
    symlinks; paths are absolute and sorted so that selection output is
    stable across runs.
    """

    def __init__(
        self,
        roots: Iterable[str],
        extensions: tuple[str, ...] | None = None,
    ) -> None:
        self._roots = tuple(os.path.realpath(r) for r in roots)
        self._extensions = extensions
        self._files: list[str] | None = None
        self._index: frozenset[str] = frozenset()

    def get_all_files(self) -> list[str]:
        if self._files is None:
            self._files = self._walk()
            self._index = frozenset(self._files)
            logger.debug(
                "[TESTPATH-SELECT] stage=discover event=indexed "
                "roots=%d files=%d",
                len(self._roots),
                len(self._files),
            )
        return list(self._files)

    def exists(self, path: str) -> bool:
        if self._files is not None and path in self._index:
            return True
        return os.path.isfile(path)

    def _walk(self) -> list[str]:
        seen: set[str] = set()
        for root in self._roots:
            for dirpath, dirnames, filenames in os.walk(root):
                dirnames[:] = [d for d in dirnames if d not in SKIPPED_DIRS]
                for name in filenames:
                    if self._extensions and not name.endswith(self._extensions):
                        continue
                    seen.add(os.path.join(dirpath, name))
        return sorted(seen)


class StaticFileSystem:
    """Serves a fixed list of candidate paths."""

    def __init__(self, paths: Iterable[str]) -> None:
        self._paths = list(dict.fromkeys(paths))
        self._index = frozenset(self._paths)

    def get_all_files(self) -> list[str]:
        return list(self._paths)

    def exists(self, path: str) -> bool:
        return path in self._index
