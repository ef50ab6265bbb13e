"""Import graph over the Python files of a project.

Every ``.py`` file known to the filesystem port is parsed with ``ast``
and its imports are resolved back to files of the same index. Module
names are derived from the directory layout: a file is importable by
its dotted path relative to each ancestor directory that is not itself
a package (that is, has no ``__init__.py``), up to the configured roots.
This covers regular packages, ``src`` layouts, namespace packages and
rootdir-relative test modules alike. A module name shared by two
files links to both.
"""
from __future__ import annotations

import ast
import logging
import os
from pathlib import Path
from typing import TYPE_CHECKING

from TestPathSelection.shared.types import ResolveOptions

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Set

    from TestPathSelection.discovery.ports import FileSystem

logger = logging.getLogger(__name__)

INIT_FILE = "__init__.py"


class PythonImportGraph:
    """Resolves direct and inverse dependencies between Python files."""

    def __init__(self, file_system: FileSystem, roots: Iterable[str]) -> None:
        self._fs = file_system
        self._roots = tuple(os.path.realpath(r) for r in roots)
        self._module_map: dict[str, list[str]] | None = None
        self._dependencies: dict[ResolveOptions, dict[str, tuple[str, ...]]] = {}

    def resolve(
        self, path: str, options: ResolveOptions | None = None
    ) -> tuple[str, ...]:
        """Return the indexed files that ``path`` imports directly."""
        return self._dependency_map(options or ResolveOptions()).get(path, ())

    def resolve_inverse(
        self,
        paths: Set[str],
        filter: Callable[[str], bool],
        options: ResolveOptions | None = None,
    ) -> list[str]:
        """Return files that transitively import any of ``paths``.

        Only files accepted by ``filter`` are returned, but traversal
        continues through files it rejects.
        """
        dependency_map = self._dependency_map(options or ResolveOptions())

        related: dict[str, None] = {}
        changed: set[str] = set()
        for path in sorted(paths):
            if self._fs.exists(path):
                if filter(path):
                    related[path] = None
                changed.add(path)

        visited: set[str] = set()
        while changed:
            frontier: list[str] = []
            for module, dependencies in dependency_map.items():
                if module in visited:
                    continue
                if any(dep in changed for dep in dependencies):
                    if filter(module):
                        related[module] = None
                    visited.add(module)
                    frontier.append(module)
            changed = set(frontier)

        return list(related)

    def _dependency_map(
        self, options: ResolveOptions
    ) -> dict[str, tuple[str, ...]]:
        if options not in self._dependencies:
            python_files = [
                p for p in self._fs.get_all_files() if p.endswith(".py")
            ]
            self._dependencies[options] = {
                path: self._resolve_imports(path, options)
                for path in python_files
            }
            logger.debug(
                "[TESTPATH-SELECT] stage=related event=graph_built "
                "modules=%d relative_only=%s",
                len(python_files),
                options.relative_imports_only,
            )
        return self._dependencies[options]

    def _modules(self) -> dict[str, list[str]]:
        if self._module_map is None:
            module_map: dict[str, list[str]] = {}
            for path in self._fs.get_all_files():
                if not path.endswith(".py"):
                    continue
                for name in self._module_names(path):
                    module_map.setdefault(name, []).append(path)
            self._module_map = module_map
        return self._module_map

    def _module_names(self, path: str) -> list[str]:
        file_path = Path(path)
        if file_path.name == INIT_FILE:
            parts = [file_path.parent.name]
            directory = file_path.parent.parent
        else:
            parts = [file_path.stem]
            directory = file_path.parent

        names: list[str] = []
        while True:
            if not self._is_package(directory):
                names.append(".".join(reversed(parts)))
            if str(directory) in self._roots or directory.parent == directory:
                break
            parts.append(directory.name)
            directory = directory.parent
        return names

    def _is_package(self, directory: Path) -> bool:
        return self._fs.exists(str(directory / INIT_FILE))

    def _resolve_imports(
        self, path: str, options: ResolveOptions
    ) -> tuple[str, ...]:
        try:
            tree = ast.parse(Path(path).read_bytes(), filename=path)
        except (SyntaxError, ValueError) as exc:
            logger.debug(
                "[TESTPATH-SELECT] stage=related event=parse_failed "
                "path=%s error=%s",
                path,
                exc,
            )
            return ()

        resolved: dict[str, None] = {}
        for node in ast.walk(tree):
            if isinstance(node, ast.Import):
                if options.relative_imports_only:
                    continue
                for alias in node.names:
                    for name in _with_parents(alias.name):
                        resolved.update(dict.fromkeys(self._modules().get(name, ())))
            elif isinstance(node, ast.ImportFrom):
                if node.level:
                    targets = self._relative_targets(path, node)
                elif options.relative_imports_only:
                    continue
                else:
                    targets = self._absolute_targets(node)
                resolved.update(dict.fromkeys(targets))

        resolved.pop(path, None)
        return tuple(resolved)

    def _absolute_targets(self, node: ast.ImportFrom) -> list[str]:
        module = node.module or ""
        names = list(_with_parents(module))
        names.extend(f"{module}.{alias.name}" for alias in node.names if alias.name != "*")
        targets: list[str] = []
        for name in names:
            targets.extend(self._modules().get(name, ()))
        return targets

    def _relative_targets(self, path: str, node: ast.ImportFrom) -> list[str]:
        base = Path(path).parent
        for _ in range(node.level - 1):
            base = base.parent
        candidates: list[Path] = []
        if node.module:
            base = base.joinpath(*node.module.split("."))
            candidates.append(base.with_suffix(".py"))
        candidates.append(base / INIT_FILE)
        for alias in node.names:
            if alias.name != "*":
                candidates.extend([base / f"{alias.name}.py", base / alias.name / INIT_FILE])
        return [str(c) for c in candidates if self._fs.exists(str(c))]


def _with_parents(dotted: str) -> Iterable[str]:
    """Yield ``a``, ``a.b``, ``a.b.c`` for ``a.b.c``."""
    parts = dotted.split(".") if dotted else []
    for i in range(1, len(parts) + 1):
        yield ".".join(parts[:i])
