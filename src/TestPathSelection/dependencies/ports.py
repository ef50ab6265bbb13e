"""Dependency graph protocol -- the port for related-test resolution."""
from __future__ import annotations

from collections.abc import Callable, Set
from typing import Protocol, runtime_checkable

from TestPathSelection.shared.types import ResolveOptions


@runtime_checkable
class DependencyResolver(Protocol):
    """Protocol for inverse dependency lookup.

    Given changed files, returns every file that transitively depends on
    one of them and satisfies ``filter``. Changed files that satisfy
    ``filter`` themselves are included.
    """

    def resolve_inverse(
        self,
        paths: Set[str],
        filter: Callable[[str], bool],
        options: ResolveOptions | None = None,
    ) -> list[str]: ...
