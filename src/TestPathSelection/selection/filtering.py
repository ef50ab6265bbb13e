"""Criterion-based filtering of candidate paths with per-criterion stats."""
from __future__ import annotations

from typing import TYPE_CHECKING

from TestPathSelection.shared.types import SearchResult

if TYPE_CHECKING:
    import re
    from collections.abc import Sequence

    from TestPathSelection.selection.criteria import TestPathCriteria


class PathFilterEngine:
    """Evaluates candidate paths against compiled test-path criteria.

    Inclusion is an AND over all active criteria, but the statistics pass
    evaluates every criterion for every path, so each count reflects how
    many candidates satisfied that criterion on its own.
    """

    def __init__(self, criteria: TestPathCriteria) -> None:
        self._criteria = criteria

    def filter_with_stats(
        self,
        candidates: Sequence[str],
        pattern: str | re.Pattern[str] | None = None,
    ) -> SearchResult:
        """Return the candidates satisfying every criterion, with stats."""
        active = self._criteria.with_pattern(pattern)
        stats: dict[str, int] = {}
        paths: list[str] = []

        for path in candidates:
            matched_all = True
            for criterion in active:
                if criterion(path):
                    stats[criterion.name] = stats.get(criterion.name, 0) + 1
                else:
                    stats.setdefault(criterion.name, 0)
                    matched_all = False
            if matched_all:
                paths.append(path)

        return SearchResult(
            paths=tuple(paths),
            stats=stats,
            total=len(candidates),
        )

    def is_test_file(self, path: str) -> bool:
        """Check ``path`` against the fixed criteria only."""
        return all(criterion(path) for criterion in self._criteria.fixed)
