"""Tests for criterion-based filtering with per-criterion stats."""
from __future__ import annotations

import itertools
import re

import pytest

from TestPathSelection.selection.criteria import compile_criteria
from TestPathSelection.selection.filtering import PathFilterEngine
from TestPathSelection.shared.config import SearchSourceConfig


@pytest.fixture
def engine() -> PathFilterEngine:
    config = SearchSourceConfig(
        root_dir="/proj",
        test_path_dirs=("/proj/src", "/proj/test"),
        test_regex=r"\.test\.js$",
        test_path_ignore_patterns=("/node_modules/",),
    )
    return PathFilterEngine(compile_criteria(config))


def _combination_paths() -> dict[tuple[bool, bool, bool, bool], str]:
    """One path per combination of (in dirs, regex, not ignored, pattern)."""
    paths = {}
    for in_dirs, regex, not_ignored, pattern in itertools.product(
        (True, False), repeat=4
    ):
        directory = "/proj/test" if in_dirs else "/other"
        ignored = "" if not_ignored else "/node_modules"
        prefix = "special_" if pattern else ""
        name = "x.test.js" if regex else "x.js"
        paths[(in_dirs, regex, not_ignored, pattern)] = (
            f"{directory}{ignored}/{prefix}{name}"
        )
    return paths


class TestFilterWithStats:
    def test_scenario_counts_each_criterion_independently(
        self, engine: PathFilterEngine,
    ) -> None:
        result = engine.filter_with_stats([
            "/proj/test/a.test.js",
            "/proj/src/a.js",
            "/proj/test/node_modules/x.test.js",
        ])

        assert result.paths == ("/proj/test/a.test.js",)
        assert result.stats == {
            "testPathDirs": 3,
            "testRegex": 2,
            "testPathIgnorePatterns": 2,
        }
        assert result.total == 3

    def test_stats_cover_every_subset_of_criteria(
        self, engine: PathFilterEngine,
    ) -> None:
        combinations = _combination_paths()
        result = engine.filter_with_stats(list(combinations.values()), "special")

        # Each criterion holds for exactly half of the 16 combinations.
        assert result.stats == {
            "testPathDirs": 8,
            "testRegex": 8,
            "testPathIgnorePatterns": 8,
            "testPathPattern": 8,
        }
        assert result.paths == (combinations[(True, True, True, True)],)
        assert result.total == 16
        assert all(count <= result.total for count in result.stats.values())

    def test_unsatisfied_criterion_has_zero_entry(
        self, engine: PathFilterEngine,
    ) -> None:
        result = engine.filter_with_stats(["/proj/src/a.js", "/proj/src/b.js"])

        assert result.paths == ()
        assert result.stats is not None
        assert result.stats["testRegex"] == 0
        assert result.stats["testPathDirs"] == 2

    def test_empty_candidates(self, engine: PathFilterEngine) -> None:
        result = engine.filter_with_stats([])

        assert result.paths == ()
        assert result.stats == {}
        assert result.total == 0

    def test_order_is_preserved(self, engine: PathFilterEngine) -> None:
        candidates = [
            "/proj/test/z.test.js",
            "/proj/src/a.test.js",
            "/proj/test/m.test.js",
        ]
        result = engine.filter_with_stats(candidates)
        assert result.paths == tuple(candidates)

    def test_idempotent(self, engine: PathFilterEngine) -> None:
        candidates = list(_combination_paths().values())
        first = engine.filter_with_stats(candidates, "special")
        second = engine.filter_with_stats(candidates, "special")
        assert first == second

    def test_empty_pattern_adds_no_stats_entry(
        self, engine: PathFilterEngine,
    ) -> None:
        result = engine.filter_with_stats(["/proj/test/a.test.js"], "")
        assert result.stats is not None
        assert "testPathPattern" not in result.stats
        assert result.paths == ("/proj/test/a.test.js",)

    def test_compiled_pattern(self, engine: PathFilterEngine) -> None:
        result = engine.filter_with_stats(
            ["/proj/test/a.test.js", "/proj/test/b.test.js"],
            re.compile(r"/b\."),
        )
        assert result.paths == ("/proj/test/b.test.js",)
        assert result.stats is not None
        assert result.stats["testPathPattern"] == 1


class TestIsTestFile:
    def test_is_and_over_fixed_criteria(self, engine: PathFilterEngine) -> None:
        for (in_dirs, regex, not_ignored, _), path in _combination_paths().items():
            assert engine.is_test_file(path) == (in_dirs and regex and not_ignored)

    def test_scenario(self, engine: PathFilterEngine) -> None:
        assert engine.is_test_file("/proj/test/a.test.js")
        assert not engine.is_test_file("/proj/src/a.js")
        assert not engine.is_test_file("/proj/test/node_modules/x.test.js")
