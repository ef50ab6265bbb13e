"""Compile static configuration into named test-path predicates."""
from __future__ import annotations

import os
import re
from dataclasses import dataclass

from TestPathSelection.pipeline.errors import ConfigurationError, InvalidPatternError
from TestPathSelection.shared.config import SearchSourceConfig
from TestPathSelection.shared.types import (
    TEST_PATH_DIRS,
    TEST_PATH_IGNORE_PATTERNS,
    TEST_PATH_PATTERN,
    TEST_REGEX,
    PathPredicate,
)

_REGEX_SPECIAL = re.compile(r"[\[\]{}()*+?.\\^$|]")


def escape_str_for_regex(value: str) -> str:
    return _REGEX_SPECIAL.sub(lambda m: "\\" + m.group(0), value)


def replace_path_sep_for_regex(value: str, sep: str | None = None) -> str:
    """Rewrite ``/`` path separators in a regex source for the host.

    On POSIX hosts this is the identity. On Windows both ``/`` and
    backslashes that do not escape a dot become an escaped backslash.
    """
    sep = sep or os.sep
    if sep == "\\":
        return re.sub(r"(/|\\(?!\.))", r"\\\\", value)
    return value


def escape_path_for_regex(directory: str, sep: str | None = None) -> str:
    """Escape a directory path so it matches literally inside a regex."""
    sep = sep or os.sep
    if sep == "\\":
        # Protect backslashes from escaping; they are restored below.
        directory = directory.replace("\\", "/")
    return replace_path_sep_for_regex(escape_str_for_regex(directory), sep)


@dataclass(frozen=True)
class Criterion:
    """A named predicate over a path."""

    name: str
    predicate: PathPredicate

    def __call__(self, path: str) -> bool:
        return self.predicate(path)


@dataclass(frozen=True)
class TestPathCriteria:
    """The fixed, ordered set of test-file criteria for one configuration."""

    __test__ = False

    dir_pattern: re.Pattern[str]
    test_regex: re.Pattern[str]
    ignore_patterns: tuple[re.Pattern[str], ...] = ()

    @property
    def fixed(self) -> tuple[Criterion, ...]:
        return (
            Criterion(TEST_PATH_DIRS, self._in_test_path_dirs),
            Criterion(TEST_REGEX, self._matches_test_regex),
            Criterion(TEST_PATH_IGNORE_PATTERNS, self._not_ignored),
        )

    def with_pattern(self, pattern: str | re.Pattern[str] | None) -> tuple[Criterion, ...]:
        """Return the fixed criteria plus an ad-hoc ``testPathPattern``.

        An empty or missing pattern adds no criterion.
        """
        if not pattern:
            return self.fixed
        regex = compile_pattern(pattern)
        return (*self.fixed, Criterion(TEST_PATH_PATTERN, lambda p: regex.search(p) is not None))

    def _in_test_path_dirs(self, path: str) -> bool:
        return self.dir_pattern.search(path) is not None

    def _matches_test_regex(self, path: str) -> bool:
        return self.test_regex.search(path) is not None

    def _not_ignored(self, path: str) -> bool:
        return not any(p.search(path) for p in self.ignore_patterns)


def compile_pattern(pattern: str | re.Pattern[str]) -> re.Pattern[str]:
    """Compile an ad-hoc test path pattern supplied for one request."""
    if isinstance(pattern, re.Pattern):
        return pattern
    try:
        return re.compile(pattern)
    except re.error as exc:
        raise InvalidPatternError(
            f"Invalid testPathPattern {pattern!r}: {exc}"
        ) from exc


def _compile_option(option: str, source: str) -> re.Pattern[str]:
    try:
        return re.compile(source)
    except re.error as exc:
        raise ConfigurationError(f"Invalid {option} {source!r}: {exc}") from exc


def compile_criteria(config: SearchSourceConfig) -> TestPathCriteria:
    """Compile ``config`` into test-path criteria.

    Raises ConfigurationError naming the option whose regex is invalid.
    """
    dir_pattern = _compile_option(
        TEST_PATH_DIRS, "|".join(escape_path_for_regex(d) for d in config.roots)
    )
    test_regex = _compile_option(
        TEST_REGEX, replace_path_sep_for_regex(config.test_regex)
    )
    ignore_patterns = tuple(
        _compile_option(TEST_PATH_IGNORE_PATTERNS, source)
        for source in config.test_path_ignore_patterns
    )
    return TestPathCriteria(
        dir_pattern=dir_pattern,
        test_regex=test_regex,
        ignore_patterns=ignore_patterns,
    )
