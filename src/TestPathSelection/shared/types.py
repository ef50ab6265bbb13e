from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

# Criterion names, in evaluation order.
TEST_PATH_DIRS = "testPathDirs"
TEST_REGEX = "testRegex"
TEST_PATH_IGNORE_PATTERNS = "testPathIgnorePatterns"
TEST_PATH_PATTERN = "testPathPattern"

PathPredicate = Callable[[str], bool]


@dataclass(frozen=True)
class SearchResult:
    """Outcome of a selection request.

    ``stats`` maps each evaluated criterion to the number of candidates
    that satisfied it on its own. ``total`` is the candidate count before
    filtering. ``no_scm`` is only set by changed-files selection when at
    least one root is not under version control.
    """

    paths: tuple[str, ...] = ()
    stats: dict[str, int] | None = None
    total: int | None = None
    no_scm: bool = False
    roots_without_scm: tuple[str, ...] = ()

    def to_json(self, path: Path) -> None:
        data = {
            "paths": list(self.paths),
            "stats": self.stats,
            "total": self.total,
            "no_scm": self.no_scm,
            "roots_without_scm": list(self.roots_without_scm),
        }
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data, indent=2))

    @classmethod
    def from_json(cls, path: Path) -> SearchResult:
        data = json.loads(path.read_text())
        stats = data.get("stats")
        return cls(
            paths=tuple(data["paths"]),
            stats=dict(stats) if stats is not None else None,
            total=data.get("total"),
            no_scm=data.get("no_scm", False),
            roots_without_scm=tuple(data.get("roots_without_scm", [])),
        )


@dataclass(frozen=True)
class PatternInfo:
    """Mode descriptor for a single selection request.

    ``watch`` is carried for callers (e.g. to word a "no tests found"
    message); selection itself never reads it.
    """

    input: str = ""
    test_path_pattern: str | None = None
    only_changed: bool = False
    last_commit: bool = False
    watch: bool = False
    should_treat_input_as_pattern: bool = False


@dataclass(frozen=True)
class ChangedFilesOptions:
    """Options forwarded to the SCM adapters."""

    last_commit: bool = False


@dataclass(frozen=True)
class ResolveOptions:
    """Options forwarded to the dependency resolver."""

    relative_imports_only: bool = False


@dataclass(frozen=True)
class RepoStatus:
    """SCM detection outcome for one configured root."""

    root: str
    git: str | None = None
    hg: str | None = None

    @property
    def has_scm(self) -> bool:
        return bool(self.git or self.hg)


@dataclass(frozen=True)
class ChangeSet:
    """Changed files collected across all configured roots."""

    files: tuple[str, ...] = ()
    no_scm: bool = False
    roots_without_scm: tuple[str, ...] = field(default_factory=tuple)
