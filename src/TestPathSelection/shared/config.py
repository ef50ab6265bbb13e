from __future__ import annotations

import os
from dataclasses import dataclass, field

from TestPathSelection.shared.types import ResolveOptions

DEFAULT_TEST_REGEX = r"(/tests?/.*|/test_[^/]*|_test)\.(py|robot)$"
DEFAULT_IGNORE_PATTERNS = ("/\\.venv/", "/site-packages/")


@dataclass(frozen=True)
class SearchSourceConfig:
    """Static configuration compiled into the test-path criteria.

    ``test_path_dirs`` defaults to ``(root_dir,)`` when left empty.
    ``roots`` resolves them through symlinks, the form git and hg report.
    """

    root_dir: str = field(default_factory=os.getcwd)
    test_path_dirs: tuple[str, ...] = ()
    test_regex: str = DEFAULT_TEST_REGEX
    test_path_ignore_patterns: tuple[str, ...] = DEFAULT_IGNORE_PATTERNS
    resolve_options: ResolveOptions = field(default_factory=ResolveOptions)

    def __post_init__(self) -> None:
        if not self.test_path_dirs:
            object.__setattr__(self, "test_path_dirs", (self.root_dir,))

    @property
    def roots(self) -> tuple[str, ...]:
        return tuple(os.path.realpath(d) for d in self.test_path_dirs)

