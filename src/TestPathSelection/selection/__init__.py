"""Selection bounded context: test-path criteria and stats-aware filtering."""

from TestPathSelection.selection.criteria import (
    Criterion,
    TestPathCriteria,
    compile_criteria,
    compile_pattern,
    escape_path_for_regex,
    replace_path_sep_for_regex,
)
from TestPathSelection.selection.filtering import PathFilterEngine

__all__ = [
    "Criterion",
    "PathFilterEngine",
    "TestPathCriteria",
    "compile_criteria",
    "compile_pattern",
    "escape_path_for_regex",
    "replace_path_sep_for_regex",
]
