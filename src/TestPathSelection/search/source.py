"""Top-level test path selection: pattern, changed-files and explicit-file modes."""
from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING

from TestPathSelection.changes.git import GitChangedFiles
from TestPathSelection.changes.hg import HgChangedFiles
from TestPathSelection.changes.resolver import ChangeSetResolver
from TestPathSelection.dependencies.python_imports import PythonImportGraph
from TestPathSelection.discovery.filesystem import ProjectFileSystem
from TestPathSelection.selection.criteria import compile_criteria, compile_pattern
from TestPathSelection.selection.filtering import PathFilterEngine
from TestPathSelection.shared.types import ChangedFilesOptions, PatternInfo, SearchResult

if TYPE_CHECKING:
    import re
    from collections.abc import Set

    from TestPathSelection.changes.ports import ChangedFilesProvider
    from TestPathSelection.dependencies.ports import DependencyResolver
    from TestPathSelection.discovery.ports import FileSystem
    from TestPathSelection.shared.config import SearchSourceConfig

logger = logging.getLogger(__name__)


class SearchSource:
    """Finds the test files to run for a selection request.

    Collaborators are injected; ``for_project`` wires the default
    filesystem walker, Python import graph and git/hg adapters.
    Criteria are compiled here, so an invalid configuration raises
    ConfigurationError at construction.
    """

    def __init__(
        self,
        config: SearchSourceConfig,
        file_system: FileSystem,
        dependency_resolver: DependencyResolver,
        git: ChangedFilesProvider,
        hg: ChangedFilesProvider,
        cwd: str | None = None,
    ) -> None:
        self._config = config
        self._fs = file_system
        self._dependency_resolver = dependency_resolver
        self._changes = ChangeSetResolver(git=git, hg=hg)
        self._cwd = cwd or os.getcwd()
        self._engine = PathFilterEngine(compile_criteria(config))

    @classmethod
    def for_project(
        cls,
        config: SearchSourceConfig,
        file_system: FileSystem | None = None,
        cwd: str | None = None,
    ) -> SearchSource:
        fs = file_system or ProjectFileSystem(config.roots)
        return cls(
            config=config,
            file_system=fs,
            dependency_resolver=PythonImportGraph(fs, config.roots),
            git=GitChangedFiles(),
            hg=HgChangedFiles(),
            cwd=cwd,
        )

    def is_test_file_path(self, path: str) -> bool:
        return self._engine.is_test_file(path)

    def find_matching_tests(
        self, test_path_pattern: str | re.Pattern[str]
    ) -> SearchResult:
        """Filter all files by ``test_path_pattern``.

        A plain string naming an existing file selects just that file.
        Its directory is resolved through symlinks like the roots are.
        """
        if test_path_pattern and isinstance(test_path_pattern, str):
            candidate = os.path.join(self._cwd, test_path_pattern)
            maybe_file = os.path.join(
                os.path.realpath(os.path.dirname(candidate)),
                os.path.basename(candidate),
            )
            if self._fs.exists(maybe_file):
                return self._engine.filter_with_stats([maybe_file])

        return self._engine.filter_with_stats(
            self._fs.get_all_files(), test_path_pattern
        )

    def find_related_tests(self, paths: Set[str]) -> SearchResult:
        return SearchResult(
            paths=tuple(
                self._dependency_resolver.resolve_inverse(
                    paths,
                    self.is_test_file_path,
                    self._config.resolve_options,
                )
            ),
        )

    async def find_changed_tests(
        self, options: ChangedFilesOptions | None = None
    ) -> SearchResult:
        change_set = await self._changes.resolve(self._config.roots, options)
        if change_set.no_scm:
            return SearchResult(
                no_scm=True,
                roots_without_scm=change_set.roots_without_scm,
            )
        return self.find_related_tests(frozenset(change_set.files))

    async def get_test_paths(self, pattern_info: PatternInfo) -> SearchResult:
        """Dispatch a request; changed-files mode wins over any pattern."""
        logger.debug(
            "[TESTPATH-SELECT] stage=select event=dispatch "
            "only_changed=%s pattern=%r",
            pattern_info.only_changed,
            pattern_info.test_path_pattern,
        )
        if pattern_info.only_changed:
            return await self.find_changed_tests(
                ChangedFilesOptions(last_commit=pattern_info.last_commit)
            )
        if pattern_info.test_path_pattern is not None:
            pattern: str | re.Pattern[str] = pattern_info.test_path_pattern
            if pattern and pattern_info.should_treat_input_as_pattern:
                pattern = compile_pattern(pattern)
            return self.find_matching_tests(pattern)
        return SearchResult()
