"""pytest plugin for test path selection.

Registered as a ``pytest11`` entry point. Activated via CLI options:

    pytest --testpath-pattern=api tests/
    pytest --testpath-only-changed

Without ``--testpath-pattern`` or ``--testpath-only-changed`` the plugin
is inactive. When active, the files of the collected items are the
candidate universe, the pytest rootdir is the search root, and items
whose file is not selected are deselected.
"""
from __future__ import annotations

import asyncio
import logging
import os

import pytest

from TestPathSelection.discovery.filesystem import StaticFileSystem
from TestPathSelection.pipeline.errors import ConfigurationError, InvalidPatternError
from TestPathSelection.search.source import SearchSource
from TestPathSelection.shared.config import SearchSourceConfig
from TestPathSelection.shared.types import PatternInfo, SearchResult

logger = logging.getLogger("TestPathSelection.pytest")


def pytest_addoption(parser: pytest.Parser) -> None:
    """Register CLI options for test path selection."""
    group = parser.getgroup("testpath", "Test path selection")
    group.addoption(
        "--testpath-pattern",
        default=None,
        help="Only run test files whose path matches this regex, "
        "or the single test file it names.",
    )
    group.addoption(
        "--testpath-only-changed",
        action="store_true",
        default=False,
        help="Only run test files related to files changed under git/hg. "
        "Takes precedence over --testpath-pattern.",
    )
    group.addoption(
        "--testpath-last-commit",
        action="store_true",
        default=False,
        help="With --testpath-only-changed, use the files of the last commit.",
    )
    group.addoption(
        "--testpath-ignore",
        nargs="*",
        default=[],
        help="Regexes of test file paths to deselect.",
    )


@pytest.hookimpl(trylast=True)
def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item],
) -> None:
    """Deselect collected items whose file is not selected."""
    pattern = config.getoption("--testpath-pattern", default=None)
    only_changed = config.getoption("--testpath-only-changed", default=False)
    if pattern is None and not only_changed:
        return  # Plugin disabled

    pattern_info = PatternInfo(
        input=pattern or "",
        test_path_pattern=pattern,
        only_changed=only_changed,
        last_commit=config.getoption("--testpath-last-commit", default=False),
    )
    # Selection works on symlink-resolved paths, like the SCM output.
    real_paths = {item: os.path.realpath(item.path) for item in items}
    files = list(dict.fromkeys(real_paths.values()))

    try:
        result = _select_paths(config, pattern_info, files)
    except (ConfigurationError, InvalidPatternError) as exc:
        raise pytest.UsageError(str(exc)) from exc
    except Exception as exc:
        logger.warning(
            "[TESTPATH] Selection failed, running all tests: %s", exc,
        )
        return

    if result.no_scm:
        logger.warning(
            "[TESTPATH] No git/hg repository found for %s, running all tests.",
            ", ".join(result.roots_without_scm),
        )
        return

    selected = set(result.paths)
    deselected = [item for item in items if real_paths[item] not in selected]
    if deselected:
        config.hook.pytest_deselected(items=deselected)
        items[:] = [item for item in items if real_paths[item] in selected]

    logger.info(
        "[TESTPATH] Selected %d/%d tests from %d/%d files.",
        len(items), len(items) + len(deselected), len(selected), len(files),
    )


def _select_paths(
    config: pytest.Config,
    pattern_info: PatternInfo,
    files: list[str],
) -> SearchResult:
    """Run the selection engine over the collected files."""
    search_config = SearchSourceConfig(
        root_dir=str(config.rootpath),
        # Collected items already passed pytest's own naming rules.
        test_regex="",
        test_path_ignore_patterns=tuple(
            config.getoption("--testpath-ignore", default=None) or ()
        ),
    )
    # Changed-files mode needs every project file for the import graph.
    file_system = None if pattern_info.only_changed else StaticFileSystem(files)
    source = SearchSource.for_project(
        search_config,
        file_system=file_system,
        cwd=str(config.invocation_params.dir),
    )
    return asyncio.run(source.get_test_paths(pattern_info))
