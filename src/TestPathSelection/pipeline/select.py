"""Select stage orchestrator: resolve test paths and write the selection."""
from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from TestPathSelection.pipeline.errors import SelectionError, TestPathSelectionError
from TestPathSelection.search.source import SearchSource

if TYPE_CHECKING:
    from pathlib import Path

    from TestPathSelection.discovery.ports import FileSystem
    from TestPathSelection.shared.config import SearchSourceConfig
    from TestPathSelection.shared.types import PatternInfo, SearchResult

logger = logging.getLogger(__name__)


def run_select(
    config: SearchSourceConfig,
    pattern_info: PatternInfo,
    output_file: Path | None = None,
    cwd: str | None = None,
    file_system: FileSystem | None = None,
) -> SearchResult:
    """Run the selection stage.

    Returns the SearchResult. Library errors (invalid configuration or
    pattern, failing SCM commands) propagate unchanged; anything else is
    wrapped in SelectionError.
    """
    try:
        source = SearchSource.for_project(config, file_system=file_system, cwd=cwd)
        result = asyncio.run(source.get_test_paths(pattern_info))
    except TestPathSelectionError:
        raise
    except Exception as exc:
        logger.warning(
            "[TESTPATH-SELECT] stage=select event=error error=%s",
            str(exc),
        )
        raise SelectionError(str(exc)) from exc

    if result.no_scm:
        logger.warning(
            "[TESTPATH-SELECT] stage=select event=no_scm roots=%s",
            ",".join(result.roots_without_scm),
        )
    else:
        logger.info(
            "[TESTPATH-SELECT] stage=select event=complete "
            "mode=%s selected=%d total=%s",
            _mode(pattern_info),
            len(result.paths),
            result.total if result.total is not None else "-",
        )
    for name, count in (result.stats or {}).items():
        logger.debug(
            "[TESTPATH-SELECT] stage=select event=criterion "
            "name=%s matches=%d",
            name,
            count,
        )

    if output_file is not None:
        result.to_json(output_file)
        logger.info(
            "[TESTPATH-SELECT] stage=select event=written path=%s",
            output_file,
        )
    return result


def _mode(pattern_info: PatternInfo) -> str:
    if pattern_info.only_changed:
        return "changed"
    if pattern_info.test_path_pattern is not None:
        return "pattern"
    return "none"
