"""Execute stage orchestrator: run the selected test files."""
from __future__ import annotations

import logging
from pathlib import Path

from TestPathSelection.execution.runner import ExecutionRunner

logger = logging.getLogger(__name__)


def run_execute(
    selection_file: Path,
    runner: str = "pytest",
    output_dir: str = "./results",
    extra_args: list[str] | None = None,
) -> int:
    """Run the execution stage.

    Returns the runner exit code. Raises ExecutionError when the runner
    is unknown or the selection file cannot be read.
    """
    execution = ExecutionRunner(
        selection_file=selection_file,
        runner=runner,
        output_dir=output_dir,
    )

    logger.info(
        "[TESTPATH-SELECT] stage=execute event=start "
        "runner=%s files=%d selection=%s",
        runner,
        len(execution.paths),
        selection_file,
    )

    return_code = execution.execute(extra_args=extra_args)
    execution.generate_report(return_code)

    logger.info(
        "[TESTPATH-SELECT] stage=execute event=complete "
        "return_code=%d",
        return_code,
    )
    return return_code
