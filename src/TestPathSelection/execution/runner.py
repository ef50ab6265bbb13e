from __future__ import annotations

import json
from pathlib import Path

from TestPathSelection.pipeline.errors import ExecutionError
from TestPathSelection.shared.types import SearchResult

RUNNERS = ("pytest", "robot")

# Exit codes reported without starting a runner when nothing was selected.
NO_TESTS_EXIT_CODES = {"pytest": 5, "robot": 252}


class ExecutionRunner:
    """Runs the test files of a selection with pytest or Robot Framework.

    The selection file is the JSON written by the select stage.
    """

    def __init__(
        self,
        selection_file: str | Path,
        runner: str = "pytest",
        output_dir: str | Path = "./results",
    ) -> None:
        if runner not in RUNNERS:
            raise ExecutionError(
                f"Unknown runner {runner!r}. Available: {', '.join(RUNNERS)}"
            )
        self._selection_file = Path(selection_file)
        self._runner = runner
        self._output_dir = Path(output_dir)
        try:
            self._selection = SearchResult.from_json(self._selection_file)
        except (OSError, ValueError, KeyError) as exc:
            raise ExecutionError(
                f"Cannot read selection file {self._selection_file}: {exc}"
            ) from exc

    @property
    def paths(self) -> tuple[str, ...]:
        return self._selection.paths

    def build_args(self, extra_args: list[str] | None = None) -> list[str]:
        """Build runner CLI arguments: output options, extras, then paths."""
        if self._runner == "pytest":
            args = [f"--junitxml={self._output_dir / 'results.xml'}"]
        else:
            args = ["--outputdir", str(self._output_dir)]
        if extra_args:
            args.extend(extra_args)
        args.extend(self.paths)
        return args

    def execute(self, extra_args: list[str] | None = None) -> int:
        """Run the selected paths. Returns the runner exit code."""
        if not self.paths:
            return NO_TESTS_EXIT_CODES[self._runner]

        self._output_dir.mkdir(parents=True, exist_ok=True)
        args = self.build_args(extra_args)
        if self._runner == "pytest":
            import pytest

            return int(pytest.main(args))

        import robot

        return robot.run_cli(args, exit=False)  # type: ignore[attr-defined]

    def generate_report(self, return_code: int) -> dict:
        """Write selection_report.json with execution metadata."""
        report = {
            "return_code": return_code,
            "runner": self._runner,
            "selection_file": str(self._selection_file),
            "selected_files": len(self.paths),
            "candidates": self._selection.total,
            "stats": self._selection.stats,
            "status": "pass" if return_code == 0 else "fail",
        }
        self._output_dir.mkdir(parents=True, exist_ok=True)
        report_path = self._output_dir / "selection_report.json"
        report_path.write_text(json.dumps(report, indent=2))
        return report
