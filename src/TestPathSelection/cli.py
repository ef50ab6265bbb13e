"""CLI entry points for test path selection."""
from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from TestPathSelection.shared.config import (
    DEFAULT_IGNORE_PATTERNS,
    DEFAULT_TEST_REGEX,
    SearchSourceConfig,
)
from TestPathSelection.shared.types import PatternInfo, ResolveOptions

if TYPE_CHECKING:
    from TestPathSelection.shared.types import SearchResult

logger = logging.getLogger("TestPathSelection")

EXIT_OK = 0
EXIT_NOTHING_SELECTED = 1
EXIT_ERROR = 2


def _setup_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
    )


def _split_passthrough(argv: list[str]) -> tuple[list[str], list[str]]:
    """Split argv at the first ``--`` into our args and runner args."""
    if "--" not in argv:
        return list(argv), []
    idx = argv.index("--")
    return argv[:idx], argv[idx + 1:]


def _env_ignore_patterns() -> list[str]:
    raw = os.environ.get("TESTPATH_IGNORE")
    if raw is None:
        return list(DEFAULT_IGNORE_PATTERNS)
    return [p for p in raw.split(",") if p]


def _add_selection_arguments(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "pattern", nargs="?", default=None,
        help="Test path pattern, or the path of a single test file",
    )
    p.add_argument(
        "--only-changed", "-o", action="store_true",
        help="Select tests related to files changed under git/hg",
    )
    p.add_argument(
        "--last-commit", action="store_true",
        help="With --only-changed, use the files of the last commit",
    )
    p.add_argument(
        "--pattern-is-regex", action="store_true",
        help="Never treat the pattern as a file path",
    )
    p.add_argument(
        "--root-dir", type=Path, default=Path.cwd(),
        help="Project root (default: current directory)",
    )
    p.add_argument(
        "--root", action="append", dest="roots",
        help="Directory to search for tests (repeatable, default: root dir)",
    )
    p.add_argument(
        "--test-regex",
        default=os.environ.get("TESTPATH_REGEX", DEFAULT_TEST_REGEX),
        help="Regex that test file paths must match",
    )
    p.add_argument(
        "--ignore", nargs="*", default=_env_ignore_patterns(),
        help="Regexes of paths to ignore",
    )
    p.add_argument(
        "--relative-imports-only", action="store_true",
        help="Only follow relative imports when finding related tests",
    )


def _add_select_parser(subparsers: argparse._SubParsersAction) -> None:
    default_output = os.environ.get("TESTPATH_OUTPUT", "")

    p = subparsers.add_parser("select", help="Select test files and list them")
    _add_selection_arguments(p)
    p.add_argument(
        "--output",
        type=Path,
        default=Path(default_output) if default_output else None,
        help="Write the selection as JSON to this file",
    )
    p.set_defaults(func=_cmd_select)


def _add_execute_parser(subparsers: argparse._SubParsersAction) -> None:
    p = subparsers.add_parser("execute", help="Run the files of a selection")
    p.add_argument(
        "--selection", required=True, type=Path, help="Selection JSON file"
    )
    p.add_argument(
        "--runner", default=os.environ.get("TESTPATH_RUNNER", "pytest"),
        help="Test runner: pytest or robot",
    )
    p.add_argument(
        "--output-dir", type=Path, default=Path("./results"),
        help="Output dir",
    )
    p.set_defaults(func=_cmd_execute)


def _add_run_parser(subparsers: argparse._SubParsersAction) -> None:
    p = subparsers.add_parser("run", help="Select test files, then run them")
    _add_selection_arguments(p)
    p.add_argument(
        "--runner", default=os.environ.get("TESTPATH_RUNNER", "pytest"),
        help="Test runner: pytest or robot",
    )
    p.add_argument(
        "--output-dir", type=Path, default=Path("./results"),
        help="Output dir",
    )
    p.set_defaults(func=_cmd_run)


def _build_config(args: argparse.Namespace) -> SearchSourceConfig:
    root_dir = args.root_dir.resolve()
    return SearchSourceConfig(
        root_dir=str(root_dir),
        test_path_dirs=tuple(str((root_dir / r).resolve()) for r in args.roots or ()),
        test_regex=args.test_regex,
        test_path_ignore_patterns=tuple(args.ignore or ()),
        resolve_options=ResolveOptions(
            relative_imports_only=args.relative_imports_only,
        ),
    )


def _build_pattern_info(args: argparse.Namespace) -> PatternInfo:
    return PatternInfo(
        input=args.pattern or "",
        test_path_pattern=args.pattern,
        only_changed=args.only_changed,
        last_commit=args.last_commit,
        should_treat_input_as_pattern=args.pattern_is_regex,
    )


def _select(
    args: argparse.Namespace, output_file: Path | None
) -> SearchResult:
    from TestPathSelection.pipeline.select import run_select

    return run_select(
        config=_build_config(args),
        pattern_info=_build_pattern_info(args),
        output_file=output_file,
    )


def _cmd_select(args: argparse.Namespace) -> int:
    try:
        result = _select(args, args.output)
    except Exception as exc:
        logger.error("[TESTPATH-SELECT] Selection failed: %s", exc)
        return EXIT_ERROR

    for path in result.paths:
        print(path)
    return EXIT_OK if result.paths else EXIT_NOTHING_SELECTED


def _cmd_execute(args: argparse.Namespace) -> int:
    from TestPathSelection.pipeline.execute import run_execute

    try:
        return run_execute(
            selection_file=args.selection,
            runner=args.runner,
            output_dir=str(args.output_dir),
            extra_args=getattr(args, "runner_passthrough", None),
        )
    except Exception as exc:
        logger.error("[TESTPATH-SELECT] Execution failed: %s", exc)
        return EXIT_ERROR


def _cmd_run(args: argparse.Namespace) -> int:
    from TestPathSelection.pipeline.execute import run_execute

    selection_file = args.output_dir / ".artifacts" / "selected_tests.json"
    try:
        result = _select(args, selection_file)
    except Exception as exc:
        logger.error("[TESTPATH-SELECT] Selection failed: %s", exc)
        return EXIT_ERROR

    if result.no_scm:
        logger.error(
            "[TESTPATH-SELECT] --only-changed requires every root to be "
            "in a git or hg repository"
        )
        return EXIT_NOTHING_SELECTED
    if not result.paths:
        logger.info("[TESTPATH-SELECT] No test files selected")
        return EXIT_NOTHING_SELECTED

    try:
        return run_execute(
            selection_file=selection_file,
            runner=args.runner,
            output_dir=str(args.output_dir),
            extra_args=getattr(args, "runner_passthrough", None),
        )
    except Exception as exc:
        logger.error("[TESTPATH-SELECT] Execution failed: %s", exc)
        return EXIT_ERROR


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="testpath-select",
        description="Select the test files to run by pattern or by changed files",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose logging")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")
    _add_select_parser(subparsers)
    _add_execute_parser(subparsers)
    _add_run_parser(subparsers)
    return parser


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    ours, passthrough = _split_passthrough(
        sys.argv[1:] if argv is None else argv
    )
    parser = build_parser()
    args = parser.parse_args(ours)
    args.runner_passthrough = passthrough or None
    _setup_logging(getattr(args, "verbose", False))

    if not args.command:
        parser.print_help()
        return EXIT_OK

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
