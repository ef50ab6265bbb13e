"""End-to-end selection against real git repositories."""
from __future__ import annotations

import shutil
import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

from TestPathSelection.cli import EXIT_NOTHING_SELECTED, main
from TestPathSelection.pipeline.select import run_select
from TestPathSelection.shared.config import SearchSourceConfig
from TestPathSelection.shared.types import PatternInfo, SearchResult

TEST_REGEX = r"/tests/test_[^/]*\.py$"

requires_git = pytest.mark.skipif(
    shutil.which("git") is None, reason="git executable not available",
)


def git(repo: Path, *args: str) -> str:
    result = subprocess.run(
        [
            "git",
            "-c", "user.name=Test",
            "-c", "user.email=test@example.com",
            "-c", "commit.gpgsign=false",
            *args,
        ],
        cwd=repo,
        check=True,
        capture_output=True,
        text=True,
    )
    return result.stdout


@pytest.fixture
def git_project(sample_project: Path) -> Path:
    """The sample project as a git repository with one commit."""
    git(sample_project, "init", "-q")
    git(sample_project, "add", "-A")
    git(sample_project, "commit", "-q", "-m", "initial")
    return sample_project


def _config(root: Path) -> SearchSourceConfig:
    return SearchSourceConfig(root_dir=str(root), test_regex=TEST_REGEX)


def _names(result: SearchResult) -> list[str]:
    return sorted(Path(p).name for p in result.paths)


@requires_git
class TestOnlyChanged:
    def test_clean_tree_selects_nothing(self, git_project: Path) -> None:
        result = run_select(_config(git_project), PatternInfo(only_changed=True))
        assert result == SearchResult()

    def test_modified_source_selects_dependent_tests(self, git_project: Path) -> None:
        core = git_project / "src/pkg/core.py"
        core.write_text(core.read_text() + "\n\ndef sub(a, b):\n    return a - b\n")

        result = run_select(_config(git_project), PatternInfo(only_changed=True))

        assert _names(result) == ["test_api.py", "test_util.py"]
        assert not result.no_scm

    def test_untracked_test_file_is_selected(self, git_project: Path) -> None:
        (git_project / "tests/test_new.py").write_text("def test_new():\n    pass\n")

        result = run_select(_config(git_project), PatternInfo(only_changed=True))

        assert _names(result) == ["test_new.py"]

    def test_changed_mode_ignores_pattern(self, git_project: Path) -> None:
        core = git_project / "src/pkg/util.py"
        core.write_text(core.read_text() + "\n")

        result = run_select(
            _config(git_project),
            PatternInfo(only_changed=True, test_path_pattern="api"),
        )

        assert _names(result) == ["test_util.py"]

    def test_last_commit(self, git_project: Path) -> None:
        util = git_project / "src/pkg/util.py"
        util.write_text(util.read_text() + "\n")
        git(git_project, "commit", "-q", "-am", "touch util")

        result = run_select(
            _config(git_project),
            PatternInfo(only_changed=True, last_commit=True),
        )

        assert _names(result) == ["test_util.py"]

    def test_non_ascii_file_name(self, git_project: Path) -> None:
        (git_project / "tests/test_café.py").write_text("def test_x():\n    pass\n")

        result = run_select(_config(git_project), PatternInfo(only_changed=True))

        assert result.paths == (str(git_project / "tests" / "test_café.py"),)

    def test_non_ascii_file_in_last_commit(self, git_project: Path) -> None:
        (git_project / "tests/test_café.py").write_text("def test_x():\n    pass\n")
        git(git_project, "add", "-A")
        git(git_project, "commit", "-q", "-m", "add café")

        result = run_select(
            _config(git_project),
            PatternInfo(only_changed=True, last_commit=True),
        )

        assert _names(result) == ["test_café.py"]

    def test_root_reached_through_symlink(
        self, git_project: Path, tmp_path: Path,
    ) -> None:
        link = tmp_path / "link"
        link.symlink_to(git_project, target_is_directory=True)
        (git_project / "tests/test_new.py").write_text("def test_new():\n    pass\n")
        core = git_project / "src/pkg/core.py"
        core.write_text(core.read_text() + "\n")

        result = run_select(_config(link), PatternInfo(only_changed=True))

        assert _names(result) == ["test_api.py", "test_new.py", "test_util.py"]
        assert all(p.startswith(str(git_project)) for p in result.paths)


class TestNoScm:
    def test_directory_outside_any_repository(self, sample_project: Path) -> None:
        result = run_select(_config(sample_project), PatternInfo(only_changed=True))

        assert result.no_scm
        assert result.paths == ()
        assert result.roots_without_scm == (str(sample_project),)

    def test_run_command_stops_without_scm(
        self, sample_project: Path, tmp_path: Path,
    ) -> None:
        with patch("TestPathSelection.pipeline.execute.run_execute") as mock_execute:
            code = main([
                "run", "--only-changed",
                "--root-dir", str(sample_project),
                "--output-dir", str(tmp_path / "results"),
            ])

        assert code == EXIT_NOTHING_SELECTED
        mock_execute.assert_not_called()


@requires_git
class TestSelectThenExecute:
    def test_pytest_runs_the_selected_file(
        self, git_project: Path, tmp_path: Path,
    ) -> None:
        (git_project / "tests/test_new.py").write_text("def test_new():\n    pass\n")
        output_dir = tmp_path / "results"

        with patch("pytest.main", return_value=0) as mock_main:
            code = main([
                "run", "--only-changed",
                "--root-dir", str(git_project),
                "--test-regex", TEST_REGEX,
                "--output-dir", str(output_dir),
            ])

        assert code == 0
        args = mock_main.call_args[0][0]
        assert args[-1] == str(git_project / "tests" / "test_new.py")
        assert (output_dir / "selection_report.json").exists()
