from __future__ import annotations

from TestPathSelection.changes.process import run_command, split_nul_paths
from TestPathSelection.pipeline.errors import ChangedFilesError
from TestPathSelection.shared.types import ChangedFilesOptions


class GitChangedFiles:
    """Changed-file listing for git working copies."""

    name = "git"

    def __init__(self, executable: str = "git") -> None:
        self._executable = executable

    async def is_repository(self, path: str) -> str | None:
        result = await run_command(
            [self._executable, "rev-parse", "--show-toplevel"], cwd=path
        )
        if not result.ok:
            return None
        return result.stdout.rstrip("\r\n") or None

    async def find_changed_files(
        self, repo_root: str, options: ChangedFilesOptions
    ) -> list[str]:
        """List untracked and modified files, or the files of HEAD."""
        git = [self._executable, "-c", "core.quotePath=false"]
        if options.last_commit:
            args = [
                *git,
                "diff-tree",
                "-r",
                "--root",
                "--no-commit-id",
                "--name-only",
                "-z",
                "HEAD",
            ]
        else:
            args = [
                *git,
                "ls-files",
                "-z",
                "--other",
                "--modified",
                "--exclude-standard",
            ]
        result = await run_command(args, cwd=repo_root)
        if not result.ok:
            raise ChangedFilesError(args, result.returncode, result.stderr)
        return split_nul_paths(repo_root, result.stdout)
