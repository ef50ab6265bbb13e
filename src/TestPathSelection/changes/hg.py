from __future__ import annotations

from TestPathSelection.changes.process import run_command, split_nul_paths
from TestPathSelection.pipeline.errors import ChangedFilesError
from TestPathSelection.shared.types import ChangedFilesOptions


class HgChangedFiles:
    """Changed-file listing for Mercurial working copies."""

    name = "hg"

    def __init__(self, executable: str = "hg") -> None:
        self._executable = executable

    async def is_repository(self, path: str) -> str | None:
        result = await run_command([self._executable, "root"], cwd=path)
        if not result.ok:
            return None
        return result.stdout.rstrip("\r\n") or None

    async def find_changed_files(
        self, repo_root: str, options: ChangedFilesOptions
    ) -> list[str]:
        if options.last_commit:
            args = [self._executable, "tip", "--template", "{files % '{file}\\0'}"]
        else:
            args = [self._executable, "status", "-amn0"]
        result = await run_command(args, cwd=repo_root)
        if not result.ok:
            raise ChangedFilesError(args, result.returncode, result.stderr)
        return split_nul_paths(repo_root, result.stdout)
