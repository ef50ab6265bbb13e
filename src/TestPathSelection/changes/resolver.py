"""Collect changed files across roots that must share a consistent SCM."""
from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from TestPathSelection.shared.types import ChangedFilesOptions, ChangeSet, RepoStatus

if TYPE_CHECKING:
    from collections.abc import Sequence

    from TestPathSelection.changes.ports import ChangedFilesProvider

logger = logging.getLogger(__name__)


class ChangeSetResolver:
    """Determines the SCM of every root and unions their changed files.

    Coverage is all-or-nothing: if any root is under neither SCM the
    result is a no-SCM change set with no files.
    """

    def __init__(
        self,
        git: ChangedFilesProvider,
        hg: ChangedFilesProvider,
    ) -> None:
        self._git = git
        self._hg = hg

    async def determine_scm(self, root: str) -> RepoStatus:
        git_root, hg_root = await asyncio.gather(
            self._git.is_repository(root),
            self._hg.is_repository(root),
        )
        return RepoStatus(root=root, git=git_root, hg=hg_root)

    async def resolve(
        self,
        roots: Sequence[str],
        options: ChangedFilesOptions | None = None,
    ) -> ChangeSet:
        options = options or ChangedFilesOptions()
        statuses = await asyncio.gather(*(self.determine_scm(r) for r in roots))

        missing = tuple(s.root for s in statuses if not s.has_scm)
        if missing:
            logger.info(
                "[TESTPATH-SELECT] stage=changed event=no_scm "
                "roots=%d missing=%s",
                len(statuses),
                ",".join(missing),
            )
            return ChangeSet(no_scm=True, roots_without_scm=missing)

        changed_sets = await asyncio.gather(
            *(self._find_changed_files(s, options) for s in statuses)
        )
        files = tuple(dict.fromkeys(p for changed in changed_sets for p in changed))
        logger.debug(
            "[TESTPATH-SELECT] stage=changed event=collected "
            "roots=%d files=%d last_commit=%s",
            len(statuses),
            len(files),
            options.last_commit,
        )
        return ChangeSet(files=files)

    async def _find_changed_files(
        self, status: RepoStatus, options: ChangedFilesOptions
    ) -> list[str]:
        if status.git:
            return await self._git.find_changed_files(status.git, options)
        # has_scm was checked by the caller, so hg is set here.
        return await self._hg.find_changed_files(status.hg or status.root, options)
