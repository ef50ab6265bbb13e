"""Async subprocess helper for SCM commands."""
from __future__ import annotations

import asyncio
import logging
import os
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommandResult:
    """Exit status and decoded output of a finished command."""

    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


async def run_command(args: list[str], cwd: str) -> CommandResult:
    """Run ``args`` in ``cwd`` and wait for it to finish.

    A missing executable or an unusable ``cwd`` is reported as exit
    code 127 rather than raised, so callers can treat it like any
    other failing command.
    """
    try:
        process = await asyncio.create_subprocess_exec(
            *args,
            cwd=cwd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as exc:
        logger.debug(
            "[TESTPATH-SELECT] stage=changed event=spawn_failed "
            "command=%s error=%s",
            args[0],
            exc,
        )
        return CommandResult(returncode=127, stdout="", stderr=str(exc))

    stdout, stderr = await process.communicate()
    return CommandResult(
        returncode=process.returncode if process.returncode is not None else 1,
        stdout=stdout.decode("utf-8", errors="replace"),
        stderr=stderr.decode("utf-8", errors="replace"),
    )


def split_nul_paths(repo_root: str, output: str) -> list[str]:
    """Join NUL-separated repository-relative names to ``repo_root``.

    Names are taken verbatim, so surrounding spaces in file names survive.
    The root is resolved through symlinks, matching what the SCM reports.
    """
    root = os.path.realpath(repo_root)
    return [
        os.path.normpath(os.path.join(root, name))
        for name in output.split("\0")
        if name
    ]
