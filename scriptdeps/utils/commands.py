"""Subprocess capability used for version control and build tool invocations."""

import logging
from pathlib import Path
from typing import NamedTuple, Optional, Protocol, Sequence, Union

import git

logger = logging.getLogger(__name__)


class CommandResult(NamedTuple):
    success: bool
    output: str
    error: str = ""


class CommandRunner(Protocol):
    """Runs a command and reports its output along with success or failure.

    Implementations never raise for a command that cannot be launched or that
    exits with a non-zero status; both are reported as ``success=False``.
    """

    def run(
        self, command: Sequence[str], cwd: Optional[Union[str, Path]] = None
    ) -> CommandResult: ...


def _as_text(value: Union[str, bytes, None]) -> str:
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return value


class GitCommandRunner:
    """CommandRunner backed by GitPython's process execution."""

    def run(
        self, command: Sequence[str], cwd: Optional[Union[str, Path]] = None
    ) -> CommandResult:
        command = list(command)
        logger.debug(f"Running {' '.join(command)!r} in {cwd or '.'}")
        try:
            status, stdout, stderr = git.Git(
                str(cwd) if cwd is not None else None
            ).execute(
                command,
                with_extended_output=True,
                with_exceptions=False,
            )
        except (git.GitCommandNotFound, OSError) as e:
            logger.debug(f"Could not launch {command[0]!r}: {e}")
            return CommandResult(success=False, output="", error=str(e))

        output, error = _as_text(stdout), _as_text(stderr)
        if status != 0:
            logger.debug(f"Command {' '.join(command)!r} exited with {status}: {error}")
        return CommandResult(success=status == 0, output=output, error=error)
