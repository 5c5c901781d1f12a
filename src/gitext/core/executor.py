"""Command executor for external version-control subcommands.

All git invocations made by gitext go through :class:`CommandExecutor`. It
applies a per-command timeout, honours dry-run and verbose modes, and turns
every failure into a structured :class:`~gitext.core.errors.ExecutionError`
instead of raising from :mod:`subprocess`.
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

from rich.console import Console
from rich.markup import escape

from .constants import GIT_TIMEOUT_SECONDS
from .errors import ErrorKind, ExecutionError

logger = logging.getLogger(__name__)

__all__ = ["ExecutorOptions", "CommandResult", "CommandExecutor"]


@dataclass(frozen=True)
class ExecutorOptions:
    """Global execution flags, passed explicitly instead of living in module state."""

    dry_run: bool = False
    verbose: bool = False
    timeout: float = GIT_TIMEOUT_SECONDS


@dataclass(frozen=True)
class CommandResult:
    """Outcome of one external command. Never mutated after return."""

    args: tuple[str, ...]
    stdout: str = ""
    error: ExecutionError | None = None
    returncode: int | None = 0
    skipped: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None

    def check(self) -> str:
        """Return stdout, or raise the captured error."""
        if self.error is not None:
            raise self.error
        return self.stdout


class CommandExecutor:
    """Runs ``<binary> <args...>`` with timeout, dry-run and verbose handling.

    ``binary=None`` runs ``args`` as a complete argv, which is how CI commands
    from the policy are executed.
    """

    def __init__(
        self,
        options: ExecutorOptions | None = None,
        *,
        binary: str | None = "git",
        cwd: Path | None = None,
        console: Console | None = None,
    ) -> None:
        self.options = options or ExecutorOptions()
        self.binary = binary
        self.cwd = cwd
        self.console = console or Console(highlight=False)

    @property
    def dry_run(self) -> bool:
        return self.options.dry_run

    def _argv(self, args: Sequence[str]) -> list[str]:
        if self.binary is None:
            return list(args)
        return [self.binary, *args]

    def execute(
        self,
        args: Sequence[str],
        timeout: float | None = None,
        cwd: Path | None = None,
        *,
        read_only: bool = False,
    ) -> CommandResult:
        """Run a command and return its trimmed combined output.

        Args:
            args: Subcommand and arguments (without the binary name)
            timeout: Seconds before the command is killed (default from options)
            cwd: Working directory; defaults to the executor's cwd
            read_only: Query commands still run under dry-run

        Returns:
            CommandResult with ``error`` set on timeout or non-zero exit
        """
        argv = self._argv(args)
        command_line = " ".join(argv)

        if self.options.dry_run and not read_only:
            self.console.print(f"[yellow]{escape('[DRY RUN]')}[/yellow] {escape(command_line)}")
            logger.debug("Dry run, skipped: %s", command_line)
            return CommandResult(args=tuple(argv), skipped=True)

        effective_timeout = timeout if timeout is not None else self.options.timeout
        workdir = cwd or self.cwd
        logger.debug("Running: %s (cwd=%s, timeout=%ss)", command_line, workdir, effective_timeout)

        try:
            completed = self._spawn(argv, effective_timeout, workdir)
        except FileNotFoundError:
            error = ExecutionError(ErrorKind.TOOL_MISSING, argv, returncode=127)
            logger.warning("%s", error)
            return CommandResult(args=tuple(argv), error=error, returncode=127)
        except subprocess.TimeoutExpired as exc:
            partial = exc.output or ""
            if isinstance(partial, bytes):
                partial = partial.decode("utf-8", errors="replace")
            error = ExecutionError(
                ErrorKind.TIMEOUT,
                argv,
                partial.strip(),
                returncode=124,
                suggestion=f"check connectivity, then re-run: {command_line}",
            )
            logger.warning("%s after %ss", error.message, effective_timeout)
            self._echo(command_line, error.output)
            return CommandResult(args=tuple(argv), error=error, returncode=124)

        output = (completed.stdout or "").strip()
        self._echo(command_line, output)

        if completed.returncode != 0:
            error = ExecutionError(
                ErrorKind.NON_ZERO_EXIT,
                argv,
                output,
                returncode=completed.returncode,
            )
            logger.debug("Command failed (%s): %s", completed.returncode, command_line)
            return CommandResult(
                args=tuple(argv),
                stdout=output,
                error=error,
                returncode=completed.returncode,
            )

        return CommandResult(args=tuple(argv), stdout=output, returncode=0)

    def run(self, *args: str, read_only: bool = False, timeout: float | None = None) -> str:
        """Execute and return stdout, raising ExecutionError on failure."""
        return self.execute(args, timeout, read_only=read_only).check()

    def query(self, *args: str) -> CommandResult:
        """Execute a read-only query (runs even in dry-run mode)."""
        return self.execute(args, read_only=True)

    def _spawn(
        self, argv: list[str], timeout: float, cwd: Path | None
    ) -> subprocess.CompletedProcess[str]:
        return subprocess.run(
            argv,
            cwd=str(cwd) if cwd else None,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            encoding="utf-8",
            errors="replace",
            check=False,
            timeout=timeout,
        )

    def _echo(self, command_line: str, output: str) -> None:
        if not self.options.verbose:
            return
        self.console.print(f"[dim]$ {escape(command_line)}[/dim]")
        if output:
            self.console.print(escape(output), markup=True)
