"""Helpers shared by the gitext test suite."""

from __future__ import annotations

import io
import subprocess
from pathlib import Path
from typing import Sequence

from rich.console import Console

from gitext.core.executor import CommandExecutor, ExecutorOptions
from gitext.core.policy import Policy, policy_from_mapping

READ_ONLY_SUBCOMMANDS = {
    "rev-parse",
    "status",
    "symbolic-ref",
    "remote",
    "ls-remote",
    "rev-list",
    "log",
    "diff",
}

FEATURE_BRANCH = "feature/KWS-1-retry-policy"


def run(cmd: Sequence[str], cwd: Path) -> str:
    """Run a command in ``cwd`` and return its stripped stdout."""
    completed = subprocess.run(list(cmd), cwd=cwd, check=True, capture_output=True, text=True)
    return completed.stdout.strip()


def git(repo: Path, *args: str) -> str:
    return run(["git", *args], cwd=repo)


def is_read_only(argv: Sequence[str]) -> bool:
    """Whether a recorded git argv is a pure query."""
    args = list(argv[1:]) if argv and argv[0] == "git" else list(argv)
    if not args:
        return False
    if args[0] == "branch":
        return "--list" in args or "--merged" in args
    return args[0] in READ_ONLY_SUBCOMMANDS


class ScriptedExecutor(CommandExecutor):
    """Executor double whose subprocess layer answers from a script.

    Rules match on an argument prefix (without ``git``); the most recently
    added rule wins. An exception instance as the return code is raised
    from the spawn, which is how timeouts are simulated.
    """

    def __init__(self, options: ExecutorOptions | None = None):
        self.output = io.StringIO()
        super().__init__(options, console=Console(file=self.output, highlight=False, width=200))
        self.rules: list[tuple[tuple[str, ...], object, str]] = []
        self.calls: list[list[str]] = []

    def on(self, *prefix: str, rc: object = 0, output: str = "") -> "ScriptedExecutor":
        self.rules.insert(0, (prefix, rc, output))
        return self

    def _spawn(self, argv, timeout, cwd):
        self.calls.append(list(argv))
        args = argv[1:] if argv[:1] == ["git"] else argv
        for prefix, rc, output in self.rules:
            if tuple(args[: len(prefix)]) == prefix:
                if isinstance(rc, BaseException):
                    raise rc
                return subprocess.CompletedProcess(argv, rc, stdout=output)
        return subprocess.CompletedProcess(argv, 0, stdout="")

    def issued(self, *prefix: str) -> bool:
        """Whether any spawned git command starts with ``prefix``."""
        return any(tuple(call[1 : 1 + len(prefix)]) == prefix for call in self.calls)

    def index_of(self, *prefix: str) -> int:
        for index, call in enumerate(self.calls):
            if tuple(call[1 : 1 + len(prefix)]) == prefix:
                return index
        raise AssertionError(f"git {' '.join(prefix)} was never issued")

    def mutations(self) -> list[list[str]]:
        return [call for call in self.calls if not is_read_only(call)]


def scripted_repo(
    current: str = FEATURE_BRANCH,
    *,
    options: ExecutorOptions | None = None,
) -> ScriptedExecutor:
    """A healthy repository: clean tree on ``current``, origin reachable, all branches present."""
    executor = ScriptedExecutor(options)
    executor.on("symbolic-ref", "-q", "HEAD", output=f"refs/heads/{current}")
    executor.on("rev-parse", "--abbrev-ref", "HEAD", output=current)
    executor.on("rev-parse", "--show-toplevel", output="/work/repo")
    executor.on("status", "--porcelain", output="")
    executor.on("remote", "get-url", "origin", output="git@example.com:team/repo.git")
    executor.on("branch", "--list", output="  present")
    executor.on("ls-remote", "--heads", output="0123abcd\trefs/heads/present")
    executor.on("rev-list", "--left-right", "--count", output="0\t0")
    executor.on("log", "-n", output="Test User")
    return executor


# ---------------------------------------------------------------------------
# Real repositories
# ---------------------------------------------------------------------------


def _configure_user(repo: Path) -> None:
    git(repo, "config", "user.name", "Test User")
    git(repo, "config", "user.email", "test@example.com")
    git(repo, "config", "commit.gpgsign", "false")


def commit_file(repo: Path, name: str, content: str, message: str, *extra: str) -> str:
    """Write ``name`` and commit it; ``extra`` are ``-c`` style git options."""
    (repo / name).write_text(content, encoding="utf-8")
    git(repo, "add", name)
    run(["git", *extra, "commit", "-m", message], cwd=repo)
    return git(repo, "rev-parse", "HEAD")


class GitRemoteSetup:
    """A bare ``origin``, an upstream checkout that publishes to it, and a working clone."""

    def __init__(self, root: Path):
        self.origin = root / "origin.git"
        self.upstream = root / "upstream"
        self.work = root / "work"

        run(["git", "init", "--bare", "-b", "production", str(self.origin)], cwd=root)

        self.upstream.mkdir()
        git(self.upstream, "init", "-b", "production")
        _configure_user(self.upstream)
        commit_file(self.upstream, "README.md", "base\n", "Initial commit")
        git(self.upstream, "branch", "stage")
        git(self.upstream, "remote", "add", "origin", str(self.origin))
        git(self.upstream, "push", "origin", "production", "stage")

        run(["git", "clone", str(self.origin), str(self.work)], cwd=root)
        _configure_user(self.work)

    def publish(self, branch: str, name: str, content: str, message: str) -> str:
        """Commit on ``branch`` in the upstream checkout and push it to origin."""
        git(self.upstream, "checkout", branch)
        sha = commit_file(self.upstream, name, content, message)
        git(self.upstream, "push", "origin", branch)
        return sha

    def policy(self) -> Policy:
        return policy_from_mapping({}, self.work)

    def executor(self, *, dry_run: bool = False) -> CommandExecutor:
        return CommandExecutor(
            ExecutorOptions(dry_run=dry_run),
            cwd=self.work,
            console=Console(file=io.StringIO()),
        )


