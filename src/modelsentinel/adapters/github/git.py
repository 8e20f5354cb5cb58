"""Thin wrapper around the ``git`` executable for the catalog checkout."""

from __future__ import annotations

import base64
import subprocess
from logging import getLogger
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from pathlib import Path

log = getLogger(__name__)

COMMIT_AUTHOR_NAME = "modelsentinel"
COMMIT_AUTHOR_EMAIL = "modelsentinel@users.noreply.github.com"
GIT_TIMEOUT_SECONDS = 120

type CommandRunner = Callable[..., subprocess.CompletedProcess[str]]


class GitCommandError(RuntimeError):
    def __init__(self, args: Sequence[str], returncode: int, stderr: str) -> None:
        command = " ".join(args)
        super().__init__(f"git {command} failed ({returncode}): {stderr.strip()}")
        self.args_list = list(args)
        self.returncode = returncode
        self.stderr = stderr


def _auth_header(token: str) -> str:
    credentials = base64.b64encode(f"x-access-token:{token}".encode()).decode("ascii")
    return f"http.extraheader=AUTHORIZATION: basic {credentials}"


class GitRepository:
    """Branch, stage, commit and push inside one working tree."""

    def __init__(
        self,
        path: Path,
        *,
        remote: str = "origin",
        runner: CommandRunner = subprocess.run,
    ) -> None:
        self.path = path
        self.remote = remote
        self._runner = runner

    def create_branch(self, name: str) -> None:
        self._git("checkout", "-b", name)

    def add_all(self) -> None:
        self._git("add", "--all")

    def commit(self, message: str) -> None:
        self._git(
            "-c",
            f"user.name={COMMIT_AUTHOR_NAME}",
            "-c",
            f"user.email={COMMIT_AUTHOR_EMAIL}",
            "commit",
            "-m",
            message,
        )

    def push(self, branch: str, *, token: str | None = None) -> None:
        prefix: tuple[str, ...] = ("-c", _auth_header(token)) if token else ()
        self._git(*prefix, "push", self.remote, f"{branch}:{branch}", redact=bool(token))

    def _git(self, *args: str, redact: bool = False) -> str:
        shown = [arg for arg in args if "AUTHORIZATION" not in arg] if redact else list(args)
        log.debug("Running git %s in %s", " ".join(shown), self.path)
        try:
            completed = self._runner(
                ["git", *args],
                cwd=self.path,
                capture_output=True,
                text=True,
                check=False,
                timeout=GIT_TIMEOUT_SECONDS,
            )
        except (OSError, subprocess.TimeoutExpired) as exc:
            raise GitCommandError(shown, -1, str(exc)) from exc
        if completed.returncode != 0:
            raise GitCommandError(shown, completed.returncode, completed.stderr or "")
        return completed.stdout or ""
