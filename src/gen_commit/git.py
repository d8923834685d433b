"""Async git wrappers used to collect staged-change context and commit."""

import asyncio
import logging
from collections.abc import Iterable
from pathlib import Path

from gen_commit.errors import GitCommandError, NoStagedChangesError

logger = logging.getLogger(__name__)

GIT_CMD = "git"


def parse_exclusion_list(value: str | None) -> list[str]:
    """Split a comma-separated ``--ignore`` value into patterns.

    Args:
        value: Raw flag value such as ``"package-lock.json, dist/*"``

    Returns:
        Trimmed, non-empty patterns in their original order
    """
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


def build_exclusion_pathspecs(patterns: Iterable[str]) -> list[str]:
    """Turn exclusion patterns into git ``:!`` pathspecs, keeping their order."""
    return [f":!{pattern.strip()}" for pattern in patterns if pattern.strip()]


class GitRepository:
    """Runs git queries inside a working tree."""

    def __init__(self, cwd: str | Path = ".") -> None:
        """Initialize the repository wrapper.

        Args:
            cwd: Directory git commands are run from
        """
        self.cwd = str(cwd)

    async def _run(self, *args: str) -> tuple[int, str, str]:
        """Run git and return ``(returncode, stdout, stderr)``.

        Raises:
            GitCommandError: If the git executable cannot be spawned
        """
        command = " ".join([GIT_CMD, *args])
        logger.debug(f"Running: {command}")
        try:
            process = await asyncio.create_subprocess_exec(
                GIT_CMD,
                *args,
                cwd=self.cwd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise GitCommandError(command) from e

        stdout, stderr = await process.communicate()
        returncode = process.returncode if process.returncode is not None else -1
        return (
            returncode,
            stdout.decode("utf-8", errors="replace"),
            stderr.decode("utf-8", errors="replace"),
        )

    async def _query(self, command_name: str, *args: str) -> str:
        """Run a git query that must succeed."""
        returncode, stdout, stderr = await self._run(*args)
        if returncode != 0:
            logger.debug(f"{command_name} exited with {returncode}: {stderr.strip()}")
            raise GitCommandError(command_name, stderr)
        return stdout

    async def is_repository(self) -> bool:
        """Return True if the working directory is inside a git repository."""
        try:
            returncode, _, _ = await self._run("rev-parse", "--git-dir")
        except GitCommandError:
            return False
        return returncode == 0

    async def get_root(self) -> str:
        """Get the absolute path of the repository root."""
        output = await self._query(
            "git rev-parse --show-toplevel", "rev-parse", "--show-toplevel"
        )
        return output.strip()

    async def get_branch_name(self) -> str:
        """Get the name of the checked-out branch (empty when detached)."""
        output = await self._query(
            "git branch --show-current", "branch", "--show-current"
        )
        return output.strip()

    async def get_staged_diff(self, exclusions: Iterable[str] = ()) -> str:
        """Get the staged diff, leaving out paths matching ``exclusions``.

        An empty string is a valid result and means nothing is staged.

        Args:
            exclusions: Plain patterns; converted to ``:!`` pathspecs here

        Raises:
            NoStagedChangesError: If ``git diff --staged`` exits non-zero
            GitCommandError: If git cannot be spawned
        """
        args = ["diff", "--staged"]
        pathspecs = build_exclusion_pathspecs(exclusions)
        if pathspecs:
            args.append("--")
            args.extend(pathspecs)

        try:
            returncode, stdout, stderr = await self._run(*args)
        except GitCommandError as e:
            raise GitCommandError("git diff --staged") from e

        if returncode != 0:
            logger.debug(f"git diff --staged exited with {returncode}: {stderr.strip()}")
            raise NoStagedChangesError()
        return stdout

    async def get_staged_files(self) -> list[str]:
        """Get staged file paths in the order git reports them."""
        output = await self._query(
            "git diff --staged --name-only", "diff", "--staged", "--name-only"
        )
        return [line.strip() for line in output.splitlines() if line.strip()]

    async def get_recent_commits(self, count: int = 5) -> list[str]:
        """Get subjects of the ``count`` most recent commits, hashes removed."""
        output = await self._query(
            "git log --oneline", "log", "--oneline", "-n", str(count)
        )
        subjects = []
        for line in output.splitlines():
            line = line.strip()
            if not line:
                continue
            _, _, subject = line.partition(" ")
            subjects.append(subject.strip())
        return subjects

    async def commit(self, message: str, edit: bool = True) -> None:
        """Commit staged changes with ``message``.

        The process inherits the terminal so ``-e`` can open the user's editor.

        Raises:
            GitCommandError: If the commit cannot be spawned or fails
        """
        args = ["commit", "-m", message]
        if edit:
            args.append("-e")

        logger.info("Committing changes")
        try:
            process = await asyncio.create_subprocess_exec(GIT_CMD, *args, cwd=self.cwd)
        except OSError as e:
            raise GitCommandError("git commit") from e

        returncode = await process.wait()
        if returncode != 0:
            raise GitCommandError("git commit")
