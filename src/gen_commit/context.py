"""Repository context gathering for commit message generation.

Lookups fall into two groups. Propagating lookups (root, branch, staged diff,
staged files) raise and abort the run. Defaultable lookups (scopes file,
workspace marker, recent commits) fall back to an empty value.
"""

import logging
from collections.abc import Sequence
from pathlib import Path

from gen_commit.errors import GitError
from gen_commit.git import GitRepository
from gen_commit.models import AppContext

logger = logging.getLogger(__name__)

DEFAULT_SCOPES_FILE = "scopes.txt"
DEFAULT_WORKSPACE_MARKER = "nx.json"


def read_scopes(root_dir: str, filename: str = DEFAULT_SCOPES_FILE) -> str:
    """Read the scopes file at the repository root, or "" if unavailable."""
    path = Path(root_dir) / filename
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return ""


def has_workspace_marker(root_dir: str, filename: str = DEFAULT_WORKSPACE_MARKER) -> bool:
    return (Path(root_dir) / filename).exists()


class ContextCollector:
    """Collects an ``AppContext`` from a git working tree."""

    def __init__(
        self,
        repository: GitRepository,
        scopes_file: str = DEFAULT_SCOPES_FILE,
        workspace_marker: str = DEFAULT_WORKSPACE_MARKER,
        recent_commit_count: int = 5,
    ) -> None:
        """Initialize the collector.

        Args:
            repository: Git wrapper for the working tree
            scopes_file: File at the repository root listing allowed scopes
            workspace_marker: File whose presence marks a monorepo workspace
            recent_commit_count: How many recent commit subjects to include
        """
        self.repository = repository
        self.scopes_file = scopes_file
        self.workspace_marker = workspace_marker
        self.recent_commit_count = recent_commit_count

    async def _recent_commits(self) -> list[str]:
        try:
            return await self.repository.get_recent_commits(self.recent_commit_count)
        except GitError as e:
            logger.warning(f"Unable to get recent commits, continuing without them: {e}")
            return []

    async def collect(self, exclusions: Sequence[str] = ()) -> AppContext:
        """Gather repository context for the staged changes.

        Collection stops right after the diff when the diff is empty, so the
        caller can abort without further git calls.

        Args:
            exclusions: Patterns to leave out of the staged diff

        Returns:
            The collected context (``diff_text`` may be empty)

        Raises:
            GitError: If a propagating git lookup fails
        """
        logger.info("Getting git root directory")
        root_dir = await self.repository.get_root()
        logger.debug(f"Git root: {root_dir}")

        logger.info("Getting current branch name")
        branch_name = await self.repository.get_branch_name()
        logger.debug(f"Branch: {branch_name}")

        logger.info("Reading scopes file")
        scopes_text = read_scopes(root_dir, self.scopes_file)
        logger.debug(f"Scopes found: {bool(scopes_text)}")

        logger.info("Checking for workspace marker")
        is_workspace_repo = has_workspace_marker(root_dir, self.workspace_marker)
        logger.debug(f"Workspace repo: {is_workspace_repo}")

        logger.info("Getting staged diff")
        diff_text = await self.repository.get_staged_diff(exclusions)
        logger.debug(f"Diff length: {len(diff_text)} characters")

        if not diff_text:
            return AppContext(
                root_dir=root_dir,
                branch_name=branch_name,
                scopes_text=scopes_text,
                is_workspace_repo=is_workspace_repo,
                diff_text=diff_text,
            )

        logger.info("Getting modified files")
        modified_files = await self.repository.get_staged_files()
        logger.debug(f"Modified files count: {len(modified_files)}")
        for path in modified_files:
            logger.debug(f"  - {path}")

        logger.info("Getting recent commits")
        recent_commits = await self._recent_commits()
        logger.debug(f"Recent commits count: {len(recent_commits)}")

        return AppContext(
            root_dir=root_dir,
            branch_name=branch_name,
            scopes_text=scopes_text,
            is_workspace_repo=is_workspace_repo,
            diff_text=diff_text,
            modified_files=modified_files,
            recent_commit_subjects=recent_commits,
        )
