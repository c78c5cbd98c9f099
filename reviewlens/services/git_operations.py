"""Git operations service.

Core service for the git commands reviewlens relies on: reading a file at a
revision (snippet content), producing diff text between two revisions (parser
input), listing the commits of a review with their details, and resolving
the refs and merge bases a review diff is computed from.
"""

from __future__ import annotations

import subprocess
from pathlib import Path

from reviewlens.domain.commit import CommitDetails

# Author, email, tree, commit time, parents and subject, one per line
COMMIT_DETAILS_FORMAT = "%an%n%ae%n%T%n%ct%n%P%n%s"


class GitRepositoryError(Exception):
    """Raised when directory is not a git repository."""

    pass


class GitCommandError(Exception):
    """Raised when a git command fails."""

    pass


class GitDiffError(GitCommandError):
    """Raised when git diff command fails."""

    pass


class GitFileNotFoundError(GitCommandError):
    """Raised when file doesn't exist at specified commit."""

    pass


class GitOperationsService:
    """Core service for git command operations.

    Encapsulates all subprocess calls to git commands.
    """

    def __init__(self, repo_path: str = "."):
        """Initialize with repository path.

        Args:
            repo_path: Path to git repository (default: current directory)
        """
        self.repo_path = Path(repo_path)

    def is_git_repository(self) -> bool:
        """Check if the repository path is a git repository.

        Returns:
            True if valid git repo, False otherwise
        """
        try:
            subprocess.run(
                ["git", "rev-parse", "--git-dir"],
                cwd=self.repo_path,
                capture_output=True,
                check=True,
            )
            return True
        except subprocess.CalledProcessError:
            return False

    def get_file_content(self, file_path: str, commit_hash: str) -> str:
        """Get file content at specific commit.

        Args:
            file_path: Path to file in repository
            commit_hash: Git commit SHA or branch name

        Returns:
            File content as string

        Raises:
            GitFileNotFoundError: If file doesn't exist at commit
            GitRepositoryError: If not in a git repository
        """
        self._ensure_repository()
        try:
            return self._git("show", f"{commit_hash}:{file_path}")
        except subprocess.CalledProcessError as e:
            raise GitFileNotFoundError(
                f"File {file_path} not found at {commit_hash}: {e.stderr}"
            ) from e

    def get_diff(self, lhs: str, rhs: str) -> str:
        """Get the unified diff between two revisions.

        Args:
            lhs: Left-hand revision
            rhs: Right-hand revision

        Returns:
            Raw unified diff text

        Raises:
            GitDiffError: If diff command fails
            GitRepositoryError: If not in a git repository
        """
        self._ensure_repository()
        try:
            return self._git("diff", lhs, rhs)
        except subprocess.CalledProcessError as e:
            raise GitDiffError(f"Failed to compute diff {lhs}..{rhs}: {e.stderr}") from e

    def list_commits_between(self, base: str, head: str) -> list[str]:
        """List commits reachable from head but not base, oldest first.

        Raises:
            GitCommandError: If rev-list fails
            GitRepositoryError: If not in a git repository
        """
        self._ensure_repository()
        try:
            output = self._git("rev-list", "--reverse", f"{base}..{head}")
        except subprocess.CalledProcessError as e:
            raise GitCommandError(f"Failed to list commits {base}..{head}: {e.stderr}") from e
        return [line for line in output.splitlines() if line]

    def get_commit_details(self, commit_hash: str) -> CommitDetails:
        """Read author, tree, time, parents and subject of a commit.

        Raises:
            GitCommandError: If the commit cannot be read
            GitRepositoryError: If not in a git repository
        """
        self._ensure_repository()
        try:
            output = self._git("show", "-s", f"--format={COMMIT_DETAILS_FORMAT}", commit_hash)
        except subprocess.CalledProcessError as e:
            raise GitCommandError(f"Failed to read commit {commit_hash}: {e.stderr}") from e

        fields = output.split("\n")
        if len(fields) < 6:
            raise GitCommandError(f"Unexpected commit details for {commit_hash}: {output!r}")
        author, author_email, tree, time, parents, summary = fields[:6]
        return CommitDetails(
            author=author,
            author_email=author_email,
            tree=tree,
            time=time,
            parents=tuple(parents.split()),
            summary=summary,
        )

    def get_last_parent(self, commit_hash: str) -> str:
        """Get the last parent of a commit (the merged-in side of a merge).

        Raises:
            GitCommandError: If the commit cannot be read or has no parents
            GitRepositoryError: If not in a git repository
        """
        self._ensure_repository()
        try:
            output = self._git("log", "-n", "1", "--format=%P", commit_hash)
        except subprocess.CalledProcessError as e:
            raise GitCommandError(f"Failed to read parents of {commit_hash}: {e.stderr}") from e
        parents = output.split()
        if not parents:
            raise GitCommandError(f"Commit {commit_hash} has no parents")
        return parents[-1]

    def resolve_ref_commit(self, ref: str) -> str:
        """Resolve a ref to the commit it points at.

        Raises:
            GitCommandError: If the ref does not exist
            GitRepositoryError: If not in a git repository
        """
        self._ensure_repository()
        try:
            return self._git("rev-parse", "--verify", f"{ref}^{{commit}}").strip()
        except subprocess.CalledProcessError as e:
            raise GitCommandError(f"Failed to resolve {ref}: {e.stderr}") from e

    def merge_base(self, first: str, second: str) -> str:
        """Get the best common ancestor of two commits.

        Raises:
            GitCommandError: If the commits share no history
            GitRepositoryError: If not in a git repository
        """
        self._ensure_repository()
        try:
            return self._git("merge-base", first, second).strip()
        except subprocess.CalledProcessError as e:
            raise GitCommandError(f"Failed to find merge base of {first} and {second}: {e.stderr}") from e

    # --------------------------------------------------------
    # Private Helpers
    # --------------------------------------------------------

    def _ensure_repository(self) -> None:
        if not self.is_git_repository():
            raise GitRepositoryError(
                f"Not a git repository: {self.repo_path}\n"
                "Make sure you're running from within a git repository."
            )

    def _git(self, *args: str) -> str:
        result = subprocess.run(
            ["git", *args],
            cwd=self.repo_path,
            capture_output=True,
            text=True,
            check=True,
        )
        return result.stdout
