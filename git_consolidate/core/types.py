"""Type definitions for the git consolidate engine."""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Iterator, List, Optional, Sequence

logger = logging.getLogger(__name__)

CommitID = str


@dataclass
class CommitInfo:
    """Information about a single commit."""
    hash: CommitID
    date: str  # ISO format string
    subject: str
    author_name: str
    author_email: str
    datetime: datetime

    @property
    def short_hash(self) -> str:
        """Get short version of commit hash."""
        return self.hash[:8]


@dataclass
class CommitRange:
    """Commits strictly after ``base`` up to and including ``head``, oldest first."""
    base: str
    base_commit: CommitID
    head_commit: CommitID
    commits: List[CommitInfo] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.commits)

    def __iter__(self) -> Iterator[CommitInfo]:
        return iter(self.commits)

    @property
    def hashes(self) -> List[CommitID]:
        return [c.hash for c in self.commits]

    @property
    def needs_consolidation(self) -> bool:
        """Fewer than two commits means there is nothing to squash."""
        return len(self.commits) >= 2


class SquashStatus(Enum):
    """States of a single squash transaction."""
    IDLE = "idle"
    VALIDATING = "validating"
    ISOLATING = "isolating"
    REPLAYING = "replaying"
    FINALIZING = "finalizing"
    CLEANUP = "cleanup"
    DONE = "done"
    FAILED = "failed"


@dataclass
class SquashWarning:
    """Secondary, recoverable problem reported alongside a squash outcome."""
    kind: str
    message: str

    def __str__(self) -> str:
        return self.message


class CleanupWarning(SquashWarning):
    """The ephemeral branch could not be deleted."""

    def __init__(self, message: str):
        super().__init__("cleanup", message)


class StashRestoreWarning(SquashWarning):
    """Isolated working-tree changes could not be reapplied."""

    def __init__(self, message: str):
        super().__init__("stash-restore", message)


@dataclass
class SquashPlan:
    """Operation-scoped record of one squash call. Never persisted."""
    branch: Optional[str] = None  # unknown until HEAD is read
    target_ref: Optional[str] = None
    target_commit: Optional[CommitID] = None
    ephemeral_branch_name: Optional[str] = None
    original_head_commit: Optional[CommitID] = None
    stashed: bool = False
    status: SquashStatus = SquashStatus.IDLE
    warnings: List[SquashWarning] = field(default_factory=list)

    def transition(self, status: SquashStatus) -> None:
        logger.debug("Squash of %s: %s -> %s", self.branch or "HEAD", self.status.value, status.value)
        self.status = status

    def warn(self, warning: SquashWarning) -> None:
        logger.warning("%s", warning.message)
        self.warnings.append(warning)


@dataclass
class SquashResult:
    """Outcome of a successful (or no-op) squash."""
    commits_consolidated: int
    branch: str
    target_ref: str
    target_commit: CommitID
    new_head_commit: Optional[CommitID] = None
    message: Optional[str] = None
    warnings: List[SquashWarning] = field(default_factory=list)

    @property
    def is_noop(self) -> bool:
        return self.commits_consolidated == 0

    def summary_stats(self) -> str:
        """Get summary statistics as string."""
        if self.is_noop:
            return f"{self.branch}: nothing to squash against {self.target_ref}"
        return (f"{self.branch}: {self.commits_consolidated} commits → 1 commit "
                f"on top of {self.target_ref}")


class GitConsolidateError(Exception):
    """Base exception for git consolidate operations."""
    pass


class NotFoundError(GitConsolidateError):
    """Raised when a branch, ref or target cannot be resolved to a commit."""
    pass


class TargetNotFoundError(NotFoundError):
    """Raised when the base or head of a commit range does not resolve."""

    def __init__(self, ref: str):
        super().__init__(f"Cannot resolve '{ref}' to a commit")
        self.ref = ref


class ParentBranchNotFoundError(NotFoundError):
    """Raised when no parent branch can be determined for a branch."""

    def __init__(self, branch: str):
        super().__init__(
            f"Could not determine a parent branch for '{branch}'; "
            f"pass a target explicitly or configure a trunk branch")
        self.branch = branch


class DetachedHeadError(NotFoundError):
    """Raised when HEAD does not point at a branch."""
    pass


class GitOperationError(GitConsolidateError):
    """Raised when git operations fail."""

    def __init__(self, message: str, args: Sequence[str] = (),
                 returncode: Optional[int] = None, stderr: str = ""):
        super().__init__(message)
        self.git_args = list(args)
        self.returncode = returncode
        self.stderr = stderr
        self.warnings: List[SquashWarning] = []


class ConflictError(GitConsolidateError):
    """Raised when replaying a commit produces a content conflict."""

    def __init__(self, commit: CommitInfo, conflicted_files: List[str]):
        files = ", ".join(conflicted_files) if conflicted_files else "unknown files"
        super().__init__(
            f"Replaying {commit.short_hash} ({commit.subject}) conflicts in {files}")
        self.commit = commit
        self.conflicted_files = conflicted_files
        self.warnings: List[SquashWarning] = []


class StashRestoreError(GitConsolidateError):
    """Raised when an isolated stash entry cannot be reapplied."""
    pass
