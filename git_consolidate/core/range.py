"""Commit range computation."""

import logging

from ..git.operations import GitRepository
from .types import CommitRange

logger = logging.getLogger(__name__)


class CommitRangeAnalyzer:
    """Computes the commits a head carries on top of a base."""

    def __init__(self, repo: GitRepository):
        self.repo = repo

    def range(self, base: str, head: str = "HEAD") -> CommitRange:
        """Commits reachable from head but not from base, oldest first.

        Raises:
            TargetNotFoundError: if base or head does not resolve to a commit
        """
        base_commit = self.repo.require_commit(base)
        head_commit = self.repo.require_commit(head)

        commits = self.repo.list_commits(base_commit, head_commit)
        logger.info("Found %d commits in %s..%s", len(commits), base, head)

        return CommitRange(
            base=base,
            base_commit=base_commit,
            head_commit=head_commit,
            commits=commits,
        )
