"""Isolation of uncommitted working-tree changes."""

import logging
import uuid
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, Optional

from ..git.operations import FIELD_SEP, GitRepository
from .config import ConsolidateConfig
from .types import GitOperationError, StashRestoreError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StashToken:
    """Handle on one isolation, identified by its unique stash label."""
    label: str


class StashGuard:
    """Sets aside staged and unstaged modifications and puts them back.

    ``release`` must be called exactly once for every successful
    ``isolate``; ``protect`` does that on every exit path.
    """

    def __init__(self, repo: GitRepository, config: Optional[ConsolidateConfig] = None):
        self.repo = repo
        self.config = config or ConsolidateConfig()

    def isolate(self) -> StashToken:
        label = f"{self.config.stash_label_prefix}-{uuid.uuid4().hex[:12]}"
        logger.info("Stashing uncommitted changes as %s", label)
        self.repo.run(["stash", "push", "--quiet", "-m", label])
        return StashToken(label)

    def find(self, token: StashToken) -> Optional[str]:
        """Ref of the most recent stash entry carrying the token's label."""
        output = self.repo.run(["stash", "list", f"--format=%gd{FIELD_SEP}%s"])
        for line in output.split("\n"):
            ref, _, subject = line.partition(FIELD_SEP)
            # subjects read "On <branch>: <label>"
            if ref and subject.endswith(f": {token.label}"):
                return ref
        return None

    def release(self, token: StashToken) -> None:
        """Reapply and drop the isolated changes.

        Raises:
            StashRestoreError: if the entry is gone or does not apply cleanly
        """
        ref = self.find(token)
        if ref is None:
            raise StashRestoreError(f"No stash entry labelled {token.label} to restore")

        logger.info("Restoring stashed changes from %s", ref)
        try:
            self.repo.run(["stash", "pop", "--quiet", "--index", ref])
        except GitOperationError as e:
            raise StashRestoreError(
                f"Could not reapply {ref} ({token.label}); it is kept in the stash list. "
                f"Recover with: git stash pop {ref}") from e

    @contextmanager
    def protect(self) -> Iterator[Optional[StashToken]]:
        """Isolate changes if the tree is dirty; release them on exit."""
        token = self.isolate() if self.repo.is_dirty() else None
        try:
            yield token
        finally:
            if token is not None:
                self.release(token)
