"""Parent branch detection."""

import logging
from typing import Callable, List, Optional, Tuple

from ..git.config_store import ConfigStore
from ..git.operations import GitRepository
from .config import ConsolidateConfig
from .types import GitOperationError, ParentBranchNotFoundError

logger = logging.getLogger(__name__)


class ParentBranchResolver:
    """Works out which branch a branch should be squashed against.

    Candidates are tried in order and the first usable one wins:

    1. the branch's configured upstream merge reference (``branch.<name>.merge``)
    2. the branch's remote-tracking upstream (``<name>@{upstream}``)
    3. the local branch sharing the most recent merge-base with it
    4. the configured trunk branch (``at.trunk`` by default)
    5. the first existing conventional default branch name

    Neither the branch itself nor ephemeral squash branches are ever
    returned.
    """

    def __init__(self, repo: GitRepository, config_store: ConfigStore,
                 config: Optional[ConsolidateConfig] = None):
        self.repo = repo
        self.config_store = config_store
        self.config = config or ConsolidateConfig()

    def resolve(self, current_branch: str) -> str:
        steps: List[Tuple[str, Callable[[str], Optional[str]]]] = [
            ("configured upstream", self.from_configured_upstream),
            ("remote-tracking upstream", self.from_tracking_branch),
            ("most recent merge-base", self.from_divergence),
            ("trunk setting", self.from_trunk_setting),
            ("default branch names", self.from_default_names),
        ]

        for description, step in steps:
            candidate = step(current_branch)
            if candidate:
                logger.info("Parent of %s is %s (%s)", current_branch, candidate, description)
                return candidate
            logger.debug("No parent for %s from %s", current_branch, description)

        raise ParentBranchNotFoundError(current_branch)

    def _usable(self, candidate: Optional[str], current_branch: str) -> bool:
        if not candidate or candidate == current_branch:
            return False
        return not self.config.is_ephemeral_branch(candidate)

    def from_configured_upstream(self, current_branch: str) -> Optional[str]:
        merge_ref = self.config_store.get(f"branch.{current_branch}.merge")
        if not merge_ref:
            return None

        # taken regardless of branch.<name>.remote; only the local branch of that name counts
        name = merge_ref[len("refs/heads/"):] if merge_ref.startswith("refs/heads/") else merge_ref
        if self._usable(name, current_branch) and self.repo.branch_exists(name):
            return name
        return None

    def from_tracking_branch(self, current_branch: str) -> Optional[str]:
        upstream = self.repo.upstream_of(current_branch)
        if self._usable(upstream, current_branch) and self.repo.resolve_commit(upstream):
            return upstream
        return None

    def from_divergence(self, current_branch: str) -> Optional[str]:
        """Pick the branch whose merge-base with us was committed last.

        A merge-base equal to our own head means the other branch
        contains us, so it cannot be our parent. Equal timestamps are
        broken by branch name so the choice never depends on ref order.
        """
        head = self.repo.resolve_commit(current_branch)
        if not head:
            return None

        scored: List[Tuple[int, str]] = []
        for branch in self.repo.local_branches():
            if not self._usable(branch, current_branch):
                continue

            base = self.repo.merge_base(head, branch)
            if not base:
                logger.debug("%s shares no history with %s", branch, current_branch)
                continue
            if base == head:
                logger.debug("%s already contains %s, skipping", branch, current_branch)
                continue

            try:
                timestamp = self.repo.commit_timestamp(base)
            except (GitOperationError, ValueError) as e:
                logger.warning("Could not date merge-base of %s: %s", branch, e)
                continue
            logger.debug("Merge-base with %s is %s at %d", branch, base[:8], timestamp)
            scored.append((timestamp, branch))

        if not scored:
            return None

        scored.sort(key=lambda item: (-item[0], item[1]))
        return scored[0][1]

    def from_trunk_setting(self, current_branch: str) -> Optional[str]:
        trunk = self.config_store.get(self.config.trunk_config_key)
        if self._usable(trunk, current_branch) and self.repo.resolve_commit(trunk):
            return trunk
        return None

    def from_default_names(self, current_branch: str) -> Optional[str]:
        for name in self.config.default_branches:
            if self._usable(name, current_branch) and self.repo.branch_exists(name):
                return name
        return None
