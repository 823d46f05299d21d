"""Squash transaction manager."""

import logging
from typing import Optional

from .ai.interface import MessageComposer
from .ai.subjects import SubjectListComposer
from .core.config import ConsolidateConfig
from .core.range import CommitRangeAnalyzer
from .core.resolver import ParentBranchResolver
from .core.stash import StashGuard, StashToken
from .core.types import (
    CleanupWarning, CommitRange, ConflictError, GitConsolidateError,
    SquashPlan, SquashResult, SquashStatus, StashRestoreError, StashRestoreWarning
)
from .git.config_store import ConfigStore, GitConfigStore
from .git.operations import GitRepository

logger = logging.getLogger(__name__)


class SquashTransactionManager:
    """Collapses the commits a branch carries ahead of a target into one.

    The commits are replayed one by one onto an ephemeral branch started
    at the target, so a conflict names the exact commit that failed, and
    recorded there as a single commit. Only after every replay succeeds
    is the current branch moved to that commit. The ephemeral branch is
    deleted and stashed changes are restored on every exit path.
    """

    def __init__(self,
                 repo: GitRepository,
                 config_store: Optional[ConfigStore] = None,
                 config: Optional[ConsolidateConfig] = None,
                 composer: Optional[MessageComposer] = None):
        self.repo = repo
        self.config = config or ConsolidateConfig()
        self.config_store = config_store or GitConfigStore(repo.executor)
        self.composer = composer or SubjectListComposer(self.config)
        self.resolver = ParentBranchResolver(repo, self.config_store, self.config)
        self.analyzer = CommitRangeAnalyzer(repo)
        self.stash = StashGuard(repo, self.config)
        self.last_plan: Optional[SquashPlan] = None

    def plan(self, target_ref: Optional[str] = None) -> SquashPlan:
        """Validate a squash without mutating anything."""
        plan = self.last_plan = SquashPlan()
        plan.transition(SquashStatus.VALIDATING)
        try:
            plan.branch = self.repo.current_branch()
            plan.target_ref = target_ref or self.resolver.resolve(plan.branch)
        except GitConsolidateError:
            plan.transition(SquashStatus.FAILED)
            raise
        return plan

    def preview(self, target_ref: Optional[str] = None) -> CommitRange:
        """Commits that ``squash`` would consolidate."""
        plan = self.plan(target_ref)
        return self.analyzer.range(plan.target_ref, plan.branch)

    def squash(self, target_ref: Optional[str] = None, message: Optional[str] = None) -> SquashResult:
        """Squash the current branch's commits ahead of target_ref into one commit.

        Args:
            target_ref: Branch or commit to measure against; detected when omitted
            message: Message of the consolidated commit; composed when omitted

        Returns:
            SquashResult with the number of commits consolidated (0 for a no-op)

        Raises:
            NotFoundError: if the branch, target or parent cannot be resolved
            ConflictError: if replaying one of the commits conflicts
            GitOperationError: if any other git step fails
        """
        plan = self.plan(target_ref)

        try:
            commit_range = self.analyzer.range(plan.target_ref, plan.branch)
        except GitConsolidateError:
            plan.transition(SquashStatus.FAILED)
            raise
        plan.target_commit = commit_range.base_commit
        plan.original_head_commit = commit_range.head_commit

        if not commit_range.needs_consolidation:
            logger.info("Nothing to squash: %d commit(s) ahead of %s", len(commit_range), plan.target_ref)
            plan.transition(SquashStatus.DONE)
            return SquashResult(
                commits_consolidated=0,
                branch=plan.branch,
                target_ref=plan.target_ref,
                target_commit=plan.target_commit,
            )

        if not message:
            message = self.composer.compose(commit_range, plan.branch)

        plan.transition(SquashStatus.ISOLATING)
        token = self.stash.isolate() if self.repo.is_dirty() else None
        plan.stashed = token is not None

        new_head = None
        try:
            new_head = self._replay_and_finalize(plan, commit_range, message)
        except GitConsolidateError as e:
            e.warnings = plan.warnings
            raise
        finally:
            self._cleanup(plan)
            self._restore(plan, token)
            plan.transition(SquashStatus.DONE if new_head else SquashStatus.FAILED)

        result = SquashResult(
            commits_consolidated=len(commit_range),
            branch=plan.branch,
            target_ref=plan.target_ref,
            target_commit=plan.target_commit,
            new_head_commit=new_head,
            message=message,
            warnings=plan.warnings,
        )
        logger.info("Squash complete: %s", result.summary_stats())
        return result

    def _replay_and_finalize(self, plan: SquashPlan, commit_range: CommitRange, message: str) -> str:
        plan.transition(SquashStatus.REPLAYING)
        plan.ephemeral_branch_name = self._ephemeral_branch_name(plan)

        try:
            self.repo.checkout_new_branch(plan.ephemeral_branch_name, plan.target_commit)
        except GitConsolidateError:
            # the branch may exist even though the checkout failed
            if not self.repo.branch_exists(plan.ephemeral_branch_name):
                plan.ephemeral_branch_name = None
            raise

        try:
            for index, commit in enumerate(commit_range, 1):
                logger.info("Replaying %d/%d: %s %s", index, len(commit_range), commit.short_hash, commit.subject)
                if not self.repo.cherry_pick_no_commit(commit.hash):
                    raise ConflictError(commit, self.repo.conflicted_files())

            new_head = self.repo.commit(message, allow_empty=not self.repo.has_staged_changes())

            plan.transition(SquashStatus.FINALIZING)
            self.repo.checkout_branch(plan.branch)
            self.repo.reset_hard(new_head)
        except GitConsolidateError:
            self._abandon(plan)
            raise

        logger.debug("%s now at %s", plan.branch, new_head[:8])
        return new_head

    def _abandon(self, plan: SquashPlan) -> None:
        """Throw away the replay and put the original branch back."""
        try:
            current = self.repo.try_run(["symbolic-ref", "--quiet", "--short", "HEAD"])
            if current == plan.branch:
                # finalizing may have moved the branch already
                self.repo.reset_hard(plan.original_head_commit)
            else:
                self.repo.reset_hard()
                self.repo.checkout_branch(plan.branch)
        except GitConsolidateError as e:
            plan.warn(CleanupWarning(
                f"Could not return to {plan.branch} at {plan.original_head_commit[:8]}: {e}"))

    def _cleanup(self, plan: SquashPlan) -> None:
        plan.transition(SquashStatus.CLEANUP)
        if not plan.ephemeral_branch_name:
            return
        try:
            self.repo.delete_branch(plan.ephemeral_branch_name)
        except GitConsolidateError as e:
            plan.warn(CleanupWarning(
                f"Could not delete temporary branch {plan.ephemeral_branch_name}: {e}"))

    def _restore(self, plan: SquashPlan, token: Optional[StashToken]) -> None:
        if token is None:
            return
        try:
            self.stash.release(token)
        except StashRestoreError as e:
            plan.warn(StashRestoreWarning(str(e)))

    def _ephemeral_branch_name(self, plan: SquashPlan) -> str:
        base = f"{self.config.ephemeral_branch_prefix}{plan.original_head_commit[:8]}"
        name = base
        suffix = 2
        while self.repo.branch_exists(name):
            name = f"{base}-{suffix}"
            suffix += 1
        return name


def squash(repo_path=None, target_ref: Optional[str] = None, message: Optional[str] = None,
           config: Optional[ConsolidateConfig] = None) -> SquashResult:
    """Squash the checked-out branch of the repository at repo_path."""
    repo = GitRepository(repo_path)
    return SquashTransactionManager(repo, config=config).squash(target_ref, message)
