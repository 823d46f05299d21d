"""Core functionality for git consolidate."""

from .config import ConsolidateConfig
from .types import (
    CommitInfo, CommitRange, SquashPlan, SquashResult, SquashStatus,
    SquashWarning, CleanupWarning, StashRestoreWarning,
    GitConsolidateError, NotFoundError, TargetNotFoundError, ParentBranchNotFoundError,
    DetachedHeadError, ConflictError, GitOperationError, StashRestoreError
)
from .analyzer import MessageFormatter

__all__ = [
    "ConsolidateConfig",
    "CommitInfo", "CommitRange", "SquashPlan", "SquashResult", "SquashStatus",
    "SquashWarning", "CleanupWarning", "StashRestoreWarning",
    "GitConsolidateError", "NotFoundError", "TargetNotFoundError", "ParentBranchNotFoundError",
    "DetachedHeadError", "ConflictError", "GitOperationError", "StashRestoreError",
    "MessageFormatter"
]
