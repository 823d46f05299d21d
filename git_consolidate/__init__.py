"""
Git Consolidate - squash a branch's commits into one, safely

Replays the commits a branch carries ahead of its parent onto a
temporary branch, records them as one commit and only then moves the
branch, restoring any uncommitted work afterwards.
"""

__version__ = "1.0.0"

from .core.config import ConsolidateConfig
from .core.types import (
    CommitInfo, CommitRange, SquashPlan, SquashResult, SquashStatus,
    GitConsolidateError, NotFoundError, ConflictError, GitOperationError
)
from .core.range import CommitRangeAnalyzer
from .core.resolver import ParentBranchResolver
from .core.stash import StashGuard, StashToken
from .git.config_store import ConfigStore, GitConfigStore, MappingConfigStore
from .git.operations import GitExecutor, GitRepository
from .ai.interface import MessageComposer
from .ai.subjects import SubjectListComposer
from .ai.claude import ClaudeComposer
from .tool import SquashTransactionManager, squash

__all__ = [
    "ConsolidateConfig",
    "CommitInfo",
    "CommitRange",
    "SquashPlan",
    "SquashResult",
    "SquashStatus",
    "GitConsolidateError",
    "NotFoundError",
    "ConflictError",
    "GitOperationError",
    "CommitRangeAnalyzer",
    "ParentBranchResolver",
    "StashGuard",
    "StashToken",
    "ConfigStore",
    "GitConfigStore",
    "MappingConfigStore",
    "GitExecutor",
    "GitRepository",
    "MessageComposer",
    "SubjectListComposer",
    "ClaudeComposer",
    "SquashTransactionManager",
    "squash",
]
