"""Git access for the consolidate engine."""

from .config_store import ConfigStore, GitConfigStore, MappingConfigStore
from .operations import CommandResult, GitExecutor, GitRepository

__all__ = [
    "CommandResult", "GitExecutor", "GitRepository",
    "ConfigStore", "GitConfigStore", "MappingConfigStore",
]
