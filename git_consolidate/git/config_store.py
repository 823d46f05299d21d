"""Read-only key-value access to repository configuration."""

import logging
from abc import ABC, abstractmethod
from typing import Mapping, Optional

from .operations import GitExecutor

logger = logging.getLogger(__name__)


class ConfigStore(ABC):
    """Named string settings such as ``at.trunk`` or ``branch.<name>.merge``."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the value for key, or None when it is not set."""
        pass


class GitConfigStore(ConfigStore):
    """Reads values with ``git config --get`` across all config scopes."""

    def __init__(self, executor: GitExecutor):
        self.executor = executor

    def get(self, key: str) -> Optional[str]:
        result = self.executor.execute(["config", "--get", key])
        if result.ok:
            return result.output or None
        # exit status 1 means "key not set"; anything else is a broken config
        if result.returncode != 1:
            logger.warning("Could not read config key %s: %s", key, result.stderr.strip())
        return None


class MappingConfigStore(ConfigStore):
    """Serves settings from a plain mapping."""

    def __init__(self, values: Optional[Mapping[str, str]] = None):
        self.values = dict(values or {})

    def get(self, key: str) -> Optional[str]:
        return self.values.get(key) or None
