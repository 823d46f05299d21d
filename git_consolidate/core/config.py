"""Configuration management for git consolidate."""

from dataclasses import dataclass
from typing import Tuple

INVALID_REF_CHARS = [' ', '\n', '\t', '..', '~', '^', ':', '?', '*', '[', '\\']


@dataclass
class ConsolidateConfig:
    """Configuration for squash operations."""

    # Parent branch detection
    trunk_config_key: str = "at.trunk"
    default_branches: Tuple[str, ...] = ("main", "master", "develop", "development")

    # Transaction scratch state
    ephemeral_branch_prefix: str = "squash-tmp-"
    stash_label_prefix: str = "git-consolidate"

    # Message formatting
    subject_line_limit: int = 72
    body_line_width: int = 72
    max_listed_subjects: int = 20

    # ai settings
    model: str = "claude-3-7-sonnet-20250219"

    def __post_init__(self):
        """Validate configuration parameters after initialization."""
        if not self.trunk_config_key or not isinstance(self.trunk_config_key, str):
            raise ValueError(
                f"trunk_config_key must be a non-empty string, got {self.trunk_config_key!r}")

        if isinstance(self.default_branches, str):
            raise ValueError(
                "default_branches must be a sequence of branch names, not a string")
        self.default_branches = tuple(self.default_branches)
        for name in self.default_branches:
            if not name or not isinstance(name, str):
                raise ValueError(
                    f"default_branches contains an invalid name: {name!r}")

        # Validate message limits
        if self.subject_line_limit <= 3:
            raise ValueError(
                f"subject_line_limit must be greater than 3, got {self.subject_line_limit}")
        if self.body_line_width <= 0:
            raise ValueError(
                f"body_line_width must be positive, got {self.body_line_width}")
        if self.max_listed_subjects <= 0:
            raise ValueError(
                f"max_listed_subjects must be positive, got {self.max_listed_subjects}")

        # Validate prefixes used to build ref names and stash labels
        if not isinstance(self.ephemeral_branch_prefix, str) or not self.ephemeral_branch_prefix:
            raise ValueError(
                f"ephemeral_branch_prefix must be a non-empty string, got {self.ephemeral_branch_prefix!r}")
        if not isinstance(self.stash_label_prefix, str) or not self.stash_label_prefix:
            raise ValueError(
                f"stash_label_prefix must be a non-empty string, got {self.stash_label_prefix!r}")
        for char in INVALID_REF_CHARS:
            if char in self.ephemeral_branch_prefix:
                raise ValueError(
                    f"ephemeral_branch_prefix contains invalid character '{char}': {self.ephemeral_branch_prefix}")
        if self.ephemeral_branch_prefix.startswith(('-', '/')):
            raise ValueError(
                f"ephemeral_branch_prefix cannot start with '-' or '/': {self.ephemeral_branch_prefix}")
        if '\n' in self.stash_label_prefix:
            raise ValueError("stash_label_prefix cannot contain newlines")

        # Validate ai options
        if not isinstance(self.model, str):
            raise ValueError(f"model must be a string, got {type(self.model)}")

    @classmethod
    def from_cli_args(cls, args) -> 'ConsolidateConfig':
        """Create config from command line arguments."""
        try:
            return cls(
                trunk_config_key=getattr(args, 'trunk_key', None) or cls.trunk_config_key,
                model=getattr(args, 'model', None) or cls.model,
            )
        except ValueError as e:
            raise ValueError(
                f"Invalid configuration from command line arguments: {e}") from e

    def with_overrides(self, **kwargs) -> 'ConsolidateConfig':
        """Create a new config with specific overrides."""
        fields = {field.name: getattr(self, field.name)
                  for field in self.__dataclass_fields__.values()}
        fields.update(kwargs)
        return ConsolidateConfig(**fields)

    def is_ephemeral_branch(self, name: str) -> bool:
        return name.startswith(self.ephemeral_branch_prefix)
