"""Abstract interface for commit message composers."""

from abc import ABC, abstractmethod

from ..core.types import CommitRange


class MessageComposer(ABC):
    """Builds the message of a consolidated commit when the caller gives none."""

    @abstractmethod
    def compose(self, commit_range: CommitRange, branch: str) -> str:
        """Compose a commit message for the squashed range.

        Args:
            commit_range: The commits being consolidated, oldest first
            branch: Name of the branch being squashed

        Returns:
            Formatted commit message following Git best practices
        """
        pass
