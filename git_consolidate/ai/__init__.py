"""Composers for consolidated commit messages."""

from .interface import MessageComposer
from .subjects import SubjectListComposer
from .claude import ClaudeComposer

__all__ = ["MessageComposer", "SubjectListComposer", "ClaudeComposer"]
