"""Offline message composer built from the original commit subjects."""

import logging
from typing import Optional

from ..core.analyzer import MessageFormatter
from ..core.config import ConsolidateConfig
from ..core.types import CommitRange
from .interface import MessageComposer

logger = logging.getLogger(__name__)


class SubjectListComposer(MessageComposer):
    """Uses the oldest subject as the headline and lists every subject below it."""

    def __init__(self, config: Optional[ConsolidateConfig] = None):
        self.config = config or ConsolidateConfig()
        self.formatter = MessageFormatter(self.config)

    def compose(self, commit_range: CommitRange, branch: str) -> str:
        commits = commit_range.commits
        if not commits:
            return self.formatter.format_subject(f"Squash {branch}")

        logger.debug("Composing message from %d commit subjects", len(commits))
        subject = commits[0].subject or f"Squash {branch}"

        limit = self.config.max_listed_subjects
        body = [f"- {c.subject}" for c in commits[:limit]]
        if len(commits) > limit:
            body.append(f"- ...and {len(commits) - limit} more commits")

        return self.formatter.format_commit_message(subject + "\n\n" + "\n".join(body))
