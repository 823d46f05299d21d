"""Claude message composer."""
import logging
import os
import re
from typing import List, Optional

from anthropic import Anthropic, APIError

from ..core.config import ConsolidateConfig
from ..core.types import CommitRange, GitOperationError
from ..git.operations import GitRepository
from .interface import MessageComposer
from .subjects import SubjectListComposer

logger = logging.getLogger(__name__)

MAX_DIFF_STAT_CHARS = 4000


class ClaudeComposer(MessageComposer):
    """Asks Claude to summarise a squashed range as one commit message.

    Falls back to ``SubjectListComposer`` whenever the API call fails or
    the reply carries no usable message.
    """

    def __init__(self, api_key: Optional[str] = None,
                 config: Optional[ConsolidateConfig] = None,
                 repo: Optional[GitRepository] = None):
        self.api_key = api_key or os.environ.get('ANTHROPIC_API_KEY')
        if not self.api_key:
            raise ValueError("ANTHROPIC_API_KEY must be set to compose messages with Claude")

        self.config = config or ConsolidateConfig()
        self.repo = repo
        self.fallback = SubjectListComposer(self.config)
        self.client = Anthropic(api_key=self.api_key, max_retries=3, timeout=30.0)

    def compose(self, commit_range: CommitRange, branch: str) -> str:
        logger.debug("Asking %s for a message covering %d commits", self.config.model, len(commit_range))
        prompt = self._build_prompt(commit_range, branch)

        try:
            response = self.client.messages.create(
                model=self.config.model,
                max_tokens=1024,
                system="You are an AI assistant that writes focused, high-quality git commit messages.",
                messages=[{"role": "user", "content": prompt}],
            )
        except APIError as e:
            logger.error("Claude API error, using subject list instead: %s", e)
            return self.fallback.compose(commit_range, branch)

        text_parts = [block.text for block in response.content
                      if getattr(block, 'type', None) == 'text']
        response_text = ' '.join(text_parts).strip()

        match = re.search(r'<commit-message>\s*(.*?)\s*</commit-message>', response_text, re.DOTALL)
        if not match or not match.group(1).strip():
            logger.warning("No <commit-message> in Claude response, using subject list instead")
            return self.fallback.compose(commit_range, branch)

        message = self.fallback.formatter.format_commit_message(match.group(1))
        logger.debug("Generated message (%d chars)", len(message))
        return message

    def _build_prompt(self, commit_range: CommitRange, branch: str) -> str:
        context = self._build_context(commit_range)
        return f"""The branch '{branch}' is being squashed into a single commit on top of {commit_range.base}.

{context}

Write one commit message for the combined change:
1. Subject line (max {self.config.subject_line_limit} chars), imperative mood, no trailing period
2. Blank line
3. Body wrapped at {self.config.body_line_width} chars with bullet points describing what changed and why

Format your response exactly as:
<commit-message>
Your subject line here

Your body here
</commit-message>"""

    def _build_context(self, commit_range: CommitRange) -> str:
        lines: List[str] = [
            f"Commits being squashed: {len(commit_range)}",
            "",
            "Original commit messages (oldest first):",
        ]

        limit = self.config.max_listed_subjects
        for commit in commit_range.commits[:limit]:
            lines.append(f"- {commit.subject}")
        if len(commit_range) > limit:
            lines.append(f"... and {len(commit_range) - limit} more")

        if self.repo is not None:
            try:
                stat = self.repo.run(
                    ["diff", "--stat", f"{commit_range.base_commit}..{commit_range.head_commit}"])
            except GitOperationError as e:
                logger.debug("No diff stat for prompt: %s", e)
            else:
                if len(stat) > MAX_DIFF_STAT_CHARS:
                    stat = stat[:MAX_DIFF_STAT_CHARS] + "\n... (truncated)"
                lines.extend(["", "File changes:", stat])

        return '\n'.join(lines)
