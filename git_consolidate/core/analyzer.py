"""Commit message formatting."""

import logging
from typing import List

from .config import ConsolidateConfig

logger = logging.getLogger(__name__)


class MessageFormatter:
    """Formats commit messages according to Git best practices."""

    def __init__(self, config: ConsolidateConfig):
        self.config = config

    def wrap_text(self, text: str, width: int, indent: str = "") -> List[str]:
        """Wrap text to specified width, preserving bullet points."""
        lines = []

        for line in text.split('\n'):
            if not line.strip():
                lines.append("")
                continue

            stripped = line.strip()
            if stripped.startswith(('- ', '* ')):
                prefix = indent + stripped[:2]
                continuation = indent + '  '
                words = stripped[2:].split()
            else:
                prefix = indent
                continuation = indent
                words = stripped.split()

            if not words:
                lines.append(prefix.rstrip())
                continue

            current = prefix + words[0]
            for word in words[1:]:
                if len(current) + 1 + len(word) <= width:
                    current += ' ' + word
                else:
                    lines.append(current)
                    current = continuation + word
            lines.append(current)

        return lines

    def format_subject(self, subject: str) -> str:
        subject = subject.strip()
        if not subject:
            return subject
        subject = subject[0].upper() + subject[1:]
        if subject.endswith('.'):
            subject = subject[:-1]
        limit = self.config.subject_line_limit
        if len(subject) > limit:
            subject = subject[:limit - 3] + "..."
        return subject

    def format_commit_message(self, raw_message: str) -> str:
        """Format commit message: tidy subject, blank line, wrapped body."""
        lines = raw_message.strip().split('\n')
        subject = self.format_subject(lines[0])

        body_lines = lines[1:]
        while body_lines and not body_lines[0].strip():
            body_lines.pop(0)
        if not body_lines:
            return subject

        formatted_body = []
        for line in body_lines:
            if not line.strip():
                formatted_body.append("")
            else:
                formatted_body.extend(self.wrap_text(line, self.config.body_line_width))

        result = [subject, ""] + formatted_body
        while result and not result[-1]:
            result.pop()

        return '\n'.join(result)
