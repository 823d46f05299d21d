"""Git operations for the consolidate engine."""

import logging
import os
import subprocess
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

from ..core.types import (
    CommitID, CommitInfo, DetachedHeadError, GitOperationError, TargetNotFoundError
)

logger = logging.getLogger(__name__)

# ASCII unit separator, very unlikely to appear in commit subjects
FIELD_SEP = "\x1F"


@dataclass
class CommandResult:
    """Raw outcome of one git invocation."""
    args: List[str]
    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def output(self) -> str:
        return self.stdout.strip()


class GitExecutor:
    """Runs git commands inside one repository directory.

    Never raises for a non-zero exit status; callers inspect the
    returned ``CommandResult``.
    """

    def __init__(self, repo_path: Union[str, Path], env: Optional[Dict[str, str]] = None):
        self.repo_path = Path(repo_path)
        self.env = env

    def execute(self, argv: Sequence[str]) -> CommandResult:
        full_cmd = ["git"] + list(argv)
        logger.debug("Running git command: %s", " ".join(full_cmd))

        env = None
        if self.env:
            env = os.environ.copy()
            env.update(self.env)

        try:
            result = subprocess.run(
                full_cmd,
                cwd=self.repo_path,
                capture_output=True,
                text=True,
                env=env,
            )
        except OSError as e:
            logger.error("Could not start git in %s: %s", self.repo_path, e)
            return CommandResult(list(argv), 127, "", str(e))

        return CommandResult(list(argv), result.returncode, result.stdout, result.stderr)


class GitRepository:
    """Explicit handle on one repository.

    This is the only place where failed git invocations are turned into
    ``GitConsolidateError`` subclasses.
    """

    def __init__(self, repo_path: Union[str, Path, None] = None,
                 executor: Optional[GitExecutor] = None):
        if executor is None:
            executor = GitExecutor(repo_path if repo_path is not None else Path.cwd())
        self.executor = executor
        self.path = executor.repo_path
        self._validate_git_repository()

    def run(self, args: Sequence[str]) -> str:
        """Run a git command and return its stripped stdout, raising on failure."""
        result = self.executor.execute(args)
        if not result.ok:
            logger.error("Git command failed: git %s\nStderr: %s", " ".join(args), result.stderr.strip())
            raise GitOperationError(
                f"Git command failed: git {' '.join(args)}: {result.stderr.strip()}",
                args=args, returncode=result.returncode, stderr=result.stderr)
        return result.output

    def try_run(self, args: Sequence[str]) -> Optional[str]:
        """Run a git command, returning None instead of raising on failure."""
        result = self.executor.execute(args)
        return result.output if result.ok else None

    def _validate_git_repository(self) -> None:
        """Validate that the handle points inside a git work tree."""
        result = self.executor.execute(["rev-parse", "--is-inside-work-tree"])
        if not result.ok or result.output != "true":
            raise GitOperationError(
                f"Not a git work tree: {self.path}",
                args=result.args, returncode=result.returncode, stderr=result.stderr)
        logger.debug("Git repository found at: %s", self.path)

    # refs

    def current_branch(self) -> str:
        """Get the name of the checked-out branch."""
        name = self.try_run(["symbolic-ref", "--quiet", "--short", "HEAD"])
        if not name:
            raise DetachedHeadError(f"HEAD is not on a branch in {self.path}")
        return name

    def resolve_commit(self, ref: str) -> Optional[CommitID]:
        """Resolve a ref to a full commit hash, or None."""
        return self.try_run(["rev-parse", "--verify", "--quiet", f"{ref}^{{commit}}"])

    def require_commit(self, ref: str) -> CommitID:
        commit = self.resolve_commit(ref)
        if not commit:
            raise TargetNotFoundError(ref)
        return commit

    def branch_exists(self, branch_name: str) -> bool:
        """Check if a local branch exists."""
        result = self.executor.execute(
            ["show-ref", "--verify", "--quiet", f"refs/heads/{branch_name}"])
        return result.ok

    def local_branches(self) -> List[str]:
        output = self.run(["for-each-ref", "--format=%(refname:short)", "refs/heads/"])
        return [line.strip() for line in output.split("\n") if line.strip()]

    def upstream_of(self, branch: str) -> Optional[str]:
        """Short name of the branch's tracked upstream, if configured."""
        return self.try_run(
            ["rev-parse", "--abbrev-ref", "--symbolic-full-name", f"{branch}@{{upstream}}"]) or None

    def merge_base(self, first: str, second: str) -> Optional[CommitID]:
        return self.try_run(["merge-base", first, second]) or None

    def commit_timestamp(self, ref: str) -> int:
        """Committer timestamp of a commit, in seconds since the epoch."""
        return int(self.run(["log", "-1", "--format=%ct", ref]))

    def tree_hash(self, ref: str) -> str:
        return self.run(["rev-parse", f"{ref}^{{tree}}"])

    # history

    def list_commits(self, base: str, head: str) -> List[CommitInfo]:
        """Non-merge commits reachable from head but not base, oldest first."""
        output = self.run([
            "log", "--reverse", "--no-merges", "--date=iso-strict",
            f"--pretty=format:%H{FIELD_SEP}%ad{FIELD_SEP}%s{FIELD_SEP}%an{FIELD_SEP}%ae",
            f"{base}..{head}",
        ])

        commits = []
        for line in output.split("\n"):
            if not line:
                continue
            parts = line.split(FIELD_SEP, 4)
            if len(parts) != 5:
                logger.warning("Skipping malformed commit line: %s", repr(line))
                continue

            hash_id, date_str, subject, author_name, author_email = parts
            try:
                date_obj = datetime.fromisoformat(date_str)
            except ValueError as e:
                raise GitOperationError(
                    f"Unparseable date '{date_str}' for commit {hash_id[:8]}: {e}") from e

            commits.append(CommitInfo(
                hash=hash_id,
                date=date_str,
                subject=subject,
                author_name=author_name,
                author_email=author_email,
                datetime=date_obj,
            ))
        return commits

    # working tree

    def is_dirty(self) -> bool:
        """True when tracked files carry staged or unstaged modifications."""
        return bool(self.run(["status", "--porcelain", "--untracked-files=no"]))

    def conflicted_files(self) -> List[str]:
        output = self.try_run(["diff", "--name-only", "--diff-filter=U"]) or ""
        return [line.strip() for line in output.split("\n") if line.strip()]

    # mutation

    def checkout_new_branch(self, branch_name: str, start_point: str) -> None:
        logger.info("Creating branch: %s from %s", branch_name, start_point[:8])
        self.run(["checkout", "--quiet", "-b", branch_name, start_point])

    def checkout_branch(self, branch_name: str) -> None:
        logger.debug("Checking out branch: %s", branch_name)
        self.run(["checkout", "--quiet", branch_name])

    def cherry_pick_no_commit(self, commit: CommitID) -> bool:
        """Apply a commit's change to index and work tree; False on conflict."""
        result = self.executor.execute(["cherry-pick", "--no-commit", commit])
        if not result.ok:
            logger.debug("cherry-pick %s failed: %s", commit[:8], result.stderr.strip())
        return result.ok

    def commit(self, message: str, allow_empty: bool = False) -> CommitID:
        args = ["commit", "--quiet", "--no-verify", "-m", message]
        if allow_empty:
            args.append("--allow-empty")
        self.run(args)
        return self.run(["rev-parse", "HEAD"])

    def has_staged_changes(self) -> bool:
        result = self.executor.execute(["diff", "--cached", "--quiet"])
        return not result.ok

    def reset_hard(self, commit: str = "HEAD") -> None:
        logger.debug("Resetting to %s (--hard)", commit[:8])
        self.run(["reset", "--quiet", "--hard", commit])

    def delete_branch(self, branch_name: str) -> None:
        logger.debug("Deleting branch: %s", branch_name)
        self.run(["branch", "-D", branch_name])
