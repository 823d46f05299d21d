"""Shared fixtures: throwaway git repositories driven through the real git binary."""

import os
import subprocess
from pathlib import Path
from typing import List, Optional

import pytest

# 2023-11-14, far enough from "now" that relative dates never matter
BASE_TIMESTAMP = 1700000000


class GitTestRepository:
    """Helper for managing test git repositories."""

    def __init__(self, repo_path: Path):
        self.repo_path = repo_path
        self.repo_path.mkdir(parents=True, exist_ok=True)
        self.clock = 0

    def run_git(self, *args, env=None, check=True) -> subprocess.CompletedProcess:
        """Execute a git command."""
        cmd = ["git"] + list(args)
        return subprocess.run(
            cmd,
            cwd=self.repo_path,
            capture_output=True,
            text=True,
            check=check,
            env=env or os.environ,
        )

    def init_repo(self, initial_branch: str = "main") -> "GitTestRepository":
        """Initialize repository with a first commit on initial_branch."""
        self.run_git("init", "--quiet")
        self.run_git("symbolic-ref", "HEAD", f"refs/heads/{initial_branch}")
        self.run_git("config", "user.name", "Test User")
        self.run_git("config", "user.email", "test@example.com")
        self.run_git("config", "commit.gpgsign", "false")
        self.commit_file("README.md", "# Test Repository\n", "Initial commit")
        return self

    def commit_file(self, path: str, content: str, message: Optional[str] = None) -> str:
        """Write a file, commit it with the next clock tick and return the new hash."""
        file_path = self.repo_path / path
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(content)
        self.run_git("add", path)

        self.clock += 60
        commit_date = f"{BASE_TIMESTAMP + self.clock} +0000"
        env = os.environ.copy()
        env['GIT_AUTHOR_DATE'] = commit_date
        env['GIT_COMMITTER_DATE'] = commit_date

        self.run_git("commit", "--quiet", "-m", message or f"Update {path}", env=env)
        return self.head()

    def switch_branch(self, branch_name: str, create: bool = True, start_point: Optional[str] = None):
        """Switch to branch."""
        if create:
            args = ["checkout", "--quiet", "-b", branch_name]
            if start_point:
                args.append(start_point)
            self.run_git(*args)
        else:
            self.run_git("checkout", "--quiet", branch_name)

    def head(self, ref: str = "HEAD") -> str:
        return self.run_git("rev-parse", ref).stdout.strip()

    def tree(self, ref: str = "HEAD") -> str:
        return self.run_git("rev-parse", f"{ref}^{{tree}}").stdout.strip()

    def current_branch(self) -> str:
        return self.run_git("rev-parse", "--abbrev-ref", "HEAD").stdout.strip()

    def branches(self) -> List[str]:
        output = self.run_git("for-each-ref", "--format=%(refname:short)", "refs/heads/").stdout
        return [line for line in output.split("\n") if line]

    def commit_count(self, revision_range: str) -> int:
        return int(self.run_git("rev-list", "--count", revision_range).stdout.strip())

    def status(self) -> str:
        return self.run_git("status", "--porcelain").stdout

    def stash_list(self) -> List[str]:
        output = self.run_git("stash", "list").stdout
        return [line for line in output.split("\n") if line]

    def read(self, path: str) -> str:
        return (self.repo_path / path).read_text()

    def write(self, path: str, content: str) -> None:
        (self.repo_path / path).write_text(content)

    def subject(self, ref: str = "HEAD") -> str:
        return self.run_git("log", "-1", "--format=%s", ref).stdout.strip()


@pytest.fixture
def git_repo(tmp_path) -> GitTestRepository:
    """Repository with one commit on main."""
    return GitTestRepository(tmp_path / "repo").init_repo()


@pytest.fixture
def feature_repo(git_repo) -> GitTestRepository:
    """main -> develop (one commit) -> feature-x (three commits), feature-x checked out."""
    git_repo.switch_branch("develop")
    git_repo.commit_file("app.txt", "base\n", "Add app")
    git_repo.switch_branch("feature-x")
    git_repo.commit_file("one.txt", "one\n", "Add one")
    git_repo.commit_file("app.txt", "base\nfeature\n", "Extend app")
    git_repo.commit_file("three.txt", "three\n", "Add three")
    return git_repo
