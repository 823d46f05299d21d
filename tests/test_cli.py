"""Tests for CLI functionality."""

import pytest
from unittest.mock import Mock, patch

from git_consolidate.cli import (
    create_argument_parser, create_composer, main, validate_environment
)
from git_consolidate.ai.subjects import SubjectListComposer
from git_consolidate.core.config import ConsolidateConfig


class TestArgumentParser:
    """Test CLI argument parsing."""

    def test_default_arguments(self):
        parser = create_argument_parser()
        args = parser.parse_args([])

        assert args.target is None
        assert args.message is None
        assert args.repo is None
        assert args.dry_run is False
        assert args.compose == "subjects"
        assert args.trunk_key == "at.trunk"
        assert args.verbose is False

    def test_target_and_message(self):
        parser = create_argument_parser()
        args = parser.parse_args(["develop", "-m", "Add login flow"])

        assert args.target == "develop"
        assert args.message == "Add login flow"

    def test_unknown_composer_rejected(self):
        parser = create_argument_parser()

        with pytest.raises(SystemExit):
            parser.parse_args(["--compose", "oracle"])


class TestEnvironmentValidation:
    """Test environment validation."""

    @patch.dict('os.environ', {'ANTHROPIC_API_KEY': 'test-key'})
    def test_claude_with_api_key(self):
        validate_environment("claude")

    @patch.dict('os.environ', {}, clear=True)
    def test_subjects_need_no_key(self):
        validate_environment("subjects")

    @patch.dict('os.environ', {}, clear=True)
    def test_claude_without_api_key(self):
        with pytest.raises(SystemExit):
            validate_environment("claude")


class TestComposerCreation:
    """Test composer selection."""

    def test_subjects_composer(self):
        args = Mock(compose="subjects")

        composer = create_composer(args, ConsolidateConfig(), Mock())

        assert isinstance(composer, SubjectListComposer)

    @patch('git_consolidate.cli.ClaudeComposer')
    def test_claude_composer(self, mock_composer_class):
        args = Mock(compose="claude")
        config = ConsolidateConfig()
        repo = Mock()

        composer = create_composer(args, config, repo)

        mock_composer_class.assert_called_once_with(config=config, repo=repo)
        assert composer is mock_composer_class.return_value


class TestMain:
    """Run the CLI against real repositories."""

    def test_dry_run(self, feature_repo, capsys):
        head_before = feature_repo.head()

        exit_code = main(["--repo", str(feature_repo.repo_path), "--dry-run", "develop"])

        out = capsys.readouterr().out
        assert exit_code == 0
        assert "feature-x has 3 commits ahead of develop" in out
        assert "Extend app" in out
        assert feature_repo.head() == head_before

    def test_squash_with_message(self, feature_repo, capsys):
        exit_code = main(["--repo", str(feature_repo.repo_path), "develop", "-m", "Combined change"])

        out = capsys.readouterr().out
        assert exit_code == 0
        assert "Squashed 3 commits on feature-x" in out
        assert feature_repo.commit_count("develop..feature-x") == 1
        assert feature_repo.subject() == "Combined change"

    def test_noop(self, feature_repo, capsys):
        exit_code = main(["--repo", str(feature_repo.repo_path), "feature-x~1", "-m", "unused"])

        assert exit_code == 0
        assert "Nothing to squash" in capsys.readouterr().out

    def test_unknown_target(self, feature_repo, capsys):
        exit_code = main(["--repo", str(feature_repo.repo_path), "no-such-branch", "-m", "x"])

        assert exit_code == 1
        assert "no-such-branch" in capsys.readouterr().err

    def test_conflict(self, git_repo, capsys):
        git_repo.commit_file("app.txt", "original\n", "Add app")
        git_repo.switch_branch("feature-x")
        git_repo.commit_file("app.txt", "feature\n", "Rewrite app on feature")
        git_repo.commit_file("two.txt", "two\n", "Add two")
        git_repo.switch_branch("main", create=False)
        git_repo.commit_file("app.txt", "mainline\n", "Rewrite app on main")
        git_repo.switch_branch("feature-x", create=False)
        head_before = git_repo.head()

        exit_code = main(["--repo", str(git_repo.repo_path), "main", "-m", "x"])

        err = capsys.readouterr().err
        assert exit_code == 1
        assert "conflicts in app.txt" in err
        assert "left unchanged" in err
        assert git_repo.head() == head_before
