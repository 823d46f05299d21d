"""Command line interface for git consolidate."""

from pathlib import Path
from typing import Optional
import argparse
import logging
import os
import sys

from .ai.claude import ClaudeComposer
from .ai.subjects import SubjectListComposer
from .core.config import ConsolidateConfig
from .core.types import CommitRange, ConflictError, GitConsolidateError, NotFoundError, SquashResult
from .git.operations import GitRepository
from .tool import SquashTransactionManager

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False):
    """Setup logging configuration."""
    level = logging.DEBUG if verbose else logging.INFO

    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )

    # Reduce noise from external libraries
    logging.getLogger('httpx').setLevel(logging.WARNING)
    logging.getLogger('anthropic').setLevel(logging.WARNING)


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the command line argument parser."""
    parser = argparse.ArgumentParser(
        prog='git-consolidate',
        description='Squash the commits of the current branch into a single commit',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s                              # Squash against the detected parent branch
  %(prog)s develop                      # Squash everything ahead of develop
  %(prog)s develop -m "Add login flow"  # Squash with an explicit message
  %(prog)s --dry-run                    # Show what would be squashed
  %(prog)s --compose claude             # Let Claude write the message

Environment Variables:
  ANTHROPIC_API_KEY         Required for --compose claude
  GIT_CONSOLIDATE_VERBOSE   Set to enable debug logging
        """
    )

    parser.add_argument(
        'target',
        nargs='?',
        help='Branch or commit to squash against (default: detected parent branch)'
    )

    parser.add_argument(
        '--message', '-m',
        help='Message for the squashed commit (default: composed from the commits)',
        metavar='MESSAGE'
    )

    parser.add_argument(
        '--repo',
        type=Path,
        default=None,
        help='Repository to operate on (default: current directory)',
        metavar='DIR'
    )

    parser.add_argument(
        '--dry-run',
        action='store_true',
        help='Show the commits that would be squashed without changing anything'
    )

    parser.add_argument(
        '--compose',
        choices=['subjects', 'claude'],
        default='subjects',
        help='How to build the message when --message is not given (default: %(default)s)'
    )

    parser.add_argument(
        '--model',
        default=ConsolidateConfig.model,
        help='Claude model to use with --compose claude (default: %(default)s)',
        metavar='MODEL'
    )

    parser.add_argument(
        '--trunk-key',
        default=ConsolidateConfig.trunk_config_key,
        help='Git config key holding the trunk branch (default: %(default)s)',
        metavar='KEY'
    )

    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Enable verbose logging'
    )

    return parser


def validate_environment(compose: str) -> None:
    """Validate required environment variables."""
    if compose == 'claude' and not os.environ.get('ANTHROPIC_API_KEY'):
        print("Error: ANTHROPIC_API_KEY environment variable not set", file=sys.stderr)
        print("Either set the API key or use --compose subjects", file=sys.stderr)
        sys.exit(1)


def create_composer(args, config: ConsolidateConfig, repo: GitRepository):
    """Create the message composer selected on the command line."""
    if args.compose == 'claude':
        logger.info("Using Claude to compose the commit message")
        return ClaudeComposer(config=config, repo=repo)
    return SubjectListComposer(config)


def display_range(commit_range: CommitRange, branch: str) -> None:
    """Display the commits a squash would consolidate."""
    print(f"\n{branch} has {len(commit_range)} commits ahead of {commit_range.base}:")
    for i, commit in enumerate(commit_range, 1):
        print(f"  {i}. {commit.short_hash} {commit.subject}")
    if not commit_range.needs_consolidation:
        print("\nNothing to squash.")


def display_result(result: SquashResult) -> None:
    """Display the outcome of a squash."""
    if result.is_noop:
        print(f"\nNothing to squash: {result.branch} is at most one commit ahead of {result.target_ref}.")
    else:
        print(f"\nSquashed {result.commits_consolidated} commits on {result.branch} "
              f"into {result.new_head_commit[:8]} on top of {result.target_ref}.")
        print("\nCommit message:")
        print("-" * 40)
        print(result.message)
        print("-" * 40)
    display_warnings(result.warnings)


def display_warnings(warnings) -> None:
    for warning in warnings:
        print(f"Warning: {warning}", file=sys.stderr)


def main(args: Optional[list] = None) -> int:
    """Main entry point for the CLI."""
    parser = create_argument_parser()
    parsed_args = parser.parse_args(args)

    env_verbose = bool(os.environ.get('GIT_CONSOLIDATE_VERBOSE', ""))
    setup_logging(parsed_args.verbose or env_verbose)

    try:
        config = ConsolidateConfig.from_cli_args(parsed_args)
        logger.debug("Configuration: %s", config)

        repo = GitRepository(parsed_args.repo)
        if parsed_args.dry_run:
            manager = SquashTransactionManager(repo, config=config)
            display_range(manager.preview(parsed_args.target), repo.current_branch())
            print("\nDry run complete. Run without --dry-run to squash.")
            return 0

        if not parsed_args.message:
            validate_environment(parsed_args.compose)
        composer = create_composer(parsed_args, config, repo)
        manager = SquashTransactionManager(repo, config=config, composer=composer)

        result = manager.squash(parsed_args.target, parsed_args.message)
        display_result(result)
        return 0

    except ConflictError as e:
        print(f"Error: {e}", file=sys.stderr)
        print("The branch was left unchanged.", file=sys.stderr)
        display_warnings(e.warnings)
        return 1

    except NotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    except GitConsolidateError as e:
        logger.error("Squash failed: %s", e)
        print(f"Error: {e}", file=sys.stderr)
        display_warnings(getattr(e, 'warnings', []))
        return 1

    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    except KeyboardInterrupt:
        print("\nInterrupted by user.", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
