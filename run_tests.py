#!/usr/bin/env python3
"""Test runner for git consolidate - runs pytest, optionally with coverage."""

import os
import subprocess
import sys


def run_pytest():
    """Run all tests using pytest."""
    try:
        print("Running tests with pytest...")
        result = subprocess.run([
            sys.executable, "-m", "pytest",
            "tests/",
            "-v",
            "--tb=short"
        ], cwd=os.path.dirname(os.path.abspath(__file__)))

        return result.returncode == 0

    except FileNotFoundError:
        print("pytest not found; install the test extra with: pip install -e '.[test]'")
        return False


def run_coverage():
    """Run tests with coverage reporting."""
    print("\nRunning tests with coverage...")
    result = subprocess.run([
        sys.executable, "-m", "pytest",
        "tests/",
        "--cov=git_consolidate",
        "--cov-report=term-missing",
        "--cov-report=html:htmlcov",
        "-v"
    ], cwd=os.path.dirname(os.path.abspath(__file__)))

    if result.returncode == 0:
        print("\nCoverage report generated in htmlcov/")

    return result.returncode == 0


if __name__ == "__main__":
    print("Git Consolidate - Test Runner")
    print("=" * 40)

    if len(sys.argv) > 1 and sys.argv[1] == "--coverage":
        success = run_coverage()
    else:
        success = run_pytest()

    print(f"\n{'='*40}")
    if success:
        print("✓ All tests passed!")
    else:
        print("✗ Some tests failed!")

    sys.exit(0 if success else 1)
