#!/usr/bin/env python3
"""Main entry point for git-consolidate when run as python -m git_consolidate."""

import sys
from .cli import main

if __name__ == "__main__":
    sys.exit(main())
