"""
Main entry point for the webindex package.

Allows running the tool as: python -m webindex
"""

import sys

from webindex.cli import main

if __name__ == "__main__":
    sys.exit(main())
