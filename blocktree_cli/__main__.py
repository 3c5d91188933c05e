"""
Module execution entry point.

Allows running with: python -m blocktree_cli
"""

import sys
from blocktree_cli.main import main

if __name__ == "__main__":
    sys.exit(main())
