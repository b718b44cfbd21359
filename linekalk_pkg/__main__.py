"""Main entry point for running linekalk_pkg as a module.

This allows running Linekalk with:
    python -m linekalk_pkg
    python -m linekalk_pkg -e "120 + 30%"
    python -m linekalk_pkg -f notes.txt --format json

This is equivalent to running:
    python -m linekalk_pkg.cli
    python linekalk.py
"""

from __future__ import annotations

import sys

from .cli import main_entry

if __name__ == "__main__":
    sys.exit(main_entry())
