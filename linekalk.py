#!/usr/bin/env python3
"""
Linekalk - Natural-language line calculator

Thin wrapper that delegates all functionality to the linekalk_pkg package.

Usage:
    python linekalk.py                          # Interactive REPL
    python linekalk.py -e "$25/hour * 14 hours" # Evaluate text
    python linekalk.py -f notes.txt             # Evaluate a file
    python linekalk.py --help                   # Show help
"""

from __future__ import annotations

import sys


def main() -> int:
    """
    Main entry point for Linekalk.

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    try:
        from linekalk_pkg.cli import main_entry

        return main_entry(sys.argv[1:])
    except KeyboardInterrupt:
        print("\nInterrupted by user.")
        return 1
    except ImportError as e:
        print(f"Error: Failed to import linekalk_pkg: {e}")
        print("Please ensure all dependencies are installed: pip install -e .")
        return 1


if __name__ == "__main__":
    sys.exit(main())
