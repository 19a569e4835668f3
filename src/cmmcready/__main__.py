"""
Entry point for running cmmcready as a module.

Usage:
    python -m cmmcready [command] [options]
"""

from cmmcready.cli import main

if __name__ == "__main__":
    main()
