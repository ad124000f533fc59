"""Main entry point for DeskSort.

This allows the package to be run as:
    python -m desksort
"""

from .cli.main import cli

if __name__ == "__main__":
    cli()
