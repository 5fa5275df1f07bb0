"""CLI entry point for mdtail."""

import sys


def main() -> int:
    """Main entry point for the mdtail CLI."""
    from mdtail.cli import run_cli

    return run_cli(sys.argv[1:])


if __name__ == "__main__":
    sys.exit(main())
