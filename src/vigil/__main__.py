"""CLI entry point for vigil."""

import sys


def main() -> int:
    """Main entry point for the vigil CLI."""
    from vigil.cli import run_cli

    return run_cli(sys.argv[1:])


if __name__ == "__main__":
    sys.exit(main())
