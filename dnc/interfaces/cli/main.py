"""Entry point for the dnc CLI.

Usage:
    python -m dnc.interfaces.cli.main

Or via installed entry point:
    dnc <command>
"""

from dnc.interfaces.cli import app


def main() -> None:
    """Run the dnc CLI application."""
    app()


if __name__ == "__main__":
    main()
