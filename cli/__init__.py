"""
Command line interface for chatstore.

Forwards execution to the Typer application defined in `cli.commands`.
"""

from .commands import app


def main() -> None:
    """Entry point for the ``chatstore`` console script."""
    app()


if __name__ == "__main__":
    main()
