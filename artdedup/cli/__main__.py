"""CLI entry point.

Allows running the CLI as a module: python -m artdedup.cli
"""

from artdedup.cli import app

if __name__ == "__main__":
    app()
