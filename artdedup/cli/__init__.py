"""ARTDEDUP CLI Package.

Command-line interface for the artwork similarity engine.

Usage:
    python -m artdedup.cli check submission.json --config similarity.yaml
    python -m artdedup.cli validate similarity.yaml
"""

import typer

from artdedup.cli.check import check_command
from artdedup.cli.validate import validate_command

# Create main app
app = typer.Typer(help="ARTDEDUP: artwork duplicate detection")

app.command(name="check")(check_command)
app.command(name="validate")(validate_command)

__all__ = [
    "app",
    "check_command",
    "validate_command",
]
