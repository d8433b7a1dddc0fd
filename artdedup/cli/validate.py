"""Validate command for similarity configuration.

Validates configuration file syntax and invariants, then prints the
effective settings (file values merged with SIMILARITY_* overrides).
"""

from pathlib import Path
from typing import Optional

import typer

from artdedup.services.config_manager import ConfigManager
from artdedup.cli.utils import handle_errors, display_success, display_error, display_info


@handle_errors
def validate_command(
    config_path: Optional[Path] = typer.Argument(None, help="Config file to validate"),
):
    """Validate similarity configuration."""
    try:
        manager = ConfigManager(config_path=str(config_path) if config_path else None)
        config = manager.load_config()
    except Exception as e:
        display_error(f"Validation failed: {e}")
        raise typer.Exit(code=1)

    display_success("Configuration is valid! ✅")
    display_info(
        f"Thresholds: warn={config.thresholds.warn} high={config.thresholds.high}"
    )
    display_info(
        f"Weights: distance={config.weights.distance} "
        f"title={config.weights.title} tags={config.weights.tags}"
    )
    display_info(
        f"Distance: optimal={config.distance.optimal_distance_meters}m "
        f"max={config.distance.max_distance_meters}m"
    )
    display_info(f"Minimum title length: {config.title.min_title_length}")
