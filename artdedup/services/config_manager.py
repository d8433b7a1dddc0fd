import os
import yaml
from pathlib import Path
from string import Template
from typing import Any, Callable, Dict, Mapping, Optional, Tuple
from dotenv import load_dotenv
import structlog
from pydantic import ValidationError

from artdedup.models.config import SimilarityConfig
from artdedup.utils.exceptions import SimilarityConfigurationError

logger = structlog.get_logger()

# Environment variable -> (config section, field, parser)
ENV_OVERRIDES: Dict[str, Tuple[str, str, Callable[[str], Any]]] = {
    "SIMILARITY_THRESHOLD_WARN": ("thresholds", "warn", float),
    "SIMILARITY_THRESHOLD_HIGH": ("thresholds", "high", float),
    "SIMILARITY_WEIGHT_DISTANCE": ("weights", "distance", float),
    "SIMILARITY_WEIGHT_TITLE": ("weights", "title", float),
    "SIMILARITY_WEIGHT_TAGS": ("weights", "tags", float),
    "SIMILARITY_MAX_DISTANCE_METERS": ("distance", "max_distance_meters", float),
    "SIMILARITY_OPTIMAL_DISTANCE_METERS": ("distance", "optimal_distance_meters", float),
    "SIMILARITY_MIN_TITLE_LENGTH": ("title", "min_title_length", int),
}


class ConfigValidationError(SimilarityConfigurationError):
    """Configuration validation failed"""

    pass


class ConfigManager:
    """Builds the similarity configuration at startup

    Sources, lowest precedence first: model defaults, optional YAML file,
    SIMILARITY_* environment variables.
    """

    def __init__(
        self,
        config_path: Optional[str] = None,
        load_env_file: bool = True,
    ):
        self.config_path = Path(config_path) if config_path else None
        self.load_env_file = load_env_file
        self.env_loaded = False
        self._config: Optional[SimilarityConfig] = None

    def load_config(self) -> SimilarityConfig:
        """Load and validate configuration"""
        if self._config:
            return self._config

        # 1. Load environment
        if self.load_env_file and not self.env_loaded:  # pragma: no cover
            load_dotenv()
            self.env_loaded = True

        # 2. Read YAML (optional)
        config_data = self._read_config_file() if self.config_path else {}

        # 3. Apply environment overrides
        config_data = self.apply_env_overrides(config_data, os.environ)

        # 4. Validate with Pydantic
        try:
            self._config = SimilarityConfig(**config_data)
        except ValidationError as e:
            raise ConfigValidationError(f"Invalid similarity configuration: {e}")

        logger.info(
            "similarity_config_loaded",
            source=str(self.config_path) if self.config_path else "defaults",
            warn=self._config.thresholds.warn,
            high=self._config.thresholds.high,
            weights=self._config.weights.model_dump(),
        )
        return self._config

    def _read_config_file(self) -> Dict[str, Any]:
        assert self.config_path is not None

        if not self.config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {self.config_path}")

        try:
            with open(self.config_path, encoding="utf-8") as f:
                raw_content = f.read()
        except OSError as e:
            raise ConfigValidationError(f"Failed to read config file: {e}")

        try:
            # safe_substitute leaves unknown ${VAR} references untouched
            substituted = Template(raw_content).safe_substitute(os.environ)
            config_data = yaml.safe_load(substituted)
        except yaml.YAMLError as e:
            raise ConfigValidationError(f"Failed to parse YAML: {e}")

        if config_data is None:
            return {}
        if not isinstance(config_data, dict):
            raise ConfigValidationError(
                f"Config file must contain a mapping, got {type(config_data).__name__}"
            )

        # Allow the settings to live under a top-level 'similarity' key
        section = config_data.get("similarity", config_data)
        if not isinstance(section, dict):
            raise ConfigValidationError("'similarity' section must be a mapping")
        return section

    @staticmethod
    def apply_env_overrides(
        config_data: Dict[str, Any], environ: Mapping[str, str]
    ) -> Dict[str, Any]:
        """Overlay SIMILARITY_* environment variables onto config data.

        Unparseable values are ignored so the file or default value applies.

        Args:
            config_data: Raw configuration mapping.
            environ: Environment mapping (usually os.environ).

        Returns:
            New mapping with overrides applied.
        """
        merged = {
            key: dict(value) if isinstance(value, dict) else value
            for key, value in config_data.items()
        }

        for env_name, (section, field, parser) in ENV_OVERRIDES.items():
            raw = environ.get(env_name)
            if raw is None or raw.strip() == "":
                continue
            try:
                value = parser(raw.strip())
            except ValueError:
                logger.warning("similarity_env_override_ignored", variable=env_name, value=raw)
                continue
            if not isinstance(merged.get(section), dict):
                merged[section] = {}
            merged[section][field] = value

        return merged
