"""
Configuration management for MixFinder.

Loads and validates a TOML config holding the mix policy, scoring weights
and sequencer options. All numeric parameters are bounded and validated at
load time; boolean switches must be real booleans.
"""

import copy
import os
from pathlib import Path
from typing import Dict, Any, Optional
import toml
import logging

from .generate.scoring import ScoringWeights
from .models import MixConfig

logger = logging.getLogger(__name__)

WEIGHT_SUM_TOLERANCE = 0.01


class ConfigError(Exception):
    """Raised when config validation fails."""
    pass


class Config:
    """Configuration loader and validator."""

    PARAM_BOUNDS = {
        "mix": {
            "bpm_tolerance": (0.0, 20.0),
            "harmonic_matching": bool,
            "same_genre": bool,
            "maintain_energy": bool,
            "allow_half_double_time": bool,
        },
        "weights": {
            "tempo": (0.0, 1.0),
            "key": (0.0, 1.0),
            "energy": (0.0, 1.0),
            "danceability": (0.0, 1.0),
            "genre": (0.0, 1.0),
        },
        "sequencer": {
            "transition_window_seconds": (1.0, 60.0),
        },
    }

    DEFAULT_CONFIG = {
        "config_version": "1.0",
        "mix": {
            "bpm_tolerance": 4.0,
            "harmonic_matching": True,
            "same_genre": True,
            "maintain_energy": True,
            "allow_half_double_time": True,
        },
        "weights": {
            "tempo": 0.3,
            "key": 0.25,
            "energy": 0.2,
            "danceability": 0.15,
            "genre": 0.1,
        },
        "sequencer": {
            "transition_window_seconds": 10.0,
        },
    }

    def __init__(self, config_dict: Dict[str, Any]):
        """Initialize config from dictionary."""
        self.data = config_dict
        self._validate()

    @classmethod
    def defaults(cls) -> "Config":
        return cls(copy.deepcopy(cls.DEFAULT_CONFIG))

    @classmethod
    def load(cls, config_path: Optional[str] = None) -> "Config":
        """
        Load config from TOML file.

        Args:
            config_path: Path to mixfinder.toml. If None, uses MIXFINDER_CONFIG_PATH
                        env var or defaults to configs/mixfinder.toml.

        Returns:
            Config instance.

        Raises:
            ConfigError: If config is invalid or unreadable.
        """
        if config_path is None:
            config_path = os.getenv("MIXFINDER_CONFIG_PATH", "configs/mixfinder.toml")

        config_path = Path(config_path)

        if not config_path.exists():
            logger.warning(f"Config file not found: {config_path}. Using defaults.")
            return cls.defaults()

        try:
            config_dict = toml.load(config_path)
        except (toml.TomlDecodeError, UnicodeDecodeError, OSError) as e:
            raise ConfigError(f"Failed to load config from {config_path}: {e}") from e

        logger.info(f"Loaded config from {config_path}")
        return cls(config_dict)

    def _validate(self) -> None:
        """
        Validate all config parameters against PARAM_BOUNDS.

        Raises:
            ConfigError: If any parameter is out of bounds or of the wrong type.
        """
        for section, params in self.PARAM_BOUNDS.items():
            if section not in self.data:
                logger.warning(f"Missing config section: {section}. Using defaults.")
                self.data[section] = dict(self.DEFAULT_CONFIG[section])
                continue

            section_data = self.data[section]
            if not isinstance(section_data, dict):
                raise ConfigError(f"Config section [{section}] must be a table")

            for param, bounds in params.items():
                if param not in section_data:
                    default_val = self.DEFAULT_CONFIG[section][param]
                    logger.warning(f"Missing param {section}.{param}. Using default: {default_val}")
                    section_data[param] = default_val
                    continue

                value = section_data[param]

                if bounds is bool:
                    if not isinstance(value, bool):
                        raise ConfigError(f"Parameter {section}.{param}={value!r} must be true or false")
                    continue

                if isinstance(value, bool) or not isinstance(value, (int, float)):
                    raise ConfigError(f"Parameter {section}.{param}={value!r} must be a number")

                min_val, max_val = bounds
                if not (min_val <= value <= max_val):
                    raise ConfigError(
                        f"Parameter {section}.{param}={value} out of bounds "
                        f"[{min_val}, {max_val}]"
                    )

        total = self.weights().total
        if abs(total - 1.0) > WEIGHT_SUM_TOLERANCE:
            logger.warning(f"Scoring weights sum to {total:.3f}, not 1.0; overall scores will be clamped")

        logger.info("✅ Config validation passed")

    def mix_config(self) -> MixConfig:
        """Mix policy from the [mix] section."""
        mix = self["mix"]
        return MixConfig(
            bpm_tolerance=float(mix["bpm_tolerance"]),
            harmonic_matching=mix["harmonic_matching"],
            same_genre=mix["same_genre"],
            maintain_energy=mix["maintain_energy"],
            allow_half_double_time=mix["allow_half_double_time"],
        )

    def weights(self) -> ScoringWeights:
        """Scoring weights from the [weights] section."""
        weights = self["weights"]
        return ScoringWeights(
            tempo=float(weights["tempo"]),
            key=float(weights["key"]),
            energy=float(weights["energy"]),
            danceability=float(weights["danceability"]),
            genre=float(weights["genre"]),
        )

    @property
    def transition_window_seconds(self) -> float:
        return float(self.get("sequencer", "transition_window_seconds", 10.0))

    def get(self, section: str, param: str, default: Any = None) -> Any:
        """Get a config parameter safely."""
        return self.data.get(section, {}).get(param, default)

    def __getitem__(self, section: str) -> Dict[str, Any]:
        """Allow dict-like access: config["mix"]"""
        return self.data.get(section, {})

    def __repr__(self) -> str:
        version = self.data.get('config_version', 'unknown')
        return f"Config(version={version})"
