"""
Configuration for conversion heuristics.

The converter's data-quality gates (missing-data tolerance, level caps,
imbalance ratio, minimum sizes) are heuristics, kept here as named constants
that callers can override per call or load from a YAML/JSON file shared across
a pipeline.
"""

import json
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Mapping

import yaml

__all__ = [
    'ConversionThresholds',
    'DEFAULT_THRESHOLDS',
    'load_config',
    'thresholds_from_config',
]


@dataclass(frozen=True)
class ConversionThresholds:
    """
    Data-quality thresholds applied by to_mixomics().

    Attributes:
        max_missing_fraction: Fraction of NaN assay cells tolerated (with a
            warning) before conversion fails
        max_levels: Response levels above which a warning is emitted
        min_group_size: Observations per level below which a warning is emitted
        max_imbalance_ratio: Largest/smallest level size above which a warning
            is emitted (only with more than two levels)
        min_observations: Fewer observations than this is fatal
        min_features: Fewer features than this is fatal
        min_obs_feature_ratio: Observation/feature ratio below which an
            overfitting warning is emitted ...
        high_dimension_features: ... provided there are more features than this
    """
    max_missing_fraction: float = 0.10
    max_levels: int = 10
    min_group_size: int = 3
    max_imbalance_ratio: float = 5.0
    min_observations: int = 3
    min_features: int = 2
    min_obs_feature_ratio: float = 0.1
    high_dimension_features: int = 100

    def __post_init__(self):
        if not 0.0 <= self.max_missing_fraction <= 1.0:
            raise ValueError(
                f"max_missing_fraction must be in [0, 1], got {self.max_missing_fraction}"
            )
        for name in ('max_levels', 'min_group_size', 'min_observations', 'min_features'):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                raise ValueError(f"{name} must be a positive integer, got {value!r}")
        if self.high_dimension_features < 0:
            raise ValueError(
                f"high_dimension_features must be non-negative, got {self.high_dimension_features}"
            )
        if self.max_imbalance_ratio < 1.0:
            raise ValueError(
                f"max_imbalance_ratio must be >= 1, got {self.max_imbalance_ratio}"
            )
        if self.min_obs_feature_ratio < 0.0:
            raise ValueError(
                f"min_obs_feature_ratio must be non-negative, got {self.min_obs_feature_ratio}"
            )


DEFAULT_THRESHOLDS = ConversionThresholds()


def load_config(config_path: Path) -> Dict[str, Any]:
    """
    Load configuration from YAML or JSON file.

    Parameters:
        config_path: Path to config file (.yaml, .yml, or .json)

    Returns:
        Dictionary with configuration values

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If file format is unsupported or invalid

    Examples:
        >>> config = load_config(Path("conversion.yaml"))
        >>> thresholds = thresholds_from_config(config)
    """
    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    suffix = config_path.suffix.lower()
    if suffix not in ('.yaml', '.yml', '.json'):
        raise ValueError(
            f"Unsupported config format: {suffix}. "
            f"Use .yaml, .yml, or .json"
        )

    try:
        with open(config_path, 'r') as f:
            if suffix == '.json':
                config = json.load(f)
            else:
                config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in config file: {e}")
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in config file: {e}")

    if config is None:
        return {}

    if not isinstance(config, dict):
        raise ValueError("Config file must contain a dictionary/mapping at top level")

    return config


def thresholds_from_config(config: Mapping[str, Any]) -> ConversionThresholds:
    """
    Build ConversionThresholds from a config mapping.

    Values may sit at the top level or under a ``thresholds:`` section.
    Keys not given keep their defaults.

    Raises:
        ValueError: If the mapping names an unknown threshold or a value is
            out of range
    """
    section = config.get('thresholds', config)
    if not isinstance(section, Mapping):
        raise ValueError("'thresholds' section must be a mapping")

    valid = {f.name for f in fields(ConversionThresholds)}
    unknown = sorted(set(section) - valid)
    if unknown:
        raise ValueError(
            f"Unknown threshold(s): {', '.join(unknown)}. "
            f"Valid keys: {', '.join(sorted(valid))}"
        )
    return ConversionThresholds(**section)
