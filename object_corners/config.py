"""
Configuration for the corner detection pipeline.

Values come from the dataclass defaults, optionally overridden by environment
variables (a ``.env`` file is loaded first) and then by explicit arguments.
"""

import os
from dataclasses import dataclass, fields, replace
from typing import Any, Optional

from dotenv import load_dotenv

from .errors import ContourPreconditionError

ENV_PREFIX = 'OBJECT_CORNERS_'

_TRUE_VALUES = ('1', 'true', 'yes', 'on')


@dataclass
class PipelineConfig:
    """
    Parameters of detect_object_corners

    With morphology_strength=0 a straight streak one pixel wide and at least 10
    pixels long stays an object of its own; tracing it goes out and back along the
    streak, exceeds the tracer step limit and raises ContourInvariantError, which
    aborts the whole image. Raise min_object_area above the streak size to drop
    such objects before tracing.
    """
    border_percentile: float = 90.0  # percentile of border intensities taken as background level
    threshold_ratio: float = 1.5  # foreground threshold = ratio * background level
    morphology_strength: int = 3  # radius of the square dilation/erosion kernel
    corner_count: int = 4
    min_object_area: int = 0  # objects with fewer pixels are dropped
    fill_holes: bool = True
    debug_dir: Optional[str] = None
    random_seed: int = 2391  # colours of the side visualization

    def validate(self) -> 'PipelineConfig':
        if not 0.0 <= self.border_percentile <= 100.0:
            raise ContourPreconditionError(
                f'border_percentile must be within [0, 100], got {self.border_percentile}'
            )
        if self.threshold_ratio <= 0:
            raise ContourPreconditionError(
                f'threshold_ratio must be positive, got {self.threshold_ratio}'
            )
        if self.morphology_strength < 0:
            raise ContourPreconditionError(
                f'morphology_strength must be non-negative, got {self.morphology_strength}'
            )
        if self.corner_count < 2:
            raise ContourPreconditionError(
                f'corner_count must be at least 2, got {self.corner_count}'
            )
        if self.min_object_area < 0:
            raise ContourPreconditionError(
                f'min_object_area must be non-negative, got {self.min_object_area}'
            )
        return self

    def with_overrides(self, **overrides: Any) -> 'PipelineConfig':
        """Return a copy with every non-None override applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes).validate()

    @classmethod
    def from_env(cls, dotenv_path: Optional[str] = None) -> 'PipelineConfig':
        """
        Build a configuration from ``OBJECT_CORNERS_*`` environment variables.

        Args:
            dotenv_path: Optional .env file; by default python-dotenv searches for one

        Returns:
            PipelineConfig: Validated configuration
        """
        load_dotenv(dotenv_path)

        values = {}
        for f in fields(cls):
            raw = os.getenv(ENV_PREFIX + f.name.upper())
            if raw is None or raw == '':
                continue
            values[f.name] = _parse_value(f.name, f.default, raw)
        return cls(**values).validate()


def _parse_value(name: str, default: Any, raw: str) -> Any:
    try:
        if isinstance(default, bool):
            return raw.strip().lower() in _TRUE_VALUES
        if isinstance(default, int):
            return int(raw)
        if isinstance(default, float):
            return float(raw)
    except ValueError as e:
        raise ContourPreconditionError(
            f'Invalid value for {ENV_PREFIX}{name.upper()}: {raw!r}'
        ) from e
    return raw
