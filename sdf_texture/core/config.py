"""
SDF Configuration - Generation settings and validation
"""

import math
import numbers
from dataclasses import dataclass, asdict
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from .fill import FillMode


# Soft limits from the editor sliders (not enforced by the core)
INSIDE_DISTANCE_RANGE: Tuple[float, float] = (0.0, 32.0)
OUTSIDE_DISTANCE_RANGE: Tuple[float, float] = (0.0, 32.0)
POST_PROCESS_RANGE: Tuple[float, float] = (0.0, 4.0)

DEFAULT_INSIDE_DISTANCE = 8.0
DEFAULT_OUTSIDE_DISTANCE = 8.0
DEFAULT_POST_PROCESS_DISTANCE = 0.0


class InvalidConfiguration(ValueError):
    """Raised before generation starts when settings or input size are unusable"""


class DistanceMethod(Enum):
    """How the nearest boundary pixel is located"""
    BRUTE_FORCE = "brute"   # Full-image search, exact
    EDT = "edt"             # Euclidean distance transform, exact and fast

    @classmethod
    def parse(cls, value: Any) -> 'DistanceMethod':
        """Accept a member, its value or its name (case-insensitive)"""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().lower()
            for method in cls:
                if key in (method.value, method.name.lower()):
                    return method
        raise InvalidConfiguration(f"Unknown distance method: {value!r}")


@dataclass
class SDFConfig:
    """Settings for one SDF generation run"""
    fill_mode: FillMode = FillMode.SOLID_WHITE
    inside_distance: float = DEFAULT_INSIDE_DISTANCE      # Pixels until SDF reaches 1
    outside_distance: float = DEFAULT_OUTSIDE_DISTANCE    # Pixels until SDF reaches 0
    post_process_distance: float = DEFAULT_POST_PROCESS_DISTANCE  # Edge refinement radius, 0 = off
    method: DistanceMethod = DistanceMethod.BRUTE_FORCE
    workers: Optional[int] = None   # Threads for the brute-force search (None = auto)

    def __post_init__(self):
        try:
            self.fill_mode = FillMode.parse(self.fill_mode)
        except ValueError as e:
            raise InvalidConfiguration(str(e)) from e
        self.method = DistanceMethod.parse(self.method)

    def validate(self) -> 'SDFConfig':
        """
        Check the distance settings.

        Raises:
            InvalidConfiguration: if a distance is non-positive or not finite,
                the post-process radius is negative, or workers < 1
        """
        check_distance('inside_distance', self.inside_distance)
        check_distance('outside_distance', self.outside_distance)

        radius = self.post_process_distance
        if not _is_number(radius) or not math.isfinite(radius) or radius < 0:
            raise InvalidConfiguration(f"post_process_distance must be >= 0, got {radius!r}")

        if self.workers is not None and (not isinstance(self.workers, numbers.Integral) or self.workers < 1):
            raise InvalidConfiguration(f"workers must be a positive integer, got {self.workers!r}")

        return self

    def with_overrides(self, **overrides) -> 'SDFConfig':
        """Copy with the given fields replaced (None values are ignored)"""
        unknown = set(overrides) - {f.name for f in self.__dataclass_fields__.values()}
        if unknown:
            raise TypeError(f"Unknown SDFConfig fields: {', '.join(sorted(unknown))}")

        data = self.to_dict()
        data.update({k: v for k, v in overrides.items() if v is not None})
        return SDFConfig.from_dict(data)

    def to_dict(self) -> Dict[str, Any]:
        """Plain dictionary with enums stored by value"""
        data = asdict(self)
        data['fill_mode'] = self.fill_mode.value
        data['method'] = self.method.value
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SDFConfig':
        """Create from dictionary, ignoring unknown keys"""
        valid_fields = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in data.items() if k in valid_fields}
        return cls(**filtered)


def _is_number(value: Any) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def check_distance(name: str, value: Any) -> None:
    """Raise InvalidConfiguration unless value is a finite number > 0"""
    if not _is_number(value) or not math.isfinite(value) or value <= 0:
        raise InvalidConfiguration(f"{name} must be a positive number, got {value!r}")
