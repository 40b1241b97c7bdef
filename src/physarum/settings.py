"""Attribute ranges that drive species generation and live remapping.

A `Settings` value is immutable. Configuration edits build a new one and hand
it to `Simulation.update_settings`, which keeps the outgoing value long enough
for the remapper to compute relative positions.
"""
import json
import logging
import math
from dataclasses import dataclass, field
from typing import Dict, Mapping, NamedTuple, Optional

from physarum.config import ANGLE_ADJUSTMENT_WEIGHT, REMAPPABLE_ATTRIBUTES, SPECIES_RANGES
from physarum.errors import InvalidConfiguration

logger = logging.getLogger(__name__)


class AttributeRange(NamedTuple):
    min: float
    max: float

    @property
    def span(self) -> float:
        return self.max - self.min

    @property
    def degenerate(self) -> bool:
        return self.max == self.min


def _coerce_range(name: str, value) -> AttributeRange:
    try:
        lo, hi = value
        rng = AttributeRange(float(lo), float(hi))
    except (TypeError, ValueError) as e:
        raise InvalidConfiguration(f'{name}: expected a (min, max) pair, got {value!r}') from e
    if not (math.isfinite(rng.min) and math.isfinite(rng.max)):
        raise InvalidConfiguration(f'{name}: range bounds must be finite, got {rng}')
    if rng.max < rng.min:
        raise InvalidConfiguration(f'{name}: max ({rng.max}) is below min ({rng.min})')
    if not math.isfinite(rng.span):
        raise InvalidConfiguration(f'{name}: range span overflows, got {rng}')
    return rng


@dataclass(frozen=True)
class Settings:
    """Per-attribute (min, max) ranges plus the global angle-adjustment weight.

    Missing attributes take their defaults from `config.SPECIES_RANGES`.
    Unknown attribute names raise `InvalidConfiguration`.
    """
    ranges: Mapping[str, AttributeRange] = field(default_factory=dict)
    angle_adjustment_weight: float = ANGLE_ADJUSTMENT_WEIGHT

    def __post_init__(self):
        unknown = set(self.ranges) - set(REMAPPABLE_ATTRIBUTES)
        if unknown:
            raise InvalidConfiguration(f'unknown species attributes: {sorted(unknown)}')
        merged: Dict[str, AttributeRange] = {}
        for name in REMAPPABLE_ATTRIBUTES:
            merged[name] = _coerce_range(name, self.ranges.get(name, SPECIES_RANGES[name]))
        weight = float(self.angle_adjustment_weight)
        if not math.isfinite(weight):
            raise InvalidConfiguration(f'angle_adjustment_weight must be finite, got {weight}')
        object.__setattr__(self, 'ranges', merged)
        object.__setattr__(self, 'angle_adjustment_weight', weight)

    def __getitem__(self, name: str) -> AttributeRange:
        return self.ranges[name]

    def replace(self, angle_adjustment_weight: Optional[float] = None, **ranges) -> 'Settings':
        """Return a new Settings with the given ranges swapped in."""
        merged = dict(self.ranges)
        merged.update(ranges)
        weight = self.angle_adjustment_weight if angle_adjustment_weight is None else angle_adjustment_weight
        return Settings(ranges=merged, angle_adjustment_weight=weight)

    def to_dict(self):
        """Export settings as a plain dictionary for saving."""
        out = {name: [rng.min, rng.max] for name, rng in self.ranges.items()}
        out['angle_adjustment_weight'] = self.angle_adjustment_weight
        return out

    @classmethod
    def from_dict(cls, data) -> 'Settings':
        """Build settings from a dictionary as produced by `to_dict`."""
        data = dict(data)
        weight = data.pop('angle_adjustment_weight', ANGLE_ADJUSTMENT_WEIGHT)
        return cls(ranges=data, angle_adjustment_weight=weight)

    def save(self, filepath):
        """Save settings to a JSON file."""
        with open(filepath, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)
        logger.info('Saved settings to %s', filepath)

    @classmethod
    def load(cls, filepath) -> 'Settings':
        """Load settings from a JSON file."""
        with open(filepath, 'r') as f:
            data = json.load(f)
        logger.info('Loaded settings from %s', filepath)
        return cls.from_dict(data)
