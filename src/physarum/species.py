"""Species table: per-species sensing/movement attributes and display colors.

The table is stored as a structure of arrays (one float64 array per attribute)
so it can be packed straight into the agent kernel. `sensor_size` is an
integer pixel radius, held floored in a float64 column.
"""
import logging
import math
from dataclasses import dataclass
from typing import Dict, List

import numpy as np
from matplotlib.colors import hsv_to_rgb

from physarum.config import REMAPPABLE_ATTRIBUTES
from physarum.errors import InvalidConfiguration
from physarum.settings import Settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Species:
    """Snapshot of one row of the species table."""
    index: int
    sensor_size: int
    sensor_angle: float
    sensor_distance: float
    move_speed: float
    turn_speed: float
    flow_speed: float
    intentional_turn_weight: float
    random_turn_weight: float
    color: tuple
    inverse_color: tuple


def species_colors(num_species: int):
    """Return (color, inverse_color) arrays of shape (num_species, 4).

    Hues are evenly spaced at i / num_species with full saturation and value.
    """
    hues = np.arange(num_species, dtype=float) / float(num_species)
    hsv = np.column_stack([hues, np.ones(num_species), np.ones(num_species)])
    rgb = hsv_to_rgb(hsv)
    color = np.column_stack([rgb, np.ones(num_species)])
    inverse = 1.0 - color
    return color, inverse


class SpeciesTable:
    """Per-species attributes, mutated only by generation and the remapper."""

    def __init__(self, values: Dict[str, np.ndarray], color: np.ndarray, inverse_color: np.ndarray):
        n = int(color.shape[0])
        self.index = np.arange(n, dtype=np.int64)
        self.values = {}
        for name in REMAPPABLE_ATTRIBUTES:
            arr = np.asarray(values[name], dtype=np.float64)
            if arr.shape != (n,):
                raise ValueError(f'{name} must have shape ({n},), got {arr.shape}')
            self.values[name] = arr.copy()
        self.values['sensor_size'] = np.floor(self.values['sensor_size'])
        self.color = np.asarray(color, dtype=np.float64)
        self.inverse_color = np.asarray(inverse_color, dtype=np.float64)

    def __len__(self):
        return int(self.index.shape[0])

    def __getitem__(self, i) -> Species:
        row = {name: float(self.values[name][i]) for name in REMAPPABLE_ATTRIBUTES}
        row['sensor_size'] = int(self.sensor_size[i])
        return Species(index=int(self.index[i]),
                       color=tuple(self.color[i]),
                       inverse_color=tuple(self.inverse_color[i]),
                       **row)

    def records(self) -> List[Species]:
        return [self[i] for i in range(len(self))]

    @property
    def sensor_size(self) -> np.ndarray:
        """Integer pixel radius used for sensing."""
        return np.floor(self.values['sensor_size']).astype(np.int64)

    def packed(self) -> np.ndarray:
        """Attributes as a contiguous (num_species, n_attributes) matrix for the kernels.

        Column order follows `config.REMAPPABLE_ATTRIBUTES`.
        """
        cols = [self.values[name] for name in REMAPPABLE_ATTRIBUTES]
        return np.ascontiguousarray(np.column_stack(cols), dtype=np.float64)

    def sanitize(self, settings: Settings) -> int:
        """Replace non-finite attribute values by their range minimum.

        Returns the number of values replaced.
        """
        replaced = 0
        for name in REMAPPABLE_ATTRIBUTES:
            arr = self.values[name]
            bad = ~np.isfinite(arr)
            if np.any(bad):
                arr[bad] = math.floor(settings[name].min) if name == 'sensor_size' else settings[name].min
                replaced += int(bad.sum())
                logger.warning('species attribute %s had %d non-finite values; reset to %s',
                               name, int(bad.sum()), settings[name].min)
        return replaced


def generate_species(num_species: int, settings: Settings, seed=None) -> SpeciesTable:
    """Create `num_species` species with attributes sampled within `settings`.

    Every attribute is drawn uniformly in its (min, max) range; the sensor size
    is floored. Colors are evenly spaced around the hue wheel.
    Deterministic for a fixed seed.
    """
    if int(num_species) != num_species or num_species <= 0:
        raise InvalidConfiguration(f'num_species must be a positive integer, got {num_species!r}')
    num_species = int(num_species)
    rng = np.random.default_rng(seed)
    values = {}
    for name in REMAPPABLE_ATTRIBUTES:
        lo, hi = settings[name]
        values[name] = rng.uniform(lo, hi, num_species)
    color, inverse = species_colors(num_species)
    logger.debug('generated %d species (seed=%s)', num_species, seed)
    return SpeciesTable(values, color, inverse)
