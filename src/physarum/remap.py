"""Live rescaling of species attributes when the configured ranges change.

Each value keeps its relative position within its attribute's range:

    t  = (v - old.min) / (old.max - old.min)
    v' = new.min + t * (new.max - new.min)

Values outside the old range extrapolate; nothing is clamped. A degenerate old
range (min == max) has no relative position, so t = 0 is used and the value
lands on the new minimum. The sensor size is remapped from its integer value
and floored again afterwards.
"""
import logging
import warnings
from typing import Optional

import numpy as np

from physarum.config import REMAPPABLE_ATTRIBUTES
from physarum.errors import DegenerateRange, StaleRemap
from physarum.settings import AttributeRange, Settings
from physarum.species import SpeciesTable

logger = logging.getLogger(__name__)


def relative_position(value, old_range: AttributeRange):
    """Position of `value` within `old_range` (0 at min, 1 at max).

    Returns zeros for a degenerate range.
    """
    v = np.asarray(value, dtype=float)
    lo, hi = old_range
    if hi == lo:
        return np.zeros_like(v)
    return (v - lo) / (hi - lo)


def remap_value(value, old_range: AttributeRange, new_range: AttributeRange):
    """Map `value` from its relative position in `old_range` onto `new_range`.

    Accepts scalars or numpy arrays; returns same-shaped output.
    """
    t = relative_position(value, old_range)
    lo, hi = new_range
    return lo + t * (hi - lo)


def remap_species(table: SpeciesTable, old_settings: Optional[Settings], new_settings: Settings) -> SpeciesTable:
    """Rescale every remappable attribute of `table` in place and return it.

    Colors are left untouched. Without an old snapshot there is nothing to be
    relative to, so the call is a no-op that emits `StaleRemap`.
    """
    if old_settings is None:
        warnings.warn('no previous settings snapshot; species left unchanged', StaleRemap, stacklevel=2)
        logger.info('remap skipped: no previous settings snapshot')
        return table

    for name in REMAPPABLE_ATTRIBUTES:
        old_range = old_settings[name]
        new_range = new_settings[name]
        if old_range == new_range:
            continue
        if old_range.degenerate:
            warnings.warn(f'{name}: old range {tuple(old_range)} is degenerate; '
                          f'values moved to new minimum {new_range.min}', DegenerateRange, stacklevel=2)
        remapped = remap_value(table.values[name], old_range, new_range)
        bad = ~np.isfinite(remapped)
        if np.any(bad):
            logger.warning('%s: %d remapped values overflowed; set to new minimum %s',
                           name, int(bad.sum()), new_range.min)
            remapped[bad] = new_range.min
        if name == 'sensor_size':
            remapped = np.floor(remapped)
        table.values[name][:] = remapped
        logger.debug('remapped %s: %s -> %s', name, tuple(old_range), tuple(new_range))
    return table
