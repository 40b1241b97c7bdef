"""Double-buffered trail field.

`current` holds the latest state: the agent pass senses it and deposits into
it, and the display reads it. `scratch` is the target of each diffuse pass;
after a pass the two swap roles.

Deposits are additive. Every agent contributes its amount to its cell,
overlapping agents add up, and the total saturates at `max_intensity`.
"""
import logging

import numpy as np

from physarum.errors import InvalidConfiguration

logger = logging.getLogger(__name__)


class FieldStore:
    def __init__(self, resolution: int):
        if int(resolution) != resolution or resolution <= 0:
            raise InvalidConfiguration(f'resolution must be a positive integer, got {resolution!r}')
        self.resolution = int(resolution)
        self._buffers = [np.zeros((self.resolution, self.resolution), dtype=np.float64),
                         np.zeros((self.resolution, self.resolution), dtype=np.float64)]
        self._current = 0

    @property
    def shape(self):
        return (self.resolution, self.resolution)

    @property
    def current(self) -> np.ndarray:
        return self._buffers[self._current]

    @property
    def scratch(self) -> np.ndarray:
        return self._buffers[1 - self._current]

    def swap(self):
        self._current = 1 - self._current

    def view(self) -> np.ndarray:
        """Read-only view of the current buffer for display."""
        v = self.current.view()
        v.flags.writeable = False
        return v

    def deposit(self, cells: np.ndarray, amount: float, max_intensity: float):
        """Add `amount` at every flat cell index in `cells`, then saturate.

        Repeated indices accumulate; the order of `cells` does not matter.
        """
        buf = self.current
        counts = np.bincount(cells, minlength=buf.size).reshape(buf.shape)
        buf += counts * amount
        np.minimum(buf, max_intensity, out=buf)
