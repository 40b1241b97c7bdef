"""Error and warning types raised by the simulation.

Only `InvalidConfiguration` is fatal. The warnings mark conditions that are
recovered locally and never leave a non-finite value behind.
"""


class InvalidConfiguration(ValueError):
    """Counts, resolution or ranges that must prevent the simulation from starting."""


class DegenerateRange(UserWarning):
    """An attribute range with min == max was used as a remap source."""


class StaleRemap(UserWarning):
    """A remap was requested without a previous Settings snapshot."""
