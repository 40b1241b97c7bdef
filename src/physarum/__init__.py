"""Multi-species slime mold (physarum) trail simulation."""
from physarum.errors import DegenerateRange, InvalidConfiguration, StaleRemap
from physarum.settings import AttributeRange, Settings
from physarum.simulation import Simulation

__version__ = "0.1.0"
