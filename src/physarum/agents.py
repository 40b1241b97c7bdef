"""
agents.py

Agent store and spawning.

Agents are held as a structure of arrays (species id, x/y position, heading)
so the agent kernel can update them in place with one worker per agent.
Population size is fixed once spawned.

Spawn patterns:
  - 'random' : uniform over the whole field
  - 'circle' : uniform inside a disc centred on the field; a radius of 0.5
               touches the sides
Species are assigned round robin (agent i belongs to species i % num_species).
"""
import logging

import numpy as np

from physarum.angle_utils import TWO_PI, wrap_heading
from physarum.config import SPAWN_PATTERNS
from physarum.errors import InvalidConfiguration

logger = logging.getLogger(__name__)


class AgentStore:
    """Species ids, positions (N, 2) and headings (N,) of every agent."""

    def __init__(self, species, position, heading):
        self.species = np.ascontiguousarray(species, dtype=np.int64)
        self.position = np.ascontiguousarray(position, dtype=np.float64)
        self.heading = np.ascontiguousarray(heading, dtype=np.float64)
        n = self.species.shape[0]
        if self.position.shape != (n, 2) or self.heading.shape != (n,):
            raise InvalidConfiguration(
                f'agent arrays disagree: species {self.species.shape}, '
                f'position {self.position.shape}, heading {self.heading.shape}')
        if not (np.all(np.isfinite(self.position)) and np.all(np.isfinite(self.heading))):
            raise InvalidConfiguration('agent positions and headings must be finite')

    def __len__(self):
        return int(self.species.shape[0])

    def in_bounds(self, resolution: int) -> bool:
        p = self.position
        return bool(np.all((p >= 0.0) & (p < resolution)))


def _wrap_positions(position, resolution):
    position = np.mod(position, resolution)
    position[position >= resolution] = 0.0
    return position


def spawn_agents(num_agents, num_species, resolution, pattern='random', seed=None, radius=0.5) -> AgentStore:
    """Create `num_agents` agents with random positions and headings.

    Raises `InvalidConfiguration` for non-positive counts or resolution, or an
    unknown spawn pattern.
    """
    if num_agents <= 0:
        raise InvalidConfiguration(f'num_agents must be positive, got {num_agents}')
    if num_species <= 0:
        raise InvalidConfiguration(f'num_species must be positive, got {num_species}')
    if resolution <= 0:
        raise InvalidConfiguration(f'resolution must be positive, got {resolution}')
    if pattern not in SPAWN_PATTERNS:
        raise InvalidConfiguration(f'unknown spawn pattern {pattern!r}; expected one of {SPAWN_PATTERNS}')

    n = int(num_agents)
    rng = np.random.default_rng(seed)
    species = np.arange(n, dtype=np.int64) % int(num_species)

    if pattern == 'random':
        position = rng.uniform(0.0, resolution, (n, 2))
    else:
        # sqrt of a uniform radius gives uniform density over the disc
        r = np.sqrt(rng.uniform(0.0, 1.0, n)) * radius * resolution
        theta = rng.uniform(0.0, TWO_PI, n)
        centre = 0.5 * resolution
        position = np.column_stack([centre + r * np.cos(theta), centre + r * np.sin(theta)])

    position = _wrap_positions(position, float(resolution))
    heading = wrap_heading(rng.uniform(0.0, TWO_PI, n))
    logger.debug('spawned %d agents (%s pattern) over %d species', n, pattern, num_species)
    return AgentStore(species, position, heading)
