"""
simulation.py

This module defines the Simulation class for the multi-species slime mold model.
It owns the whole simulation context (settings, species table, agents and the
double-buffered trail field) and advances it one tick at a time by dispatching
kernels through a kernel executor.

Core Responsibilities:
----------------------
1. Setup:
   • Validate population, species count and field resolution (InvalidConfiguration).
   • Generate the species table from the current Settings and spawn the agents.

2. Time-Stepping (`step`):
   • Sanitise the tick inputs (delta time, species attributes).
   • Pass A - agent kernel: sense, steer, jitter, move, wrap; then accumulate deposits.
   • Pass B - diffuse kernel twice (blur along x with evaporation, then along y).
   • Pass C - swap the field buffers after every diffuse pass.

3. Live Reconfiguration (`update_settings`):
   • Snapshot the outgoing Settings, remap every species attribute to the new
     ranges, then install the new Settings. Agents and field are untouched.

Usage Example:
--------------
    from physarum.simulation import Simulation

    sim = Simulation(resolution=256, num_agents=20000, num_species=3, seed=7)
    for _ in range(100):
        sim.step(1.0 / 60.0)
    sim.update_settings(sim.settings.replace(move_speed=(40.0, 120.0)))
    frame = sim.field_view()

Notes:
------
– Defaults for every argument live in physarum/config.py.
– Settings edits must happen between ticks; the class is not thread-safe.
"""
import logging
import math
import sys

import numpy as np

from physarum.agents import AgentStore, spawn_agents
from physarum.config import FIELD, SIMULATION
from physarum.errors import InvalidConfiguration
from physarum.executor import NumbaExecutor
from physarum.field import FieldStore
from physarum.kernels import agent_update_kernel, diffuse_kernel, empty_angle_field, empty_flow, hash_u32
from physarum.remap import remap_species
from physarum.settings import Settings
from physarum.species import SpeciesTable, generate_species

log = logging.getLogger("physarum")
if not log.handlers:                                    # avoid dupes on re-import
    h = logging.StreamHandler(sys.stdout)
    h.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
    log.addHandler(h)
    log.setLevel(logging.INFO)

logger = logging.getLogger(__name__)


def _positive_int(name, value):
    try:
        ok = int(value) == value and value > 0
    except (TypeError, ValueError):
        ok = False
    if not ok:
        raise InvalidConfiguration(f'{name} must be a positive integer, got {value!r}')
    return int(value)


def _finite(name, value, minimum=None):
    try:
        v = float(value)
    except (TypeError, ValueError) as e:
        raise InvalidConfiguration(f'{name} must be a number, got {value!r}') from e
    if not math.isfinite(v) or (minimum is not None and v < minimum):
        raise InvalidConfiguration(f'{name} must be finite and >= {minimum}, got {value!r}')
    return v


class Simulation:
    def __init__(
        self,
        resolution=None,
        num_agents=None,
        num_species=None,
        settings=None,
        seed=None,
        spawn_pattern=None,
        spawn_radius=None,
        deposit_amount=None,
        max_intensity=None,
        blur_radius=None,
        evaporate_speed=None,
        flow_field=None,
        angle_field=None,
        executor=None,
        agents=None,
        species=None,
    ):
        """
        Build the simulation context.

        Parameters:
        ----------
        resolution : int
            Field edge length in pixels.
        num_agents, num_species : int
            Population size and species count. Ignored when `agents` / `species`
            are supplied directly.
        settings : Settings or dict, optional
            Attribute ranges; defaults from config.SPECIES_RANGES.
        seed : int, optional
            Drives species generation, spawning and heading jitter.
        flow_field : ndarray (resolution, resolution, 2), optional
            Per-cell displacement added to agents, scaled by species flow_speed.
        angle_field : ndarray (resolution, resolution), optional
            Per-cell target heading; agents turn toward it by
            settings.angle_adjustment_weight.
        executor : KernelExecutor, optional
            Defaults to NumbaExecutor.
        agents : AgentStore, optional
        species : SpeciesTable, optional
        """
        self.resolution = _positive_int('resolution', SIMULATION['resolution'] if resolution is None else resolution)
        self.seed = int(SIMULATION['seed'] if seed is None else seed)
        if self.seed < 0:
            raise InvalidConfiguration(f'seed must be non-negative, got {self.seed}')
        if settings is None:
            settings = Settings()
        elif not isinstance(settings, Settings):
            settings = Settings.from_dict(settings)
        self.settings = settings
        self.previous_settings = None

        self.deposit_amount = _finite('deposit_amount', FIELD['deposit_amount'] if deposit_amount is None else deposit_amount)
        self.max_intensity = _finite('max_intensity', FIELD['max_intensity'] if max_intensity is None else max_intensity, 0.0)
        self.evaporate_speed = _finite('evaporate_speed', FIELD['evaporate_speed'] if evaporate_speed is None else evaporate_speed, 0.0)
        radius = FIELD['blur_radius'] if blur_radius is None else blur_radius
        if int(radius) != radius or radius < 0:
            raise InvalidConfiguration(f'blur_radius must be a non-negative integer, got {radius!r}')
        self.blur_radius = int(radius)

        species_seed, spawn_seed = np.random.SeedSequence(self.seed).spawn(2)
        if species is None:
            n_species = _positive_int('num_species', SIMULATION['num_species'] if num_species is None else num_species)
            species = generate_species(n_species, self.settings, species_seed)
        elif not isinstance(species, SpeciesTable) or len(species) == 0:
            raise InvalidConfiguration('species must be a non-empty SpeciesTable')
        self.species = species

        if agents is None:
            agents = spawn_agents(
                _positive_int('num_agents', SIMULATION['num_agents'] if num_agents is None else num_agents),
                len(self.species),
                self.resolution,
                pattern=SIMULATION['spawn_pattern'] if spawn_pattern is None else spawn_pattern,
                seed=spawn_seed,
                radius=SIMULATION['spawn_radius'] if spawn_radius is None else spawn_radius,
            )
        elif not isinstance(agents, AgentStore) or len(agents) == 0:
            raise InvalidConfiguration('agents must be a non-empty AgentStore')
        if np.any((agents.species < 0) | (agents.species >= len(self.species))):
            raise InvalidConfiguration('agent species ids must index the species table')
        if not agents.in_bounds(self.resolution):
            raise InvalidConfiguration('agent positions must lie within the field')
        self.agents = agents

        self.flow_field = self._check_field('flow_field', flow_field, (self.resolution, self.resolution, 2), empty_flow())
        self.angle_field = self._check_field('angle_field', angle_field, (self.resolution, self.resolution), empty_angle_field())

        self.field = FieldStore(self.resolution)
        self.executor = NumbaExecutor() if executor is None else executor
        self._deposit_cells = np.zeros(len(self.agents), dtype=np.int64)
        self.tick = 0
        self.elapsed_time = 0.0
        logger.info('simulation ready: %dx%d field, %d agents, %d species, executor=%s',
                    self.resolution, self.resolution, len(self.agents), len(self.species), self.executor.name)

    @staticmethod
    def _check_field(name, arr, shape, empty):
        if arr is None:
            return empty
        arr = np.ascontiguousarray(arr, dtype=np.float64)
        if arr.shape != shape:
            raise InvalidConfiguration(f'{name} must have shape {shape}, got {arr.shape}')
        if not np.all(np.isfinite(arr)):
            raise InvalidConfiguration(f'{name} must be finite')
        return arr

    # ── per-tick passes ──────────────────────────────────────────────────────

    def _sanitize_dt(self, delta_time):
        try:
            dt = float(delta_time)
        except (TypeError, ValueError):
            dt = float('nan')
        if not math.isfinite(dt) or dt < 0.0:
            logger.warning('tick %d: invalid delta_time %r treated as 0', self.tick, delta_time)
            return 0.0
        return dt

    def agent_pass(self, dt):
        """Pass A: update every agent, then accumulate their deposits into the current buffer."""
        salt = int(hash_u32((self.seed * 7919 + self.tick) & 0xFFFFFFFF))
        self.executor.dispatch(
            agent_update_kernel, len(self.agents),
            self.agents.species, self.agents.position, self.agents.heading,
            self.species.packed(), self.field.current, self.flow_field, self.angle_field,
            self.settings.angle_adjustment_weight, float(dt), salt, self._deposit_cells,
        )
        self.field.deposit(self._deposit_cells, self.deposit_amount, self.max_intensity)

    def diffuse_pass(self, axis, decay):
        """One diffuse kernel over the current buffer into scratch, then swap (Pass B + C)."""
        self.executor.dispatch(
            diffuse_kernel, self.resolution * self.resolution,
            self.field.current, self.field.scratch, self.blur_radius, int(axis), float(decay),
        )
        self.field.swap()

    def step(self, delta_time, elapsed_time=None):
        """Advance the simulation by one tick of `delta_time` seconds."""
        dt = self._sanitize_dt(delta_time)
        self.species.sanitize(self.settings)

        self.agent_pass(dt)
        decay = max(0.0, 1.0 - self.evaporate_speed * dt)
        self.diffuse_pass(axis=1, decay=decay)
        self.diffuse_pass(axis=0, decay=1.0)

        self.tick += 1
        try:
            elapsed = float(elapsed_time)
        except (TypeError, ValueError):
            elapsed = float('nan')
        if math.isfinite(elapsed):
            self.elapsed_time = elapsed
        else:
            self.elapsed_time += dt

    def run(self, n_steps, delta_time, writer=None, log_every=1):
        """Run `n_steps` ticks of `delta_time`; optionally snapshot every `log_every` ticks."""
        log_every = _positive_int('log_every', log_every)
        for _ in range(int(n_steps)):
            self.step(delta_time)
            if writer is not None and self.tick % log_every == 0:
                writer.append(self.tick, self.snapshot(), elapsed_time=self.elapsed_time)
        logger.info('ran %d ticks; elapsed %.3f s', int(n_steps), self.elapsed_time)

    # ── configuration and outputs ────────────────────────────────────────────

    def update_settings(self, new_settings):
        """Install new attribute ranges, remapping every species to keep its relative position."""
        if not isinstance(new_settings, Settings):
            new_settings = Settings.from_dict(new_settings)
        old = self.settings
        remap_species(self.species, old, new_settings)
        self.previous_settings = old
        self.settings = new_settings
        logger.info('settings updated at tick %d', self.tick)

    def field_view(self):
        """Read-only view of the latest trail field."""
        return self.field.view()

    def snapshot(self):
        return {
            'field': self.field.current.copy(),
            'position': self.agents.position.copy(),
            'heading': self.agents.heading.copy(),
            'species': self.agents.species.copy(),
        }
