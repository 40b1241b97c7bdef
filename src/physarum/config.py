# -*- coding: utf-8 -*-

"""
physarum/config.py

This module centralizes the default parameters for the multi-species slime mold
simulation. Keeping field, population and species-range defaults in one place
keeps the stepper, the species generator and the remapper consistent.

Contents:
---------
1. SIMULATION:
   - Field resolution, population size, number of species, seed and spawn pattern.

2. FIELD:
   - Trail deposit, saturation, diffusion radius and evaporation rate.

3. SPECIES_RANGES:
   - Default (min, max) for every species attribute that can be remapped live.
   - Angles are in radians, distances in pixels, speeds in pixels (or radians)
     per second.

4. ANGLE_ADJUSTMENT_WEIGHT:
   - Global pull (0..1) of agent headings toward an optional angle field.

Usage:
------
    from physarum.config import SIMULATION, FIELD, SPECIES_RANGES

If you later decide to read these values from a YAML file, update this module
to load from external sources instead of hard-coding them.
"""
import numpy as np

# ───────────────────────────────────────────────────────────────────────────────
# 1) POPULATION AND FIELD SIZE
# ───────────────────────────────────────────────────────────────────────────────
SIMULATION = {
    'resolution': 512,          # field is resolution x resolution pixels
    'num_agents': 65536,        # fixed for the lifetime of the simulation
    'num_species': 5,           # colors are spread evenly around the hue wheel
    'seed': 0,                  # drives species generation, spawning and jitter
    'spawn_pattern': 'circle',  # 'circle' or 'random'
    'spawn_radius': 0.5,        # circle radius as a fraction of resolution (0.5 touches the sides)
}

# ───────────────────────────────────────────────────────────────────────────────
# 2) TRAIL FIELD
# ───────────────────────────────────────────────────────────────────────────────
FIELD = {
    'deposit_amount': 1.0,      # intensity added per agent per tick
    'max_intensity': 1.0,       # deposits saturate here
    'blur_radius': 1,           # box half-width of each separable blur pass (px)
    'evaporate_speed': 0.5,     # fraction of intensity lost per second
}

# ───────────────────────────────────────────────────────────────────────────────
# 3) SPECIES ATTRIBUTE RANGES (min, max)
# ───────────────────────────────────────────────────────────────────────────────
SPECIES_RANGES = {
    'sensor_size': (0.0, 2.0),                          # px radius, floored
    'sensor_angle': (np.radians(15.0), np.radians(60.0)),
    'sensor_distance': (5.0, 30.0),                     # px
    'move_speed': (20.0, 60.0),                         # px/s
    'turn_speed': (2.0, 8.0),                           # rad/s
    'flow_speed': (0.0, 0.0),                           # scale of the optional flow field
    'intentional_turn_weight': (0.5, 1.0),              # fraction of the steering turn applied
    'random_turn_weight': (0.0, 1.0),                   # rad/s of random heading jitter
}

# order matters: it is the column order of the packed species attribute matrix
REMAPPABLE_ATTRIBUTES = tuple(SPECIES_RANGES.keys())

# ───────────────────────────────────────────────────────────────────────────────
# 4) GLOBAL STEERING
# ───────────────────────────────────────────────────────────────────────────────
ANGLE_ADJUSTMENT_WEIGHT = 0.0

SPAWN_PATTERNS = ('random', 'circle')
