"""Data-parallel kernels for the agent update and the trail diffusion.

Each kernel is a numba ``njit(parallel=True)`` function whose outer ``prange``
loop is the kernel domain: one iteration per agent, or one per field row with
an inner loop over the row's cells. Workers never read each other's writes:

- the agent kernel senses the field read-only and writes only its own agent
  slot plus its own entry of `deposit_cells`; the deposits are accumulated by
  the caller after the kernel returns.
- the diffuse kernel reads `src` and writes `dst`, never the same buffer.

Random heading jitter comes from a stateless integer hash of the agent index
and a per-tick salt, so results do not depend on thread scheduling.
"""
import math

import numpy as np
from numba import njit, prange

from physarum.config import REMAPPABLE_ATTRIBUTES

# columns of the packed species matrix (SpeciesTable.packed)
SENSOR_SIZE = REMAPPABLE_ATTRIBUTES.index('sensor_size')
SENSOR_ANGLE = REMAPPABLE_ATTRIBUTES.index('sensor_angle')
SENSOR_DISTANCE = REMAPPABLE_ATTRIBUTES.index('sensor_distance')
MOVE_SPEED = REMAPPABLE_ATTRIBUTES.index('move_speed')
TURN_SPEED = REMAPPABLE_ATTRIBUTES.index('turn_speed')
FLOW_SPEED = REMAPPABLE_ATTRIBUTES.index('flow_speed')
INTENTIONAL_TURN_WEIGHT = REMAPPABLE_ATTRIBUTES.index('intentional_turn_weight')
RANDOM_TURN_WEIGHT = REMAPPABLE_ATTRIBUTES.index('random_turn_weight')

TWO_PI = 2.0 * math.pi
U32_MAX = 4294967295.0


@njit(cache=True)
def hash_u32(state):
    """Integer hash on the low 32 bits; the masks keep it identical in Python and numba."""
    state = (state ^ 2747636419) & 0xFFFFFFFF
    state = (state * 2654435769) & 0xFFFFFFFF
    state = (state ^ (state >> 16)) & 0xFFFFFFFF
    state = (state * 2654435769) & 0xFFFFFFFF
    state = (state ^ (state >> 16)) & 0xFFFFFFFF
    state = (state * 2654435769) & 0xFFFFFFFF
    return state


@njit(cache=True)
def sense(field, x, y, angle, distance, size):
    """Sum of the field over the (2*size+1)^2 square `distance` ahead along `angle`.

    Sample coordinates wrap around the field edges.
    """
    res_y, res_x = field.shape
    cx = int(math.floor(x + math.cos(angle) * distance))
    cy = int(math.floor(y + math.sin(angle) * distance))
    total = 0.0
    for oy in range(-size, size + 1):
        sy = (cy + oy) % res_y
        for ox in range(-size, size + 1):
            sx = (cx + ox) % res_x
            total += field[sy, sx]
    return total


@njit(cache=True)
def steer(heading, forward, left, right, turn):
    """Turn toward the strictly strongest side reading; ties keep the heading."""
    if left > forward and left > right:
        return heading + turn
    if right > forward and right > left:
        return heading - turn
    return heading


@njit(parallel=True, cache=True)
def agent_update_kernel(species_ids, position, heading, attrs, field, flow, angle_field,
                        angle_weight, dt, salt, deposit_cells):
    """Sense, steer, jitter, move and wrap every agent; record its deposit cell.

    `flow` is (H, W, 2) or empty, `angle_field` is (H, W) or empty.
    `deposit_cells` receives the flat field index of each agent's new cell.
    """
    n = species_ids.shape[0]
    res_y, res_x = field.shape
    use_flow = flow.shape[0] > 0
    use_angle = angle_field.shape[0] > 0
    for i in prange(n):
        s = species_ids[i]
        size = int(attrs[s, SENSOR_SIZE])
        sensor_angle = attrs[s, SENSOR_ANGLE]
        distance = attrs[s, SENSOR_DISTANCE]
        x = position[i, 0]
        y = position[i, 1]
        h = heading[i]

        forward = sense(field, x, y, h, distance, size)
        left = sense(field, x, y, h + sensor_angle, distance, size)
        right = sense(field, x, y, h - sensor_angle, distance, size)

        weight = min(max(attrs[s, INTENTIONAL_TURN_WEIGHT], 0.0), 1.0)
        h = steer(h, forward, left, right, attrs[s, TURN_SPEED] * dt * weight)

        # prange indices can be unsigned; mixing uint64 with int64 would promote to float
        u = hash_u32((np.int64(i) + salt) & 0xFFFFFFFF) / U32_MAX
        h += (2.0 * u - 1.0) * attrs[s, RANDOM_TURN_WEIGHT] * dt

        cell_x = int(x) % res_x
        cell_y = int(y) % res_y
        if use_angle:
            diff = (angle_field[cell_y, cell_x] - h + math.pi) % TWO_PI - math.pi
            h += diff * angle_weight

        step = attrs[s, MOVE_SPEED] * dt
        vx = math.cos(h) * step
        vy = math.sin(h) * step
        if use_flow:
            fs = attrs[s, FLOW_SPEED] * dt
            vx += flow[cell_y, cell_x, 0] * fs
            vy += flow[cell_y, cell_x, 1] * fs

        nx = (x + vx) % res_x
        ny = (y + vy) % res_y
        if nx >= res_x:
            nx = 0.0
        if ny >= res_y:
            ny = 0.0
        h = h % TWO_PI
        if h >= TWO_PI:
            h = 0.0

        position[i, 0] = nx
        position[i, 1] = ny
        heading[i] = h
        deposit_cells[i] = int(ny) * res_x + int(nx)


@njit(parallel=True, cache=True)
def diffuse_kernel(src, dst, radius, axis, decay):
    """One separable box-blur pass of `src` into `dst`, scaled by `decay`.

    axis=1 blurs along x (within rows), axis=0 along y. Neighbours wrap around
    the edges. Results are floored at zero.
    """
    res_y, res_x = src.shape
    width = 2 * radius + 1
    for row in prange(res_y):
        for col in range(res_x):
            total = 0.0
            for k in range(-radius, radius + 1):
                if axis == 1:
                    total += src[row, (col + k) % res_x]
                else:
                    total += src[(row + k) % res_y, col]
            value = total / width * decay
            dst[row, col] = value if value > 0.0 else 0.0


def empty_flow():
    return np.zeros((0, 0, 2), dtype=np.float64)


def empty_angle_field():
    return np.zeros((0, 0), dtype=np.float64)


def warmup():
    """Compile every kernel on a tiny problem so the first real tick is not a JIT stall."""
    field = np.zeros((4, 4), dtype=np.float64)
    scratch = np.zeros_like(field)
    attrs = np.ones((1, len(REMAPPABLE_ATTRIBUTES)), dtype=np.float64)
    species = np.zeros(2, dtype=np.int64)
    position = np.ones((2, 2), dtype=np.float64)
    heading = np.zeros(2, dtype=np.float64)
    cells = np.zeros(2, dtype=np.int64)
    agent_update_kernel(species, position, heading, attrs, field, empty_flow(), empty_angle_field(),
                        0.0, 0.1, 0, cells)
    diffuse_kernel(field, scratch, 1, 1, 1.0)
