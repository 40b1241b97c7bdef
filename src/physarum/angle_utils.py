"""Small utilities for heading normalisation.

Keep these pure numpy so spawning and tests can use them without touching the
compiled kernels. The agent kernel carries a scalar twin of `wrap_heading`.
"""
import math
import numpy as np

TWO_PI = 2.0 * math.pi


def wrap_heading(x):
    """Wrap radians to [0, 2*pi).

    Accepts scalars or numpy arrays; returns same-shaped output.
    """
    x_arr = np.mod(np.asarray(x, dtype=float), TWO_PI)
    # mod of a tiny negative number can round up to exactly 2*pi
    return np.where(x_arr >= TWO_PI, 0.0, x_arr)


def heading_diff_rad(target, heading):
    """Signed shortest rotation (target - heading) wrapped to [-pi, pi).

    Works with scalars or array-like inputs. Returns numpy array.
    """
    diff = np.asarray(target, dtype=float) - np.asarray(heading, dtype=float)
    return (diff + math.pi) % TWO_PI - math.pi
