"""
Complex arithmetic helpers.

Amplitudes are plain Python ``complex`` / numpy ``complex128`` values, which
already provide addition, multiplication and conjugation. This module adds
the few derived quantities the simulator needs, vectorized over arrays.
"""

from __future__ import annotations

import numpy as np
from numpy import ndarray

Amplitudes = ndarray
"""1-D complex128 array of length 2^n."""


def magnitude_squared(z: complex | ndarray) -> float | ndarray:
    """|z|^2 without a square root; works element-wise on arrays."""
    if isinstance(z, ndarray):
        return z.real * z.real + z.imag * z.imag
    z = complex(z)
    return z.real * z.real + z.imag * z.imag


def total_probability(amplitudes: Amplitudes) -> float:
    """Sum of |a_i|^2 over all amplitudes."""
    return float(np.sum(magnitude_squared(amplitudes)))


def is_normalized(amplitudes: Amplitudes, tol: float = 1e-9) -> bool:
    """True if the amplitudes describe a unit vector within ``tol``."""
    return abs(total_probability(amplitudes) - 1.0) <= tol


def as_amplitudes(values) -> Amplitudes:
    """Copy ``values`` into a fresh contiguous complex128 array."""
    return np.array(values, dtype=np.complex128).reshape(-1)
