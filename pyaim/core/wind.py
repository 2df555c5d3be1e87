"""Wind-bin sampling.

Winds are supplied as a small set of speed bins per cell face with a
cumulative frequency for each bin. Each iteration draws one uniform
random number; every face then uses the first bin whose cumulative
frequency reaches that number, so the same draw is shared across the
whole domain for one time step.
"""

from __future__ import annotations

from typing import Optional

import numpy as np


def get_bin(freq: np.ndarray, bins: np.ndarray, k: int, j: int, i: int,
            rand: float) -> float:
    """Wind value at face (k, j, i) for the random draw *rand*.

    Parameters
    ----------
    freq : np.ndarray
        Cumulative bin frequencies, shape (nbins, ...).
    bins : np.ndarray
        Bin wind values (m/s), same shape as *freq*.
    k, j, i : int
        Face indices.
    rand : float
        Uniform random number in [0, 1).

    Returns
    -------
    float
        Value of the selected bin; the last bin when no cumulative
        frequency reaches *rand*.
    """
    nbins = bins.shape[0]
    b = 0
    while b < nbins - 1 and rand > freq[b, k, j, i]:
        b += 1
    return float(bins[b, k, j, i])


class WindSampler:
    """Draws the per-iteration random number used by :func:`get_bin`.

    Parameters
    ----------
    seed : int or None
        Seed for the underlying ``numpy.random.Generator``.
    """

    def __init__(self, seed: Optional[int] = None) -> None:
        self._rng = np.random.default_rng(seed)

    def new_rand(self) -> float:
        return float(self._rng.random())
