"""Chemical closures: VOC oxidation and gas-particle partitioning."""

from __future__ import annotations

from typing import Iterable, Optional

import numpy as np

from pyaim.core.species import Species
from pyaim.core.stencil import Neighborhood


def voc_oxidation_flux(c: Neighborhood, rate: float) -> float:
    """First-order loss of gaseous organic matter (per second)."""
    return -rate * c.center


def partition(
    cell: np.ndarray,
    pairs: Iterable[tuple[Species, Species, Optional[float]]],
) -> None:
    """Redistribute each gas/particle pair to its equilibrium split.

    Parameters
    ----------
    cell : np.ndarray
        The nine species values of one cell, modified in place.
    pairs : iterable of (gas, particle, fraction)
        Particle-phase mass fraction for each pair; pairs whose fraction
        is None are left untouched.
    """
    for gas, particle, fraction in pairs:
        if fraction is None:
            continue
        total = cell[gas] + cell[particle]
        cell[particle] = total * fraction
        cell[gas] = total - cell[particle]
