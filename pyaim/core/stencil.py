"""Spatial neighbourhood stencils for the cell kernel.

A stencil holds the values of one field at a cell and its six
face-adjacent neighbours. Stencils are scratch objects: each sweep unit
allocates its own and refills them for every cell it visits.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np


@dataclass
class Neighborhood:
    """Field values around cell (k, j, i) plus layer thicknesses (m)."""
    center: float = 0.0
    iminus: float = 0.0
    iplus: float = 0.0
    jminus: float = 0.0
    jplus: float = 0.0
    kminus: float = 0.0
    kplus: float = 0.0
    dz_center: float = 1.0
    dz_below: float = 1.0
    dz_above: float = 1.0

    def values(self) -> tuple[float, ...]:
        return (self.center, self.iminus, self.iplus, self.jminus,
                self.jplus, self.kminus, self.kplus)

    def below_threshold(self, threshold: float) -> bool:
        """True when every value in the neighbourhood is under *threshold*."""
        return max(self.values()) < threshold


def fill_neighborhood(c: Neighborhood, field: np.ndarray, dz: np.ndarray,
                      k: int, j: int, i: int) -> None:
    """Populate *c* from *field* around (k, j, i).

    Horizontal edges and the ground mirror the centre cell (no gradient).
    Above the model top the concentration is zero and the thickness of
    the top layer is reused.
    """
    nz, ny, nx = field.shape
    c.center = float(field[k, j, i])
    c.iminus = float(field[k, j, i - 1]) if i > 0 else c.center
    c.iplus = float(field[k, j, i + 1]) if i < nx - 1 else c.center
    c.jminus = float(field[k, j - 1, i]) if j > 0 else c.center
    c.jplus = float(field[k, j + 1, i]) if j < ny - 1 else c.center

    c.dz_center = float(dz[k, j, i])
    if k > 0:
        c.kminus = float(field[k - 1, j, i])
        c.dz_below = float(dz[k - 1, j, i])
    else:
        c.kminus = c.center
        c.dz_below = c.dz_center
    if k < nz - 1:
        c.kplus = float(field[k + 1, j, i])
        c.dz_above = float(dz[k + 1, j, i])
    else:
        c.kplus = 0.0
        c.dz_above = c.dz_center


def fill_k_neighborhood(d: Neighborhood, kz: np.ndarray,
                        k: int, j: int, i: int) -> None:
    """Populate the vertical diffusivity stencil *d* around (k, j, i).

    Only the centre, below and above slots are used. The ground and the
    model top mirror the centre value.
    """
    nz = kz.shape[0]
    d.center = float(kz[k, j, i])
    d.kminus = float(kz[k - 1, j, i]) if k > 0 else d.center
    d.kplus = float(kz[k + 1, j, i]) if k < nz - 1 else d.center
