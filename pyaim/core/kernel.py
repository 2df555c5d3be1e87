"""CellUpdateKernel — advances one grid cell by one time step.

For each species the kernel gathers the concentration stencil around the
cell, adds the transport and chemistry tendencies from the physical
closures, and then applies the whole-cell processes (wet deposition and
chemical partitioning) before writing the cell into the end-of-step
fields. Only start-of-step values are read, so cells can be updated in
any order.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Sequence

import numpy as np

from pyaim.core.models import GridGeometry, MetData
from pyaim.core.species import N_SPECIES, Species
from pyaim.core.stencil import Neighborhood, fill_k_neighborhood, fill_neighborhood
from pyaim.core.wind import get_bin

if TYPE_CHECKING:
    from pyaim.physics.closures import PhysicsClosures


@dataclass
class KernelScratch:
    """Private per-unit buffers: stencils and the per-cell species vector."""
    c: Neighborhood = field(default_factory=Neighborhood)
    d: Neighborhood = field(default_factory=Neighborhood)
    cell: np.ndarray = field(default_factory=lambda: np.zeros(N_SPECIES))


def compute_threshold(initial: Sequence[np.ndarray], factor: float) -> float:
    """Minimum concentration considered significant for this step.

    The largest value across all species fields times *factor*; never
    negative.
    """
    peak = 0.0
    for arr in initial:
        peak = max(peak, float(arr.max()))
    return peak * factor


class CellUpdateKernel:
    """Computes end-of-step values for single cells.

    Parameters
    ----------
    geometry : GridGeometry
        Model grid (Δz and Δt are read here).
    met : MetData
        Wind bins and vertical diffusivity.
    closures : PhysicsClosures
        Physical process closures.
    """

    def __init__(self, geometry: GridGeometry, met: MetData,
                 closures: PhysicsClosures) -> None:
        self.geometry = geometry
        self.met = met
        self.closures = closures

    def update_cell(
        self,
        initial: Sequence[np.ndarray],
        final: Sequence[np.ndarray],
        k: int,
        j: int,
        i: int,
        threshold: float,
        rand: float,
        scratch: KernelScratch,
    ) -> None:
        """Write the next value of every species at (k, j, i) into *final*.

        A species whose whole neighbourhood is below *threshold* skips
        transport and chemistry and carries its start-of-step value; wet
        deposition and partitioning still act on the full cell vector.
        """
        met = self.met
        closures = self.closures
        dt = self.geometry.dt
        c, d, cell = scratch.c, scratch.d, scratch.cell

        u = get_bin(met.u_freq, met.u_bins, k, j, i, rand)
        u_next = get_bin(met.u_freq, met.u_bins, k, j, i + 1, rand)
        v = get_bin(met.v_freq, met.v_bins, k, j, i, rand)
        v_next = get_bin(met.v_freq, met.v_bins, k, j + 1, i, rand)
        w = get_bin(met.w_freq, met.w_bins, k, j, i, rand)
        w_next = get_bin(met.w_freq, met.w_bins, k + 1, j, i, rand)
        fill_k_neighborhood(d, met.kz, k, j, i)

        for q in Species:
            fill_neighborhood(c, initial[q], self.geometry.dz, k, j, i)
            if c.below_threshold(threshold):
                cell[q] = c.center
                continue
            zdiff = closures.diffusive_flux(c, d)
            xadv, yadv, zadv = closures.advective_flux(c, u, u_next, v, v_next, w, w_next)

            grav_settling = 0.0
            voc_oxidation = 0.0
            if q.is_particulate:
                grav_settling = closures.gravitational_settling(c, k)
            elif q == Species.G_ORG:
                voc_oxidation = closures.voc_oxidation_flux(c)

            cell[q] = c.center + dt * (
                xadv + yadv + zadv + grav_settling + voc_oxidation + zdiff
            )

        closures.wet_deposition(cell, k, j, i)
        closures.chemical_partitioning(cell, k, j, i)

        for q, arr in enumerate(final):
            arr[k, j, i] = cell[q]

    def update_slice(
        self,
        initial: Sequence[np.ndarray],
        final: Sequence[np.ndarray],
        i: int,
        threshold: float,
        rand: float,
    ) -> int:
        """Update every interior cell of east-west slice *i*.

        Returns the number of cells written.
        """
        nz, ny, _ = self.geometry.shape
        scratch = KernelScratch()
        n = 0
        for j in range(1, ny - 1):
            for k in range(nz):
                self.update_cell(initial, final, k, j, i, threshold, rand, scratch)
                n += 1
        return n
