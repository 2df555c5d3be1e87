"""PhysicsClosures — the physical processes seen by the cell kernel.

Bundles advection, diffusion, settling, VOC oxidation, wet deposition and
chemical partitioning behind one object bound to a grid and its
meteorology. Subclasses may override any method; the kernel only relies
on the signatures below. All methods are safe to call concurrently: the
two in-place methods touch only the cell vector they are given.
"""

from __future__ import annotations

import logging
from typing import Optional

import numpy as np

from pyaim.core.models import GridGeometry, MetData, SimulationConfig
from pyaim.core.species import PARTITION_PAIRS
from pyaim.core.stencil import Neighborhood
from pyaim.physics import chemistry, deposition, transport

logger = logging.getLogger(__name__)


class PhysicsClosures:
    """Physical closures over one grid.

    Parameters
    ----------
    geometry : GridGeometry
        Model grid.
    met : MetData
        Meteorological fields (precipitation and partition fractions are
        read here).
    config : SimulationConfig or None
        Closure parameters; defaults to ``SimulationConfig()``.
    """

    def __init__(
        self,
        geometry: GridGeometry,
        met: MetData,
        config: Optional[SimulationConfig] = None,
    ) -> None:
        self.geometry = geometry
        self.met = met
        self.config = config or SimulationConfig()

        self.v_settling = deposition.gravitational_settling(
            self.config.particle_diameter, self.config.particle_density
        )
        self._partition_fields = tuple(
            (gas, particle, field)
            for (gas, particle), field in zip(PARTITION_PAIRS, (
                met.org_partitioning,
                met.nh_partitioning,
                met.s_partitioning,
                met.no_partitioning,
            ))
        )
        logger.debug(
            "Closures: v_settling=%.3g m/s, voc_oxidation_rate=%.3g 1/s",
            self.v_settling, self.config.voc_oxidation_rate,
        )

    # ------------------------------------------------------------------
    # Per-species tendencies
    # ------------------------------------------------------------------

    def advective_flux(self, c: Neighborhood, u: float, u_next: float,
                       v: float, v_next: float, w: float,
                       w_next: float) -> tuple[float, float, float]:
        return transport.advective_flux(
            c, self.geometry.dx, self.geometry.dy, u, u_next, v, v_next, w, w_next
        )

    def diffusive_flux(self, c: Neighborhood, d: Neighborhood) -> float:
        return transport.diffusive_flux(c, d)

    def gravitational_settling(self, c: Neighborhood, k: int) -> float:
        return deposition.settling_flux(c, self.v_settling)

    def voc_oxidation_flux(self, c: Neighborhood) -> float:
        return chemistry.voc_oxidation_flux(c, self.config.voc_oxidation_rate)

    # ------------------------------------------------------------------
    # Whole-cell processes (in place)
    # ------------------------------------------------------------------

    def wet_deposition(self, cell: np.ndarray, k: int, j: int, i: int) -> None:
        if not self.config.wet_deposition or self.met.precip is None:
            return
        scav = deposition.below_cloud_scavenging(
            float(self.met.precip[j, i]),
            a=self.config.scavenging_a,
            b=self.config.scavenging_b,
        )
        deposition.apply_wet_deposition(cell, scav, self.geometry.dt)

    def chemical_partitioning(self, cell: np.ndarray, k: int, j: int, i: int) -> None:
        if not self.config.chemical_partitioning:
            return
        chemistry.partition(cell, (
            (gas, particle, None if field is None else float(field[k, j, i]))
            for gas, particle, field in self._partition_fields
        ))
