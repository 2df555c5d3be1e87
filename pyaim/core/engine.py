"""TimeIntegrationEngine — main simulation driver for pyaim.

Assembles the emission injector, cell kernel, concurrent sweep and
convergence tracker and runs the outer time loop until every species has
reached a steady state and the minimum simulated period has elapsed.

References:
    Tessum, C.W., Hill, J.D. & Marshall, J.D. (2017) PLOS ONE,
    "InMAP: A model for air pollution interventions".
"""

from __future__ import annotations

import logging
from typing import Iterator, Mapping, Optional

import numpy as np

from pyaim.compute.parallel import ConcurrentSweep
from pyaim.core.convergence import ConvergenceTracker
from pyaim.core.emissions import EmissionInjector
from pyaim.core.kernel import CellUpdateKernel, compute_threshold
from pyaim.core.models import (
    EngineStatus,
    GridGeometry,
    MetData,
    RunState,
    SimulationConfig,
)
from pyaim.core.output import assemble_output
from pyaim.core.species import N_SPECIES, Species
from pyaim.core.wind import WindSampler
from pyaim.physics.closures import PhysicsClosures

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 86400.0


class TimeIntegrationEngine:
    """Steady-state air quality simulation engine.

    Each iteration:
        emission injection → significance threshold → concurrent sweep
        → convergence check → terminate or swap buffers

    The run stops only when every species has converged *and* more than
    ``config.days_to_run`` simulated days have elapsed.

    Parameters
    ----------
    geometry : GridGeometry
        Model grid.
    met : MetData
        Wind bins, diffusivity and other meteorological fields.
    config : SimulationConfig or None
        Engine and closure parameters.
    closures : PhysicsClosures or None
        Physical closures. If *None*, built from *geometry*, *met* and
        *config*.
    """

    def __init__(
        self,
        geometry: GridGeometry,
        met: MetData,
        config: Optional[SimulationConfig] = None,
        closures: Optional[PhysicsClosures] = None,
    ) -> None:
        met.validate(geometry)
        self.geometry = geometry
        self.met = met
        self.config = config or SimulationConfig()

        # --- Assemble components ---
        self.closures = closures or PhysicsClosures(geometry, met, self.config)
        self.injector = EmissionInjector(geometry)
        self.kernel = CellUpdateKernel(geometry, met, self.closures)
        self.sweep = ConcurrentSweep(self.kernel, num_workers=self.config.num_workers)

        logger.info(
            "Grid %d×%d×%d, dt=%.0f s, run for at least %.4g days",
            geometry.nx, geometry.ny, geometry.nz, geometry.dt,
            self.config.days_to_run,
        )

    # ------------------------------------------------------------------
    # Run state
    # ------------------------------------------------------------------

    def new_state(self) -> RunState:
        """Fresh, all-zero state for one run."""
        shape = self.geometry.shape
        return RunState(
            initial=[np.zeros(shape) for _ in range(N_SPECIES)],
            final=[np.zeros(shape) for _ in range(N_SPECIES)],
            convergence=ConvergenceTracker(),
        )

    def _advance_buffers(self, state: RunState) -> None:
        """Copies of the end-of-step fields become the next start-of-step fields.

        Arrays already handed out as ``state.final`` are never written again.
        """
        state.initial = [arr.copy() for arr in state.final]
        state.final = [np.zeros(self.geometry.shape) for _ in range(N_SPECIES)]

    # ------------------------------------------------------------------
    # Iteration
    # ------------------------------------------------------------------

    def step(
        self,
        state: RunState,
        fluxes: Mapping[Species, np.ndarray],
        sampler: WindSampler,
    ) -> RunState:
        """Advance *state* by one time step.

        Parameters
        ----------
        state : RunState
            Current run state, modified in place.
        fluxes : mapping
            Per-species emission increments from
            :meth:`EmissionInjector.flux`.
        sampler : WindSampler
            Source of the per-iteration wind-bin draw.

        Returns
        -------
        RunState
            *state*, with ``status`` set to CONVERGED_AND_ELIGIBLE when
            the run may stop.
        """
        if state.status is not EngineStatus.RUNNING:
            raise RuntimeError(f"Cannot step a run in state {state.status.value}")
        if state.iteration > 0:
            self._advance_buffers(state)

        state.iteration += 1
        state.days_run += self.geometry.dt / SECONDS_PER_DAY
        logger.info("Iteration %d; day %.5g", state.iteration, state.days_run)

        self.injector.inject(state.initial, fluxes)
        state.rand = sampler.new_rand()
        state.threshold = compute_threshold(state.initial, self.config.threshold_factor)

        self.sweep.run(state.initial, state.final, state.threshold, state.rand)

        all_converged = state.convergence.update(state.final)
        state.sums = list(state.convergence.old_sums)
        if all_converged and state.days_run > self.config.days_to_run:
            state.status = EngineStatus.CONVERGED_AND_ELIGIBLE
        return state

    def iterate(self, emissions: Mapping[str, np.ndarray]) -> Iterator[RunState]:
        """Yield the run state after every iteration until termination.

        Emission names are validated immediately, before the first
        iteration.

        Raises
        ------
        UnknownPollutantError
            If *emissions* contains an unrecognised pollutant.
        """
        fluxes = self.injector.flux(emissions)
        return self._iterate(fluxes)

    def _iterate(self, fluxes: Mapping[Species, np.ndarray]) -> Iterator[RunState]:
        sampler = WindSampler(self.config.seed)
        state = self.new_state()
        while True:
            self.step(state, fluxes, sampler)
            yield state
            if state.status is not EngineStatus.RUNNING:
                return

    def run(self, emissions: Mapping[str, np.ndarray]) -> dict[str, np.ndarray]:
        """Run the model to steady state.

        Parameters
        ----------
        emissions : mapping
            Emission rate arrays (μg/s), shape (nz, ny, nx), keyed by
            ``VOC``, ``NOx``, ``NH3``, ``SOx`` or ``PM2_5``.

        Returns
        -------
        dict[str, np.ndarray]
            Concentrations (μg/m³) keyed by output pollutant name.

        Raises
        ------
        UnknownPollutantError
            If *emissions* contains an unrecognised pollutant; no
            iteration is run.
        """
        state: Optional[RunState] = None
        for state in self.iterate(emissions):
            pass
        output = self.output(state)
        state.status = EngineStatus.TERMINATED
        logger.info(
            "Finished after %d iterations (%.5g simulated days)",
            state.iteration, state.days_run,
        )
        for species, total in zip(Species, state.sums):
            logger.debug("%s: domain total %.4g", species.label, total)
        return output

    @staticmethod
    def output(state: RunState) -> dict[str, np.ndarray]:
        """Output pollutant fields from the latest end-of-step state."""
        return assemble_output(state.final)
