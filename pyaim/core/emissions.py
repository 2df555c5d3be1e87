"""Emission injection.

Converts surface emission rates (μg/s per cell) into per-species
concentration increments (μg/m³ per time step) and adds them to the
start-of-step concentration fields.
"""

from __future__ import annotations

import logging
from typing import Mapping

import numpy as np

from pyaim.core.models import GridGeometry, GridShapeError
from pyaim.core.species import EMISSION_TABLE, Species, validate_emission_names

logger = logging.getLogger(__name__)


def calc_emis_flux(geometry: GridGeometry, rate: np.ndarray,
                   scale: float) -> np.ndarray:
    """Emission flux for one pollutant.

    flux = rate · scale / (Δx·Δy·Δz) · Δt    (μg/s / m³ · s = μg/m³)

    Parameters
    ----------
    geometry : GridGeometry
        Model grid.
    rate : np.ndarray
        Emission rate (μg/s), shape (nz, ny, nx).
    scale : float
        Molar mass ratio from the emitted compound to the model species.

    Returns
    -------
    np.ndarray
        New array of concentration increments.
    """
    rate = np.asarray(rate, dtype=np.float64)
    if rate.shape != geometry.shape:
        raise GridShapeError(
            f"Emission array has shape {rate.shape}, expected {geometry.shape}"
        )
    return rate * scale / geometry.cell_volume * geometry.dt


class EmissionInjector:
    """Builds and applies per-species emission fluxes.

    Parameters
    ----------
    geometry : GridGeometry
        Model grid used for volume and time-step normalisation.
    """

    def __init__(self, geometry: GridGeometry) -> None:
        self.geometry = geometry

    def flux(self, emissions: Mapping[str, np.ndarray]) -> dict[Species, np.ndarray]:
        """Convert emission rates into per-species fluxes.

        Every name is resolved before any array is converted, so an
        unknown pollutant fails without partial work.

        Raises
        ------
        UnknownPollutantError
            If a key of *emissions* is not a recognised pollutant.
        GridShapeError
            If an emission array does not match the grid.
        """
        resolved = zip(validate_emission_names(emissions), emissions.values())
        fluxes: dict[Species, np.ndarray] = {}
        for pollutant, arr in resolved:
            species, ratio = EMISSION_TABLE[pollutant]
            flux = calc_emis_flux(self.geometry, arr, ratio)
            fluxes[species] = flux
            logger.debug(
                "Emission %s -> %s: total flux %.4g",
                pollutant.value, species.label, float(flux.sum()),
            )
        return fluxes

    @staticmethod
    def inject(initial: list[np.ndarray], fluxes: Mapping[Species, np.ndarray]) -> None:
        """Add fluxes in place to the start-of-step fields."""
        for species, flux in fluxes.items():
            initial[species] += flux
