"""Deposition processes for pyaim.

Implements gravitational settling (Stokes law) of particulate species and
below-cloud wet scavenging of a cell's species vector.

References:
    - Seinfeld & Pandis (2006), Chapters 9 and 20
    - Draxler & Hess (1998)
"""

from __future__ import annotations

import math

import numpy as np

from pyaim.core.stencil import Neighborhood


# Physical constants
GRAVITY = 9.80665        # m/s²
AIR_VISCOSITY = 1.81e-5  # Pa·s (dynamic viscosity of air at ~20°C)


def gravitational_settling(
    diameter: float,
    density: float,
    mu: float = AIR_VISCOSITY,
    g: float = GRAVITY,
) -> float:
    """Fall speed shared by every particulate species in the grid.

    Computed once per run from the configured particle size and density
    using Stokes drag, ρ·d²·g / (18·μ), and fed to :func:`settling_flux`
    for the per-cell tendency. A zero diameter turns settling off.

    Parameters
    ----------
    diameter : float
        Representative PM2.5 particle diameter (m).
    density : float
        Particle density (kg/m³).
    mu, g : float
        Air viscosity (Pa·s) and gravity (m/s²).

    Returns
    -------
    float
        Downward speed (m/s).
    """
    return density * diameter ** 2 * g / (18.0 * mu)


def settling_flux(c: Neighborhood, v_settling: float) -> float:
    """Concentration tendency from particles falling through the layer.

    Mass enters from the layer above and leaves through the bottom of
    the current layer; from the surface layer it is lost to the ground.
    """
    return v_settling * (c.kplus - c.center) / c.dz_center


def below_cloud_scavenging(
    precip_rate: float,
    a: float = 5e-5,
    b: float = 0.8,
) -> float:
    """Rain washout rate for one grid column.

    Λ = a·P^b from the column's surface precipitation. The same rate is
    applied to all nine species of every cell in the column by
    :func:`apply_wet_deposition`.

    Parameters
    ----------
    precip_rate : float
        Precipitation of the column (mm/h); dry columns give 0.
    a, b : float
        Washout constant and exponent (``SCAVA``/``SCAVB`` in &AIM).

    Returns
    -------
    float
        First-order removal rate (s⁻¹).
    """
    if precip_rate <= 0.0:
        return 0.0
    return a * precip_rate ** b


def apply_wet_deposition(cell: np.ndarray, scav_coeff: float, dt: float) -> None:
    """Scale every species in *cell* by exp(-Λ·Δt), in place."""
    if scav_coeff <= 0.0:
        return
    cell *= math.exp(-scav_coeff * abs(dt))
