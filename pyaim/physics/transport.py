"""Advective and diffusive transport closures.

Advection is first-order upwind on an Arakawa C grid: winds live on the
cell faces, so a cell sees the wind on its west/south/bottom face and on
its east/north/top face. Vertical diffusion follows K-theory with
diffusivities averaged onto layer interfaces.
"""

from __future__ import annotations

from pyaim.core.stencil import Neighborhood


def _upwind(wind: float, upstream: float, downstream: float) -> float:
    """Mass flux through a face: wind times the upwind concentration."""
    return wind * (upstream if wind > 0 else downstream)


def advective_flux(
    c: Neighborhood,
    dx: float,
    dy: float,
    u: float,
    u_next: float,
    v: float,
    v_next: float,
    w: float,
    w_next: float,
) -> tuple[float, float, float]:
    """Upwind advection tendencies along x, y and z.

    Parameters
    ----------
    c : Neighborhood
        Concentrations around the cell.
    dx, dy : float
        Horizontal cell size (m).
    u, u_next : float
        Wind (m/s) on the west and east faces.
    v, v_next : float
        Wind on the south and north faces.
    w, w_next : float
        Wind on the bottom and top faces.

    Returns
    -------
    tuple[float, float, float]
        (x, y, z) concentration tendencies (per second).
    """
    xadv = (_upwind(u, c.iminus, c.center) - _upwind(u_next, c.center, c.iplus)) / dx
    yadv = (_upwind(v, c.jminus, c.center) - _upwind(v_next, c.center, c.jplus)) / dy
    zadv = (_upwind(w, c.kminus, c.center) - _upwind(w_next, c.center, c.kplus)) / c.dz_center
    return xadv, yadv, zadv


def diffusive_flux(c: Neighborhood, d: Neighborhood) -> float:
    """Vertical diffusion tendency (per second).

    Parameters
    ----------
    c : Neighborhood
        Concentrations around the cell.
    d : Neighborhood
        Vertical diffusivity (m²/s) at the cell and the layers below and
        above.
    """
    k_above = 0.5 * (d.center + d.kplus)
    k_below = 0.5 * (d.center + d.kminus)
    grad_above = (c.kplus - c.center) / (0.5 * (c.dz_center + c.dz_above))
    grad_below = (c.center - c.kminus) / (0.5 * (c.dz_center + c.dz_below))
    return (k_above * grad_above - k_below * grad_below) / c.dz_center
