"""Unit tests for the physical closures."""

import math

import numpy as np
import pytest

from pyaim.core.models import GridGeometry, MetData, SimulationConfig
from pyaim.core.species import Species
from pyaim.core.stencil import Neighborhood
from pyaim.physics import chemistry, deposition, transport
from pyaim.physics.closures import PhysicsClosures


def test_gravitational_settling_stokes():
    v_g = deposition.gravitational_settling(1e-5, 1000.0)
    assert v_g > 0
    assert v_g == pytest.approx(1000.0 * 1e-10 * deposition.GRAVITY
                                / (18.0 * deposition.AIR_VISCOSITY))
    # Larger particles settle faster
    assert deposition.gravitational_settling(1e-4, 1000.0) > v_g


def test_settling_flux_moves_mass_down():
    c = Neighborhood(center=1.0, kplus=3.0, dz_center=10.0)
    assert deposition.settling_flux(c, 0.1) == pytest.approx(0.1 * 2.0 / 10.0)
    assert deposition.settling_flux(c, 0.0) == 0.0


def test_below_cloud_scavenging():
    assert deposition.below_cloud_scavenging(0.0) == 0.0
    lambda_1 = deposition.below_cloud_scavenging(1.0)
    lambda_10 = deposition.below_cloud_scavenging(10.0)
    assert lambda_1 == pytest.approx(5e-5)
    assert lambda_10 > lambda_1


def test_apply_wet_deposition_scales_vector():
    cell = np.ones(9)
    deposition.apply_wet_deposition(cell, 1e-4, 3600.0)
    np.testing.assert_allclose(cell, math.exp(-0.36))


def test_upwind_advection_uniform_field_no_tendency():
    c = Neighborhood(center=2.0, iminus=2.0, iplus=2.0, jminus=2.0, jplus=2.0,
                     kminus=2.0, kplus=2.0, dz_center=100.0)
    x, y, z = transport.advective_flux(c, 1000.0, 1000.0, 3.0, 3.0, -1.0, -1.0, 0.0, 0.0)
    assert (x, y, z) == (0.0, 0.0, 0.0)


def test_upwind_advection_uses_upstream_cell():
    c = Neighborhood(center=1.0, iminus=5.0, iplus=0.0, dz_center=100.0)
    x, _, _ = transport.advective_flux(c, 1000.0, 1000.0, 2.0, 2.0, 0.0, 0.0, 0.0, 0.0)
    # inflow 2*5 from the west, outflow 2*1 to the east
    assert x == pytest.approx((10.0 - 2.0) / 1000.0)

    x, _, _ = transport.advective_flux(c, 1000.0, 1000.0, -2.0, -2.0, 0.0, 0.0, 0.0, 0.0)
    # westward: outflow 2*1 through the west face, inflow 2*0 from the east
    assert x == pytest.approx((-2.0 - 0.0) / 1000.0)


def test_diffusion_relaxes_toward_neighbours():
    c = Neighborhood(center=1.0, kminus=3.0, kplus=3.0,
                     dz_center=10.0, dz_below=10.0, dz_above=10.0)
    d = Neighborhood(center=2.0, kminus=2.0, kplus=2.0)
    flux = transport.diffusive_flux(c, d)
    assert flux == pytest.approx((2.0 * 0.2 + 2.0 * 0.2) / 10.0)

    d = Neighborhood()
    assert transport.diffusive_flux(c, d) == 0.0


def test_voc_oxidation_is_first_order_loss():
    c = Neighborhood(center=4.0)
    assert chemistry.voc_oxidation_flux(c, 0.5) == -2.0


def test_partition_conserves_pair_total():
    cell = np.arange(9, dtype=np.float64)
    chemistry.partition(cell, [
        (Species.G_NO, Species.P_NO, 0.25),
        (Species.G_S, Species.P_S, None),
    ])
    total = 7.0 + 8.0
    assert cell[Species.P_NO] == pytest.approx(0.25 * total)
    assert cell[Species.G_NO] == pytest.approx(0.75 * total)
    assert cell[Species.G_S] == 5.0
    assert cell[Species.P_S] == 6.0


def _geometry():
    return GridGeometry.uniform(nx=3, ny=3, nz=2, dx=1000.0, dy=1000.0, dz=50.0, dt=600.0)


def test_closures_identity_without_fields():
    geom = _geometry()
    met = MetData.uniform(geom)
    closures = PhysicsClosures(geom, met, SimulationConfig(particle_diameter=0.0))
    c = Neighborhood(center=1.0, kplus=2.0, dz_center=50.0)

    assert closures.gravitational_settling(c, 0) == 0.0
    assert closures.voc_oxidation_flux(c) == 0.0
    cell = np.linspace(1.0, 9.0, 9)
    before = cell.copy()
    closures.wet_deposition(cell, 0, 1, 1)
    closures.chemical_partitioning(cell, 0, 1, 1)
    np.testing.assert_array_equal(cell, before)


def test_closures_read_cell_fields():
    geom = _geometry()
    met = MetData.uniform(geom)
    met.precip = np.full((geom.ny, geom.nx), 2.0)
    met.s_partitioning = np.full(geom.shape, 0.4)
    closures = PhysicsClosures(geom, met, SimulationConfig())

    cell = np.ones(9)
    closures.wet_deposition(cell, 0, 1, 1)
    expected = math.exp(-5e-5 * 2.0 ** 0.8 * 600.0)
    np.testing.assert_allclose(cell, expected)

    closures.chemical_partitioning(cell, 1, 1, 1)
    assert cell[Species.P_S] == pytest.approx(0.4 * 2.0 * expected)
    assert cell[Species.G_NH] == pytest.approx(expected)


def test_closures_respect_disabled_processes():
    geom = _geometry()
    met = MetData.uniform(geom)
    met.precip = np.full((geom.ny, geom.nx), 2.0)
    met.no_partitioning = np.full(geom.shape, 1.0)
    config = SimulationConfig(wet_deposition=False, chemical_partitioning=False)
    closures = PhysicsClosures(geom, met, config)

    cell = np.ones(9)
    closures.wet_deposition(cell, 0, 1, 1)
    closures.chemical_partitioning(cell, 0, 1, 1)
    np.testing.assert_array_equal(cell, np.ones(9))
