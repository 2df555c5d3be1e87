"""Unit tests for the cell update kernel."""

import numpy as np
import pytest

from pyaim.core.kernel import CellUpdateKernel, KernelScratch, compute_threshold
from pyaim.core.models import GridGeometry, MetData, SimulationConfig
from pyaim.core.species import Species
from pyaim.physics.closures import PhysicsClosures


class ConstantClosures(PhysicsClosures):
    """Closures returning fixed tendencies so each term is identifiable."""

    def __init__(self, geometry, met):
        super().__init__(geometry, met, SimulationConfig())
        self.settling_calls = []
        self.oxidation_calls = 0

    def advective_flux(self, c, u, u_next, v, v_next, w, w_next):
        return 1.0, 2.0, 3.0

    def diffusive_flux(self, c, d):
        return 4.0

    def gravitational_settling(self, c, k):
        self.settling_calls.append(k)
        return 10.0

    def voc_oxidation_flux(self, c):
        self.oxidation_calls += 1
        return 100.0

    def wet_deposition(self, cell, k, j, i):
        cell *= 0.5

    def chemical_partitioning(self, cell, k, j, i):
        pass


def _setup(nx=5, ny=5, nz=3):
    geom = GridGeometry.uniform(nx=nx, ny=ny, nz=nz, dx=1000.0, dy=1000.0,
                                dz=100.0, dt=1.0)
    met = MetData.uniform(geom)
    closures = ConstantClosures(geom, met)
    kernel = CellUpdateKernel(geom, met, closures)
    initial = [np.zeros(geom.shape) for _ in Species]
    final = [np.zeros(geom.shape) for _ in Species]
    return geom, closures, kernel, initial, final


def test_compute_threshold_uses_largest_species_maximum():
    fields = [np.zeros((2, 2, 2)) for _ in Species]
    fields[Species.P_NO][1, 1, 1] = 4.0
    fields[Species.G_S][0, 0, 0] = 2.0
    assert compute_threshold(fields, 1e-6) == pytest.approx(4e-6)


def test_compute_threshold_never_negative():
    fields = [np.full((2, 2, 2), -1.0) for _ in Species]
    assert compute_threshold(fields, 1e-6) == 0.0


def test_species_specific_terms():
    geom, closures, kernel, initial, final = _setup()
    initial[Species.G_ORG][0, 1, 1] = 1.0
    initial[Species.PM2_5][0, 1, 1] = 1.0
    initial[Species.G_NH][0, 1, 1] = 1.0
    threshold = compute_threshold(initial, 1e-6)

    kernel.update_cell(initial, final, 0, 1, 1, threshold, 0.5, KernelScratch())

    # gOrg: advection + diffusion + VOC oxidation
    assert final[Species.G_ORG][0, 1, 1] == pytest.approx((1.0 + 110.0) * 0.5)
    # PM2.5: advection + diffusion + settling
    assert final[Species.PM2_5][0, 1, 1] == pytest.approx((1.0 + 20.0) * 0.5)
    # gNH: advection + diffusion only
    assert final[Species.G_NH][0, 1, 1] == pytest.approx((1.0 + 10.0) * 0.5)
    assert closures.oxidation_calls == 1
    assert closures.settling_calls == [0]


def test_below_threshold_cell_keeps_initial_value():
    """A negligible neighbourhood skips transport but not whole-cell processes."""
    geom, closures, kernel, initial, final = _setup()
    initial[Species.G_ORG][0, 1, 1] = 1.0
    initial[Species.P_NO][1, 3, 3] = 1e-9
    threshold = compute_threshold(initial, 1e-6)

    kernel.update_cell(initial, final, 1, 3, 3, threshold, 0.5, KernelScratch())

    assert final[Species.P_NO][1, 3, 3] == pytest.approx(1e-9 * 0.5)
    assert final[Species.G_ORG][1, 3, 3] == 0.0
    assert closures.settling_calls == []
    assert closures.oxidation_calls == 0


def test_update_cell_writes_only_its_cell():
    geom, closures, kernel, initial, final = _setup()
    for arr in initial:
        arr[:] = 1.0

    kernel.update_cell(initial, final, 1, 2, 2, 1e-6, 0.5, KernelScratch())

    for arr in final:
        written = np.zeros(geom.shape, dtype=bool)
        written[1, 2, 2] = True
        assert np.all(arr[~written] == 0.0)
        assert arr[1, 2, 2] != 0.0


def test_update_slice_covers_interior_rows():
    geom, closures, kernel, initial, final = _setup(nx=5, ny=6, nz=2)
    n = kernel.update_slice(initial, final, 2, 0.0, 0.5)
    assert n == (geom.ny - 2) * geom.nz


def test_every_particulate_species_settles():
    geom, closures, kernel, initial, final = _setup()
    for arr in initial:
        arr[0, 2, 2] = 1.0

    kernel.update_cell(initial, final, 0, 2, 2, 1e-6, 0.5, KernelScratch())

    assert len(closures.settling_calls) == 5
    assert closures.oxidation_calls == 1
    for q in Species:
        extra = 10.0 if q.is_particulate else 100.0 if q == Species.G_ORG else 0.0
        assert final[q][0, 2, 2] == pytest.approx((1.0 + 10.0 + extra) * 0.5)
