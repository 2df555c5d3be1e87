"""Property-based tests for the concurrent sweep.

Parallel and sequential sweeps must produce identical fields, and
boundary cells must never be written.
"""

from __future__ import annotations

import numpy as np
from hypothesis import given, settings, strategies as st

from pyaim.compute.parallel import ConcurrentSweep
from pyaim.core.kernel import CellUpdateKernel, compute_threshold
from pyaim.core.models import GridGeometry, MetData, SimulationConfig
from pyaim.core.species import Species
from pyaim.physics.closures import PhysicsClosures


wind = st.floats(min_value=-5.0, max_value=5.0, allow_nan=False, allow_infinity=False)


@given(
    u=wind,
    v=wind,
    nx=st.integers(min_value=3, max_value=7),
    workers=st.integers(min_value=2, max_value=5),
    seed=st.integers(min_value=0, max_value=2**16),
)
@settings(max_examples=30, deadline=None)
def test_parallel_sequential_equivalence(u, v, nx, workers, seed):
    geom = GridGeometry.uniform(nx=nx, ny=4, nz=2, dx=1000.0, dy=1000.0,
                                dz=100.0, dt=60.0)
    met = MetData.uniform(geom, u=u, v=v, kz=1.0)
    kernel = CellUpdateKernel(geom, met, PhysicsClosures(geom, met, SimulationConfig()))
    rng = np.random.default_rng(seed)
    initial = [rng.random(geom.shape) for _ in Species]
    threshold = compute_threshold(initial, 1e-6)

    seq = [np.full(geom.shape, np.nan) for _ in Species]
    par = [np.full(geom.shape, np.nan) for _ in Species]
    ConcurrentSweep(kernel, num_workers=1).run(initial, seq, threshold, 0.5)
    ConcurrentSweep(kernel, num_workers=workers).run(initial, par, threshold, 0.5)

    for a, b in zip(seq, par):
        np.testing.assert_array_equal(a, b)
        assert np.all(np.isnan(a[:, :, 0])) and np.all(np.isnan(a[:, :, -1]))
        assert np.all(np.isnan(a[:, 0, :])) and np.all(np.isnan(a[:, -1, :]))
        assert not np.any(np.isnan(a[:, 1:-1, 1:-1]))
