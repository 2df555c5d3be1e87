"""Unit tests for per-species convergence tracking."""

import numpy as np

from pyaim.core.convergence import ConvergenceTracker, check_convergence
from pyaim.core.species import N_SPECIES, Species


def _fields(values):
    return [np.full((1, 1, 1), float(v)) for v in values]


def test_increasing_sum_not_converged():
    assert check_convergence(2.0, 1.0) is False


def test_decreasing_or_equal_sum_converged():
    assert check_convergence(0.5, 1.0) is True
    assert check_convergence(1.0, 1.0) is True


def test_zero_previous_sum_with_mass_not_converged():
    """A field that gains mass from nothing has an infinite bias."""
    assert check_convergence(1.0, 0.0) is False
    assert check_convergence(-1.0, 0.0) is False


def test_field_staying_empty_counts_as_converged():
    assert check_convergence(0.0, 0.0) is True


def test_first_update_with_mass_is_not_converged():
    tracker = ConvergenceTracker()
    assert tracker.update(_fields([1.0] * N_SPECIES)) is False
    assert tracker.converged == [False] * N_SPECIES
    assert tracker.old_sums == [1.0] * N_SPECIES


def test_converged_species_is_latched():
    tracker = ConvergenceTracker()
    values = [0.0] * N_SPECIES
    values[Species.G_NO] = 1.0
    tracker.update(_fields(values))

    values[Species.G_NO] = 0.5
    assert tracker.update(_fields(values)) is True
    assert tracker.converged[Species.G_NO]

    # Sum increases again: still converged, sum still recorded
    values[Species.G_NO] = 10.0
    assert tracker.update(_fields(values)) is True
    assert tracker.converged[Species.G_NO]
    assert tracker.old_sums[Species.G_NO] == 10.0


def test_all_converged_requires_every_species():
    tracker = ConvergenceTracker()
    values = [0.0] * N_SPECIES
    values[Species.P_S] = 1.0
    tracker.update(_fields(values))
    values[Species.P_S] = 2.0
    assert tracker.update(_fields(values)) is False
    assert not tracker.all_converged
    assert sum(tracker.converged) == N_SPECIES - 1
