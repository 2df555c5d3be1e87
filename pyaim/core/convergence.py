"""ConvergenceTracker — per-species steady-state detection.

After each sweep the domain-wide sum of every species is compared with
the previous sum. A species converges once its sum stops increasing and
then stays converged for the rest of the run.
"""

from __future__ import annotations

import logging
import math
from typing import Sequence

import numpy as np

from pyaim.core.species import N_SPECIES, Species

logger = logging.getLogger(__name__)


def check_convergence(new_sum: float, old_sum: float, name: str = "") -> bool:
    """Whether a species has stopped increasing.

    bias = (new_sum - old_sum) / old_sum

    Not converged when the bias is positive or infinite (a previously
    empty field that now holds mass). A field that stays empty gives a
    0/0 bias and counts as converged.
    """
    if old_sum == 0.0:
        if new_sum == 0.0:
            bias = math.nan
        else:
            bias = math.copysign(math.inf, new_sum)
    else:
        bias = (new_sum - old_sum) / old_sum
    logger.debug("%s: difference = %3.2g%%", name, bias * 100)
    if bias > 0.0 or math.isinf(bias):
        return False
    return True


class ConvergenceTracker:
    """Running convergence state for all species.

    Attributes
    ----------
    old_sums : list[float]
        Domain sum of each species after the previous iteration.
    converged : list[bool]
        Latched convergence flag of each species.
    """

    def __init__(self) -> None:
        self.old_sums = [0.0] * N_SPECIES
        self.converged = [False] * N_SPECIES

    def update(self, final: Sequence[np.ndarray]) -> bool:
        """Record the new sums and return whether all species converged."""
        all_converged = True
        for q, arr in enumerate(final):
            arr_sum = float(arr.sum())
            if not self.converged[q]:
                self.converged[q] = check_convergence(
                    arr_sum, self.old_sums[q], Species(q).label
                )
                if not self.converged[q]:
                    all_converged = False
            self.old_sums[q] = arr_sum
        return all_converged

    @property
    def all_converged(self) -> bool:
        return all(self.converged)
