"""ConcurrentSweep — parallel update of all interior grid cells.

Work is split along the east-west axis: one unit per interior slice
``i``, each unit looping over every (j, k) of its slice with its own
scratch buffers. Units own disjoint cells of the end-of-step fields and
only read the start-of-step fields, so no locking is needed. The sweep
returns only after every unit has finished.
"""

from __future__ import annotations

import logging
import os
from concurrent.futures import ThreadPoolExecutor
from typing import Optional, Sequence

import numpy as np

from pyaim.core.kernel import CellUpdateKernel

logger = logging.getLogger(__name__)


class ConcurrentSweep:
    """Runs a :class:`CellUpdateKernel` over the grid interior.

    Parameters
    ----------
    kernel : CellUpdateKernel
        Kernel bound to the grid, meteorology and closures.
    num_workers : int or None
        Maximum concurrent units. Defaults to ``os.cpu_count()``; always
        capped at the number of interior slices.
    """

    def __init__(self, kernel: CellUpdateKernel,
                 num_workers: Optional[int] = None) -> None:
        self.kernel = kernel
        self.num_workers = num_workers or os.cpu_count() or 1

    def interior_slices(self) -> range:
        nx = self.kernel.geometry.nx
        return range(1, nx - 1)

    def run(
        self,
        initial: Sequence[np.ndarray],
        final: Sequence[np.ndarray],
        threshold: float,
        rand: float,
    ) -> int:
        """Advance every interior cell from *initial* into *final*.

        Returns
        -------
        int
            Number of cells updated.

        Raises
        ------
        Exception
            Any exception raised inside a unit, after all units have
            been joined.
        """
        slices = self.interior_slices()
        if len(slices) == 0:
            return 0

        effective_workers = min(self.num_workers, len(slices))
        logger.debug(
            "Sweeping %d slices with %d workers (threshold %.3g)",
            len(slices), effective_workers, threshold,
        )

        # For a single worker, skip thread pool overhead
        if effective_workers <= 1:
            return sum(
                self.kernel.update_slice(initial, final, i, threshold, rand)
                for i in slices
            )

        with ThreadPoolExecutor(max_workers=effective_workers) as executor:
            futures = [
                executor.submit(self.kernel.update_slice, initial, final, i,
                                threshold, rand)
                for i in slices
            ]
        # Leaving the executor context joins every unit.
        return sum(f.result() for f in futures)
