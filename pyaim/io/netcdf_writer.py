"""NetCDF writer for model output concentrations."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Mapping

import numpy as np

from pyaim.core.models import GridGeometry, GridShapeError

logger = logging.getLogger(__name__)


class NetCDFWriter:
    """Writes output pollutant fields (μg/m³) to a NetCDF file.

    Parameters
    ----------
    title : str
        Value of the global ``title`` attribute.
    """

    def __init__(self, title: str = "pyaim steady-state concentrations") -> None:
        self.title = title

    def write(
        self,
        filepath: str | Path,
        outputs: Mapping[str, np.ndarray],
        geometry: GridGeometry,
    ) -> None:
        """Write one (z, y, x) float64 variable per output pollutant.

        Parameters
        ----------
        filepath : str or Path
            Output file path (overwritten if present).
        outputs : mapping
            Output name to concentration array.
        geometry : GridGeometry
            Grid the arrays are defined on.
        """
        try:
            import netCDF4 as nc  # type: ignore[import-untyped]
        except ImportError as exc:
            raise ImportError(
                "netCDF4 package is required for NetCDF writing. "
                "Install with: pip install netCDF4"
            ) from exc

        for name, arr in outputs.items():
            if arr.shape != geometry.shape:
                raise GridShapeError(
                    f"Output {name} has shape {arr.shape}, expected {geometry.shape}"
                )

        ds = nc.Dataset(str(filepath), "w")
        try:
            ds.title = self.title
            ds.dx = geometry.dx
            ds.dy = geometry.dy
            ds.dt = geometry.dt
            ds.createDimension("z", geometry.nz)
            ds.createDimension("y", geometry.ny)
            ds.createDimension("x", geometry.nx)
            for name, arr in outputs.items():
                var = ds.createVariable(name, "f8", ("z", "y", "x"))
                var.units = "ug m-3"
                var[:] = arr
        finally:
            ds.close()

        logger.info("Wrote %d output fields to %s", len(outputs), filepath)
