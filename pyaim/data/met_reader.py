"""Readers for gridded meteorology and emissions in NetCDF format.

Meteorology file layout::

    dimensions:  z, y, x, z_stag (= z+1), y_stag (= y+1), x_stag (= x+1),
                 bins (wind bins; may differ per component)
    attributes:  dx, dy (m), dt (s)
    variables:   dz(z, y, x)            layer thickness (m)
                 kz(z, y, x)            vertical diffusivity (m²/s)
                 U_bins, U_freq (b, z, y, x_stag)
                 V_bins, V_freq (b, z, y_stag, x)
                 W_bins, W_freq (b, z_stag, y, x)
                 precip(y, x)           optional, mm/h
                 org_partitioning, nh_partitioning,
                 s_partitioning, no_partitioning (z, y, x)  optional

Emissions files hold one (z, y, x) variable per pollutant in μg/s.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import numpy as np

from pyaim.core.models import (
    GridGeometry,
    MetData,
    MetFileNotFoundError,
    MetFormatError,
)

logger = logging.getLogger(__name__)

_OPTIONAL_FIELDS = (
    "precip",
    "org_partitioning",
    "nh_partitioning",
    "s_partitioning",
    "no_partitioning",
)


def _open_dataset(filepath: str | Path) -> Any:
    path = Path(filepath)
    if not path.exists():
        raise MetFileNotFoundError(f"NetCDF file not found: {filepath}")

    try:
        import netCDF4 as nc  # type: ignore[import-untyped]
    except ImportError as exc:
        raise ImportError(
            "netCDF4 package is required for NetCDF reading. "
            "Install with: pip install netCDF4"
        ) from exc

    return nc.Dataset(str(path), "r")


class NetCDFReader:
    """Reader for pyaim meteorology NetCDF files."""

    _REQUIRED_VARS = (
        "dz", "kz",
        "U_bins", "U_freq",
        "V_bins", "V_freq",
        "W_bins", "W_freq",
    )

    def read(self, filepath: str | Path) -> tuple[GridGeometry, MetData]:
        """Read grid geometry and meteorology.

        Parameters
        ----------
        filepath : str or Path
            Path to the NetCDF file.

        Returns
        -------
        tuple[GridGeometry, MetData]

        Raises
        ------
        MetFileNotFoundError
            If the file does not exist.
        MetFormatError
            If a required variable or attribute is missing.
        """
        ds = _open_dataset(filepath)
        try:
            return self._extract(ds, str(filepath))
        finally:
            ds.close()

    def _extract(self, ds: Any, filepath: str) -> tuple[GridGeometry, MetData]:
        for name in self._REQUIRED_VARS:
            if name not in ds.variables:
                raise MetFormatError(f"{filepath}: missing variable '{name}'")
        attrs = set(ds.ncattrs())
        for name in ("dx", "dy", "dt"):
            if name not in attrs:
                raise MetFormatError(f"{filepath}: missing global attribute '{name}'")

        def _read_var(name: str) -> np.ndarray:
            data = ds.variables[name][:]
            if np.ma.is_masked(data):
                raise MetFormatError(
                    f"{filepath}: variable '{name}' has missing values"
                )
            return np.ascontiguousarray(np.ma.getdata(data), dtype=np.float64)

        dz = _read_var("dz")
        nz, ny, nx = dz.shape
        geometry = GridGeometry(
            nx=nx, ny=ny, nz=nz,
            dx=float(ds.getncattr("dx")),
            dy=float(ds.getncattr("dy")),
            dz=dz,
            dt=float(ds.getncattr("dt")),
        )

        optional = {
            name: _read_var(name)
            for name in _OPTIONAL_FIELDS
            if name in ds.variables
        }
        met = MetData(
            u_bins=_read_var("U_bins"),
            u_freq=_read_var("U_freq"),
            v_bins=_read_var("V_bins"),
            v_freq=_read_var("V_freq"),
            w_bins=_read_var("W_bins"),
            w_freq=_read_var("W_freq"),
            kz=_read_var("kz"),
            **optional,
        )
        met.validate(geometry)

        logger.info(
            "Loaded meteorology %s: grid %d×%d×%d, optional fields: %s",
            filepath, nx, ny, nz, ", ".join(sorted(optional)) or "none",
        )
        return geometry, met


def read_emissions(filepath: str | Path) -> dict[str, np.ndarray]:
    """Read every 3-D variable of an emissions file (μg/s).

    Names are returned as stored; the engine rejects unknown pollutants.
    Missing (masked) cells are read as zero emission.
    """
    ds = _open_dataset(filepath)
    try:
        emissions = {
            name: np.ascontiguousarray(np.ma.filled(var[:], 0.0), dtype=np.float64)
            for name, var in ds.variables.items()
            if var.ndim == 3
        }
    finally:
        ds.close()
    logger.info("Loaded emissions %s: %s", filepath, ", ".join(sorted(emissions)))
    return emissions
