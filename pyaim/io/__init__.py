"""Output writers."""

from pyaim.io.netcdf_writer import NetCDFWriter

__all__ = ["NetCDFWriter"]
