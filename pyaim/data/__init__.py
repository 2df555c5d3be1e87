"""Data input modules."""

from pyaim.data.config_parser import load_config, parse_aim_cfg, parse_config, write_aim_cfg
from pyaim.data.met_reader import NetCDFReader, read_emissions

__all__ = [
    # Config parser
    'load_config',
    'parse_aim_cfg',
    'parse_config',
    'write_aim_cfg',
    # NetCDF readers
    'NetCDFReader',
    'read_emissions',
]
