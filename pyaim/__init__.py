"""pyaim - reduced-complexity steady-state air quality model.

Simulates transport and chemical transformation of primary and secondary
PM2.5 precursors on a 3-D Eulerian grid, iterating from surface emissions
until every species reaches a steady state.

Package Structure:
    core/       - Species tables, data models, cell kernel and time-integration engine
    physics/    - Physical closures (transport, deposition, chemistry)
    compute/    - Concurrent grid sweep
    data/       - Input (configuration namelist, NetCDF meteorology and emissions)
    io/         - Output writers
"""

__version__ = "0.1.0"

# Core
from pyaim.core.convergence import ConvergenceTracker, check_convergence
from pyaim.core.emissions import EmissionInjector, calc_emis_flux
from pyaim.core.engine import TimeIntegrationEngine
from pyaim.core.kernel import CellUpdateKernel, compute_threshold
from pyaim.core.models import (
    ConfigParseError,
    ConfigurationError,
    EngineStatus,
    GridGeometry,
    GridShapeError,
    MetData,
    MetFileNotFoundError,
    MetFormatError,
    PyAimError,
    RunState,
    SimulationConfig,
    UnknownPollutantError,
)
from pyaim.core.output import assemble_output
from pyaim.core.species import (
    EMISSION_NAMES,
    OUTPUT_NAMES,
    EmissionPollutant,
    Species,
)

# Physics
from pyaim.physics.closures import PhysicsClosures

# Compute
from pyaim.compute.parallel import ConcurrentSweep

# Data I/O
from pyaim.data.config_parser import load_config, parse_config, write_aim_cfg
from pyaim.data.met_reader import NetCDFReader, read_emissions
from pyaim.io.netcdf_writer import NetCDFWriter

__all__ = [
    # Core - Engine
    'TimeIntegrationEngine',
    'CellUpdateKernel',
    'ConvergenceTracker',
    'EmissionInjector',
    'assemble_output',
    'calc_emis_flux',
    'check_convergence',
    'compute_threshold',
    # Core - Species
    'EMISSION_NAMES',
    'OUTPUT_NAMES',
    'EmissionPollutant',
    'Species',
    # Core - Models
    'EngineStatus',
    'GridGeometry',
    'MetData',
    'RunState',
    'SimulationConfig',
    # Core - Exceptions
    'ConfigParseError',
    'ConfigurationError',
    'GridShapeError',
    'MetFileNotFoundError',
    'MetFormatError',
    'PyAimError',
    'UnknownPollutantError',
    # Physics
    'PhysicsClosures',
    # Compute
    'ConcurrentSweep',
    # Data I/O
    'NetCDFReader',
    'NetCDFWriter',
    'load_config',
    'parse_config',
    'read_emissions',
    'write_aim_cfg',
]
