"""Core species tables, data models, kernel and engine."""

from pyaim.core.convergence import ConvergenceTracker, check_convergence
from pyaim.core.emissions import EmissionInjector, calc_emis_flux
from pyaim.core.engine import TimeIntegrationEngine
from pyaim.core.kernel import CellUpdateKernel, KernelScratch, compute_threshold
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
from pyaim.core.output import assemble_output, to_internal
from pyaim.core.species import EmissionPollutant, Species

__all__ = [
    # Engine
    'TimeIntegrationEngine',
    # Components
    'CellUpdateKernel',
    'ConvergenceTracker',
    'EmissionInjector',
    'KernelScratch',
    'assemble_output',
    'calc_emis_flux',
    'check_convergence',
    'compute_threshold',
    'to_internal',
    # Species
    'EmissionPollutant',
    'Species',
    # Models
    'EngineStatus',
    'GridGeometry',
    'MetData',
    'RunState',
    'SimulationConfig',
    # Exceptions
    'ConfigParseError',
    'ConfigurationError',
    'GridShapeError',
    'MetFileNotFoundError',
    'MetFormatError',
    'PyAimError',
    'UnknownPollutantError',
]
