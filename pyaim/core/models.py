"""Core data models and custom exceptions for pyaim.

Defines dataclasses for grid geometry, meteorological fields, engine
configuration and per-run state, and all custom exception types used
throughout the package.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Optional

import numpy as np

if TYPE_CHECKING:
    from pyaim.core.convergence import ConvergenceTracker


# ---------------------------------------------------------------------------
# Custom Exceptions
# ---------------------------------------------------------------------------

class PyAimError(Exception):
    """Base exception for all pyaim errors."""


class ConfigurationError(PyAimError):
    """Raised when the run is configured with inputs the model cannot use."""


class UnknownPollutantError(ConfigurationError):
    """Raised when an emission pollutant name is not recognised.

    Attributes:
        pollutant: The offending pollutant name.
    """

    def __init__(self, pollutant: str):
        self.pollutant = pollutant
        super().__init__(f"Unknown emissions pollutant {pollutant!r}.")


class ConfigParseError(ConfigurationError):
    """Raised when an &AIM configuration namelist has format errors.

    Attributes:
        line_number: The line number where the error was detected.
        expected: Description of the expected format.
    """

    def __init__(self, message: str, line_number: int | None = None,
                 expected: str | None = None):
        self.line_number = line_number
        self.expected = expected
        parts = [message]
        if line_number is not None:
            parts.append(f"line {line_number}")
        if expected is not None:
            parts.append(f"expected: {expected}")
        super().__init__(" | ".join(parts))


class GridShapeError(ConfigurationError):
    """Raised when an input array does not match the model grid."""


class MetFileNotFoundError(PyAimError):
    """Raised when a meteorological data file cannot be found."""


class MetFormatError(PyAimError):
    """Raised when a meteorological data file is missing required fields."""


# ---------------------------------------------------------------------------
# Data Models
# ---------------------------------------------------------------------------

@dataclass(frozen=True, eq=False)
class GridGeometry:
    """Immutable description of the model domain.

    Attributes
    ----------
    nx, ny, nz : int
        Cell counts along the east-west, north-south and vertical axes.
    dx, dy : float
        Horizontal cell dimensions (m).
    dz : np.ndarray
        Layer thickness of every cell (m), shape (nz, ny, nx).
    dt : float
        Time step length (s).
    """
    nx: int
    ny: int
    nz: int
    dx: float
    dy: float
    dz: np.ndarray
    dt: float

    def __post_init__(self) -> None:
        if min(self.nx, self.ny, self.nz) < 1:
            raise GridShapeError(
                f"Grid dimensions must be positive, got "
                f"nz={self.nz} ny={self.ny} nx={self.nx}"
            )
        if self.dx <= 0 or self.dy <= 0:
            raise GridShapeError(f"Cell sizes must be positive, got dx={self.dx} dy={self.dy}")
        if self.dt <= 0:
            raise ConfigurationError(f"Time step must be positive, got dt={self.dt}")
        dz = np.asarray(self.dz, dtype=np.float64)
        if dz.shape != self.shape:
            raise GridShapeError(f"dz has shape {dz.shape}, expected {self.shape}")
        if np.any(dz <= 0):
            raise GridShapeError("dz must be positive in every cell")
        object.__setattr__(self, "dz", dz)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GridGeometry):
            return NotImplemented
        return (
            (self.nx, self.ny, self.nz, self.dx, self.dy, self.dt)
            == (other.nx, other.ny, other.nz, other.dx, other.dy, other.dt)
            and np.array_equal(self.dz, other.dz)
        )

    def __hash__(self) -> int:
        return hash((self.nx, self.ny, self.nz, self.dx, self.dy, self.dt,
                     self.dz.tobytes()))

    @property
    def shape(self) -> tuple[int, int, int]:
        return (self.nz, self.ny, self.nx)

    @property
    def cell_volume(self) -> np.ndarray:
        """Cell volumes (m³), shape (nz, ny, nx)."""
        return self.dx * self.dy * self.dz

    @classmethod
    def uniform(cls, nx: int, ny: int, nz: int, dx: float, dy: float,
                dz: float, dt: float) -> "GridGeometry":
        """Build a geometry with the same layer thickness everywhere."""
        return cls(nx=nx, ny=ny, nz=nz, dx=dx, dy=dy,
                   dz=np.full((nz, ny, nx), float(dz)), dt=dt)


@dataclass
class MetData:
    """Meteorological and diffusivity fields bound to one grid.

    Wind speeds are stored as bins with cumulative frequencies on a
    staggered grid: U on east-west faces, V on north-south faces and W on
    layer interfaces. Index ``b`` of a bin table is the bin, the remaining
    three indices are (k, j, i).

    Attributes
    ----------
    u_bins, u_freq : np.ndarray
        Shape (nbins, nz, ny, nx+1); wind (m/s) and cumulative frequency.
    v_bins, v_freq : np.ndarray
        Shape (nbins, nz, ny+1, nx).
    w_bins, w_freq : np.ndarray
        Shape (nbins, nz+1, ny, nx).
    kz : np.ndarray
        Vertical turbulent diffusivity (m²/s), shape (nz, ny, nx).
    precip : np.ndarray, optional
        Precipitation rate (mm/h), shape (ny, nx).
    org_partitioning, nh_partitioning, s_partitioning, no_partitioning : np.ndarray, optional
        Particle-phase mass fraction of each gas/particle pair,
        shape (nz, ny, nx).
    """
    u_bins: np.ndarray
    u_freq: np.ndarray
    v_bins: np.ndarray
    v_freq: np.ndarray
    w_bins: np.ndarray
    w_freq: np.ndarray
    kz: np.ndarray
    precip: Optional[np.ndarray] = None
    org_partitioning: Optional[np.ndarray] = None
    nh_partitioning: Optional[np.ndarray] = None
    s_partitioning: Optional[np.ndarray] = None
    no_partitioning: Optional[np.ndarray] = None

    @classmethod
    def uniform(cls, geometry: GridGeometry, u: float = 0.0, v: float = 0.0,
                w: float = 0.0, kz: float = 0.0) -> "MetData":
        """Single-bin, spatially uniform fields."""
        nz, ny, nx = geometry.shape
        return cls(
            u_bins=np.full((1, nz, ny, nx + 1), float(u)),
            u_freq=np.ones((1, nz, ny, nx + 1)),
            v_bins=np.full((1, nz, ny + 1, nx), float(v)),
            v_freq=np.ones((1, nz, ny + 1, nx)),
            w_bins=np.full((1, nz + 1, ny, nx), float(w)),
            w_freq=np.ones((1, nz + 1, ny, nx)),
            kz=np.full((nz, ny, nx), float(kz)),
        )

    def validate(self, geometry: GridGeometry) -> None:
        """Check every field against *geometry*.

        Raises
        ------
        GridShapeError
            On the first field whose shape does not match the grid.
        """
        nz, ny, nx = geometry.shape
        staggered = {
            "u": (self.u_bins, self.u_freq, (nz, ny, nx + 1)),
            "v": (self.v_bins, self.v_freq, (nz, ny + 1, nx)),
            "w": (self.w_bins, self.w_freq, (nz + 1, ny, nx)),
        }
        for name, (bins, freq, cell_shape) in staggered.items():
            if bins.ndim != 4 or bins.shape[1:] != cell_shape:
                raise GridShapeError(
                    f"{name}_bins has shape {bins.shape}, expected (nbins, *{cell_shape})"
                )
            if freq.shape != bins.shape:
                raise GridShapeError(
                    f"{name}_freq has shape {freq.shape}, expected {bins.shape}"
                )
        if self.kz.shape != geometry.shape:
            raise GridShapeError(f"kz has shape {self.kz.shape}, expected {geometry.shape}")
        if self.precip is not None and self.precip.shape != (ny, nx):
            raise GridShapeError(f"precip has shape {self.precip.shape}, expected {(ny, nx)}")
        for name in ("org_partitioning", "nh_partitioning",
                     "s_partitioning", "no_partitioning"):
            arr = getattr(self, name)
            if arr is not None and arr.shape != geometry.shape:
                raise GridShapeError(
                    f"{name} has shape {arr.shape}, expected {geometry.shape}"
                )


@dataclass
class SimulationConfig:
    """Engine and closure parameters, loadable from an &AIM namelist."""
    days_to_run: float = 15.0            # minimum simulated days before stopping
    threshold_factor: float = 1e-6       # significant-mass cutoff relative to field max
    num_workers: Optional[int] = None    # sweep threads (None = cpu_count)
    seed: Optional[int] = None           # wind-bin sampling seed
    particle_diameter: float = 1e-6      # m
    particle_density: float = 1000.0     # kg/m³
    voc_oxidation_rate: float = 0.0      # 1/s
    scavenging_a: float = 5e-5
    scavenging_b: float = 0.8
    wet_deposition: bool = True
    chemical_partitioning: bool = True


class EngineStatus(Enum):
    """Lifecycle of a single run."""
    RUNNING = "running"
    CONVERGED_AND_ELIGIBLE = "converged_and_eligible"
    TERMINATED = "terminated"


@dataclass
class RunState:
    """Mutable state owned by the engine for the duration of one run.

    ``initial`` and ``final`` hold one (nz, ny, nx) array per species.
    """
    initial: list[np.ndarray]
    final: list[np.ndarray]
    convergence: "ConvergenceTracker"
    iteration: int = 0
    days_run: float = 0.0
    threshold: float = 0.0
    rand: float = 0.0
    status: EngineStatus = EngineStatus.RUNNING
    sums: list[float] = field(default_factory=list)
