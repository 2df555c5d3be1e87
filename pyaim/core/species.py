"""Chemical species, emission pollutants and unit conversion tables.

The model tracks nine internal species. Their order is fixed: the index
of a species selects the physical process branch applied to it in the
cell kernel. Gaseous nitrogen, sulfur and ammonia are carried as mass of
N or S; conversion to and from the emitted or reported compound happens
only at the emission and output boundaries.
"""

from __future__ import annotations

from enum import Enum, IntEnum
from types import MappingProxyType
from typing import Iterable, Mapping

from pyaim.core.models import UnknownPollutantError


# ---------------------------------------------------------------------------
# Molar masses (g/mol)
# ---------------------------------------------------------------------------

MW_NOX = 46.0055
MW_N = 14.0067
MW_NO3 = 62.00501
MW_NH3 = 17.03056
MW_NH4 = 18.03851
MW_S = 32.0655
MW_SO2 = 64.0644
MW_SO4 = 96.0632

NOX_TO_N = MW_N / MW_NOX
N_TO_NO3 = MW_NO3 / MW_N
SOX_TO_S = MW_SO2 / MW_S
S_TO_SO4 = MW_S / MW_SO4
NH3_TO_N = MW_N / MW_NH3
N_TO_NH4 = MW_NH4 / MW_N


class Species(IntEnum):
    """Internal chemical-state variables, in array order."""

    G_ORG = 0   # gaseous organic matter
    P_ORG = 1   # particulate organic matter
    PM2_5 = 2   # primary PM2.5
    G_NH = 3    # gaseous N in ammonia
    P_NH = 4    # particulate N in ammonium
    G_S = 5     # gaseous S in sulfur
    P_S = 6     # particulate S in sulfate
    G_NO = 7    # gaseous N in nitrate
    P_NO = 8    # particulate N in nitrate

    @property
    def label(self) -> str:
        return _LABELS[self]

    @property
    def is_particulate(self) -> bool:
        return self in PARTICULATE_SPECIES


_LABELS = {
    Species.G_ORG: "gOrg",
    Species.P_ORG: "pOrg",
    Species.PM2_5: "PM2_5",
    Species.G_NH: "gNH",
    Species.P_NH: "pNH",
    Species.G_S: "gS",
    Species.P_S: "pS",
    Species.G_NO: "gNO",
    Species.P_NO: "pNO",
}

N_SPECIES = len(Species)

PARTICULATE_SPECIES = frozenset({
    Species.PM2_5,
    Species.P_ORG,
    Species.P_NH,
    Species.P_NO,
    Species.P_S,
})

# Gas/particle pairs that exchange mass through chemical partitioning.
PARTITION_PAIRS: tuple[tuple[Species, Species], ...] = (
    (Species.G_ORG, Species.P_ORG),
    (Species.G_NH, Species.P_NH),
    (Species.G_S, Species.P_S),
    (Species.G_NO, Species.P_NO),
)


class EmissionPollutant(str, Enum):
    """Pollutants accepted as emissions (μg/s)."""

    VOC = "VOC"
    NOX = "NOx"
    NH3 = "NH3"
    SOX = "SOx"
    PM2_5 = "PM2_5"


# Emission pollutant -> (receiving species, molar mass ratio)
EMISSION_TABLE: Mapping[EmissionPollutant, tuple[Species, float]] = MappingProxyType({
    EmissionPollutant.VOC: (Species.G_ORG, 1.0),
    EmissionPollutant.NOX: (Species.G_NO, NOX_TO_N),
    EmissionPollutant.NH3: (Species.G_NH, NH3_TO_N),
    EmissionPollutant.SOX: (Species.G_S, SOX_TO_S),
    EmissionPollutant.PM2_5: (Species.PM2_5, 1.0),
})

EMISSION_NAMES: tuple[str, ...] = tuple(p.value for p in EmissionPollutant)

# Output pollutant (μg/m³) -> (source species, scale from internal units)
OUTPUT_TABLE: Mapping[str, tuple[Species, float]] = MappingProxyType({
    "VOC": (Species.G_ORG, 1.0),
    "SOA": (Species.P_ORG, 1.0),
    "PrimaryPM2_5": (Species.PM2_5, 1.0),
    "NH3": (Species.G_NH, 1.0 / NH3_TO_N),
    "pNH4": (Species.P_NH, N_TO_NH4),
    "SOx": (Species.G_S, 1.0 / SOX_TO_S),
    "pSO4": (Species.P_S, S_TO_SO4),
    "NOx": (Species.G_NO, 1.0 / NOX_TO_N),
    "pNO3": (Species.P_NO, N_TO_NO3),
})

TOTAL_PM25_COMPONENTS: tuple[str, ...] = (
    "PrimaryPM2_5", "SOA", "pNH4", "pSO4", "pNO3",
)

OUTPUT_NAMES: tuple[str, ...] = tuple(OUTPUT_TABLE) + ("TotalPM2_5",)


def resolve_emission(name: str) -> EmissionPollutant:
    """Map an emission name to its pollutant.

    Raises
    ------
    UnknownPollutantError
        If *name* is not one of ``EMISSION_NAMES``.
    """
    try:
        return EmissionPollutant(name)
    except ValueError:
        raise UnknownPollutantError(name) from None


def validate_emission_names(names: Iterable[str]) -> list[EmissionPollutant]:
    """Resolve every emission name, failing on the first unknown one."""
    return [resolve_emission(name) for name in names]
