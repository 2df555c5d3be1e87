"""Output assembly: internal species fields to reported pollutants (μg/m³)."""

from __future__ import annotations

from typing import Sequence

import numpy as np

from pyaim.core.species import OUTPUT_TABLE, TOTAL_PM25_COMPONENTS


def assemble_output(final: Sequence[np.ndarray]) -> dict[str, np.ndarray]:
    """Convert end-of-run species fields into output pollutant fields.

    Gaseous N and S species are converted back to the emitted compound
    and particulate N and S to ammonium, nitrate and sulfate mass.
    ``TotalPM2_5`` is primary PM2.5 plus SOA, pNH4, pSO4 and pNO3. Every
    returned array is newly allocated.
    """
    output: dict[str, np.ndarray] = {}
    for name, (species, scale) in OUTPUT_TABLE.items():
        output[name] = final[species] * scale

    total = output[TOTAL_PM25_COMPONENTS[0]].copy()
    for name in TOTAL_PM25_COMPONENTS[1:]:
        total += output[name]
    output["TotalPM2_5"] = total
    return output


def to_internal(name: str, values: np.ndarray) -> np.ndarray:
    """Inverse of the output conversion for a single pollutant."""
    try:
        _, scale = OUTPUT_TABLE[name]
    except KeyError:
        raise KeyError(f"{name!r} is not a per-species output") from None
    return np.asarray(values, dtype=np.float64) / scale
