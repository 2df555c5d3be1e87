"""&AIM configuration namelist parser and writer.

Parses a Fortran-namelist style configuration block into a
SimulationConfig dataclass, and provides reverse generation (write) from
a SimulationConfig back to namelist text::

    &AIM
     DAYS = 15.0,
     THRESH = 1e-06,
     WETDEP = .TRUE.,
    /
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

from pyaim.core.models import ConfigParseError, SimulationConfig

logger = logging.getLogger(__name__)


# Mapping from namelist keys to SimulationConfig field names + types
_AIM_KEY_MAP: dict[str, tuple[str, type]] = {
    "DAYS": ("days_to_run", float),
    "THRESH": ("threshold_factor", float),
    "NWORK": ("num_workers", int),
    "SEED": ("seed", int),
    "PDIAM": ("particle_diameter", float),
    "PDENS": ("particle_density", float),
    "VOCOX": ("voc_oxidation_rate", float),
    "SCAVA": ("scavenging_a", float),
    "SCAVB": ("scavenging_b", float),
    "WETDEP": ("wet_deposition", bool),
    "PARTITION": ("chemical_partitioning", bool),
}

_PAIR_RE = re.compile(r'(\w+)\s*=\s*([^,/\n]+)')


def _parse_value(key: str, val: str, field_type: type, line_number: int):
    if field_type is bool:
        # Fortran booleans: .TRUE., .FALSE., T, F, 1, 0
        val_upper = val.upper().strip('.')
        if val_upper in ('TRUE', 'T', '1'):
            return True
        if val_upper in ('FALSE', 'F', '0'):
            return False
        raise ConfigParseError(
            f"Cannot parse boolean '{val}' for {key}",
            line_number=line_number,
            expected=".TRUE. or .FALSE.",
        )
    try:
        if field_type is int:
            try:
                return int(val)
            except ValueError:
                return int(float(val))
        return float(val)
    except ValueError:
        raise ConfigParseError(
            f"Cannot parse {field_type.__name__} '{val}' for {key}",
            line_number=line_number,
            expected=field_type.__name__,
        ) from None


def parse_aim_cfg(text: str) -> dict:
    """Parse an &AIM namelist block.

    Parameters
    ----------
    text : str
        Full text content of the configuration file.

    Returns
    -------
    dict
        Key-value pairs using SimulationConfig field names.

    Raises
    ------
    ConfigParseError
        If a recognised key has a value of the wrong type.
    """
    result: dict = {}

    for line_number, line in enumerate(text.splitlines(), start=1):
        # Strip the &AIM ... / block markers and comments
        content = line.split('!', 1)[0]
        content = re.sub(r'&AIM\b', '', content, flags=re.IGNORECASE)
        content = re.sub(r'&END\b', '', content, flags=re.IGNORECASE)
        content = re.sub(r'/\s*$', '', content)

        for key_raw, val_raw in _PAIR_RE.findall(content):
            key = key_raw.strip().upper()
            val = val_raw.strip().rstrip(',')
            if key not in _AIM_KEY_MAP:
                logger.warning("Ignoring unknown configuration key %s (line %d)",
                               key, line_number)
                continue
            field_name, field_type = _AIM_KEY_MAP[key]
            result[field_name] = _parse_value(key, val, field_type, line_number)

    return result


def parse_config(text: str) -> SimulationConfig:
    """Parse &AIM namelist text into a SimulationConfig.

    Fields absent from *text* keep their defaults.
    """
    return SimulationConfig(**parse_aim_cfg(text))


def load_config(filepath: str | Path) -> SimulationConfig:
    """Read and parse an &AIM configuration file."""
    return parse_config(Path(filepath).read_text())


# ---------------------------------------------------------------------------
# Writer
# ---------------------------------------------------------------------------

# Reverse mapping: SimulationConfig field name → namelist key
_FIELD_TO_AIM_KEY: dict[str, str] = {v[0]: k for k, v in _AIM_KEY_MAP.items()}


def write_aim_cfg(config: SimulationConfig) -> str:
    """Generate an &AIM namelist from a SimulationConfig.

    Optional fields that are unset (None) are omitted.
    """
    lines: list[str] = ["&AIM"]

    for field_name, aim_key in _FIELD_TO_AIM_KEY.items():
        value = getattr(config, field_name)
        if value is None:
            continue
        if isinstance(value, bool):
            lines.append(f" {aim_key} = {'.TRUE.' if value else '.FALSE.'},")
        else:
            lines.append(f" {aim_key} = {value!r},")

    lines.append(" /")
    return "\n".join(lines) + "\n"
