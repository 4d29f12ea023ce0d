from __future__ import annotations

from .errors import InvalidConfiguration

MIN_CORES = 1
MAX_CORES = 16
DEFAULT_NUM_CORES = 4

MIN_PRIORITY = 0
MAX_PRIORITY = 255
DEFAULT_PRIORITY = 128

# Power drawn per unit of burst time.
POWER_PER_TIME_UNIT = 0.1

DEFAULT_QUANTUM = 2

EXAMPLE_BURST_TIMES = (10, 5, 8, 3)


def validate_core_count(num_cores: int) -> int:
    """
    Return ``num_cores`` unchanged if it is an allowed core count.
    """
    if isinstance(num_cores, bool) or not isinstance(num_cores, int):
        raise InvalidConfiguration(f"Core count must be an integer, got {num_cores!r}")
    if not MIN_CORES <= num_cores <= MAX_CORES:
        raise InvalidConfiguration(
            f"Core count must be between {MIN_CORES} and {MAX_CORES}, got {num_cores}"
        )
    return num_cores
