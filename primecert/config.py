"""
Library configuration.

Responsibility: tunable limits and constants. Values affect performance
and resource ceilings only, never the correctness of a verdict.
"""

from dataclasses import dataclass, asdict, fields, replace
from pathlib import Path
from typing import Any, Dict, Union

import yaml

from .errors import InvalidArgument


@dataclass(frozen=True)
class PrimeConfig:
    """Limits for classification and generation.

    random_bits
        Width B of the random source word (uniform below 2^B).
    retry_limit
        Candidates tried before RandomSourceExhausted is raised.
    max_bits, max_digits
        Precision ceilings for the sized generators.
    small_range_limit
        Ranges whose upper prime is below this use rank selection.
    bpsw_threshold
        Deterministic Miller-Rabin is used below this, BPSW above.
    maurer_*
        Maurer construction constants (performance only).
    """
    random_bits: int = 31
    retry_limit: int = 2_000_000
    max_bits: int = 100_000
    max_digits: int = 10_000
    small_range_limit: int = 30_000
    bpsw_threshold: int = 105_936_894_253
    maurer_base_bits: int = 32
    maurer_fraction: float = 0.5
    maurer_trial_coefficient: float = 0.09
    maurer_min_gap: int = 24
    maurer_trial_limit: int = 1 << 22

    def __post_init__(self):
        if not 1 <= self.random_bits <= 62:
            raise InvalidArgument(f"random_bits={self.random_bits} must be in [1, 62]")
        if self.retry_limit < 1:
            raise InvalidArgument("retry_limit must be positive")
        if self.bpsw_threshold > 1 << 64:
            raise InvalidArgument("bpsw_threshold must not exceed 2^64")
        if not 16 <= self.maurer_base_bits <= 64:
            raise InvalidArgument("maurer_base_bits must be in [16, 64]")
        # Below 0.5 the Pocklington bound (q+1)^2 > n cannot hold; above
        # 0.75 small levels stop shrinking.
        if not 0.5 <= self.maurer_fraction <= 0.75:
            raise InvalidArgument("maurer_fraction must be in [0.5, 0.75]")
        if self.maurer_min_gap < 4 or self.maurer_trial_limit < 2:
            raise InvalidArgument("maurer_min_gap must be >= 4 and maurer_trial_limit >= 2")

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def updated(self, **changes) -> 'PrimeConfig':
        return replace(self, **changes)


DEFAULT_CONFIG = PrimeConfig()


def load_config(path: Union[str, Path], section: str = 'primes') -> PrimeConfig:
    """
    Read a PrimeConfig from a YAML file.

    The file may hold the settings at top level or under ``section``
    (config/default.yaml keeps them under ``primes`` next to the
    experiment settings). Unknown keys are rejected.

    Parameters
    ----------
    path : str or Path
        YAML file.
    section : str
        Mapping key holding the library settings.

    Returns
    -------
    PrimeConfig
    """
    with open(path) as f:
        data = yaml.safe_load(f) or {}

    if section in data:
        data = data[section] or {}

    known = {f.name for f in fields(PrimeConfig)}
    unknown = set(data) - known
    if unknown:
        raise InvalidArgument(f"Unknown config keys: {sorted(unknown)}")

    return DEFAULT_CONFIG.updated(**data)
