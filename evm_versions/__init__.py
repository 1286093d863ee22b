"""
EVM protocol version (fork) definitions.
"""

from .base_fork import BaseFork
from .forks.forks import (
    Byzantium,
    Constantinople,
    Homestead,
    Petersburg,
    SpuriousDragon,
    TangerineWhistle,
)
from .gas_costs import GasCosts
from .helpers import (
    Fork,
    InvalidForkError,
    forks_from,
    forks_from_until,
    get_fork_by_name,
    get_forks,
)

__all__ = [
    "BaseFork",
    "Fork",
    "GasCosts",
    "Byzantium",
    "Constantinople",
    "Homestead",
    "InvalidForkError",
    "Petersburg",
    "SpuriousDragon",
    "TangerineWhistle",
    "forks_from",
    "forks_from_until",
    "get_fork_by_name",
    "get_forks",
]
