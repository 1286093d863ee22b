"""Static upper bounds on the gas consumption of EVM assembly items."""

from .consumption import INFINITE_GAS_MARKER, GasConsumption
from .cost_table import TIER_GAS, run_gas, versioned_cost
from .estimator import GasEstimate, data_gas, estimate_block, format_estimate, split_basic_blocks
from .gas_meter import GasMeter, KnownStateOracle

__all__ = (
    "INFINITE_GAS_MARKER",
    "TIER_GAS",
    "GasConsumption",
    "GasEstimate",
    "GasMeter",
    "KnownStateOracle",
    "data_gas",
    "estimate_block",
    "format_estimate",
    "run_gas",
    "split_basic_blocks",
    "versioned_cost",
)
