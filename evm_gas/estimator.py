"""
Block estimation helpers built on top of `GasMeter`.

A meter only understands straight-line code. These helpers cut an item
sequence into basic blocks, run a fresh meter over each block and render
the result for diagnostics.
"""

from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from config import GasMeterConfig
from evm_assembly import AssemblyItem, AssemblyItemType, Instruction, KnownState
from evm_versions import Fork
from logger import setup_logger

from .consumption import GasConsumption
from .gas_meter import GasMeter, KnownStateOracle

logger = setup_logger(__name__)

# Items after which control does not fall through to the next item.
BLOCK_TERMINATORS = frozenset(
    {
        Instruction.JUMP,
        Instruction.JUMPI,
        Instruction.STOP,
        Instruction.RETURN,
        Instruction.REVERT,
        Instruction.INVALID,
        Instruction.SELFDESTRUCT,
    }
)


@dataclass
class GasEstimate:
    """Result of estimating a straight-line block."""

    total: GasConsumption = field(default_factory=GasConsumption)
    per_item: List[GasConsumption] = field(default_factory=list)
    largest_memory_access: int = 0

    @property
    def is_bounded(self) -> bool:
        """Return true if a finite bound was found for the whole block."""
        return not self.total.is_infinite


def estimate_block(
    items: Iterable[AssemblyItem],
    fork: Optional[Fork] = None,
    state: Optional[KnownStateOracle] = None,
    include_external_costs: Optional[bool] = None,
) -> GasEstimate:
    """
    Estimate the maximum gas consumed by a straight-line sequence of items.

    The given `state` is copied, never modified. Missing arguments are taken
    from `GasMeterConfig`.
    """
    config = GasMeterConfig()
    if fork is None:
        fork = config.DEFAULT_FORK
    if include_external_costs is None:
        include_external_costs = config.INCLUDE_EXTERNAL_COSTS
    state = KnownState() if state is None else state.copy()

    meter = GasMeter(state, fork)
    estimate = GasEstimate()
    for item in items:
        gas = meter.estimate_max(item, include_external_costs)
        estimate.per_item.append(gas)
        estimate.total += gas
    estimate.largest_memory_access = meter.largest_memory_access

    logger.debug(
        f"Estimated {len(estimate.per_item)} items at {fork.name()}: {estimate.total}"
    )
    return estimate


def split_basic_blocks(items: Iterable[AssemblyItem]) -> List[List[AssemblyItem]]:
    """
    Split a sequence of items into basic blocks.

    A block starts at every tag and ends after every jump or terminating
    instruction. Empty blocks are dropped.
    """
    blocks: List[List[AssemblyItem]] = []
    current: List[AssemblyItem] = []
    for item in items:
        if item.type == AssemblyItemType.TAG and current:
            blocks.append(current)
            current = []
        current.append(item)
        if item.type == AssemblyItemType.OPERATION and item.instruction in BLOCK_TERMINATORS:
            blocks.append(current)
            current = []
    if current:
        blocks.append(current)
    return blocks


def format_estimate(items: Iterable[AssemblyItem], estimate: GasEstimate) -> str:
    """Render the per-item costs of an estimate, one item per line."""
    lines = [f"{str(gas):>8}  {item}" for item, gas in zip(items, estimate.per_item)]
    lines.append(f"{str(estimate.total):>8}  total")
    lines.append(f"largest memory access: {estimate.largest_memory_access}")
    return "\n".join(lines)


def data_gas(data: bytes, fork: Fork, in_creation: bool = False) -> int:
    """
    Return the gas paid for including `data` in the chain.

    During contract creation the code deposit price is paid for every byte,
    otherwise the transaction data prices for zero and non-zero bytes.
    """
    if in_creation:
        return fork.code_deposit_gas_calculator()(code=data)
    return fork.calldata_gas_calculator()(data=data)
