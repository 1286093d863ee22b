"""
Gas Cost Table
^^^^^^^^^^^^^^

Prices of single instructions. Prices that never change live in the tier
table, prices that changed with a protocol upgrade live in the versioned
table, and every other named constant is provided by the fork's
`gas_costs()`.
"""

from typing import Dict, NamedTuple, Tuple

from evm_assembly import Instruction, InvalidInstructionError, Tier
from evm_versions import Fork, SpuriousDragon, TangerineWhistle

STACK_LIMIT = 1024

JUMPDEST_GAS = 1

# Indexed by `Tier`.
TIER_GAS: Tuple[int, ...] = (0, 1, 1, 2, 3, 4, 7, 0)


class VersionedPrice(NamedTuple):
    """A price that changed when the `threshold` fork activated."""

    threshold: Fork
    before: int
    after: int

    def at(self, fork: Fork) -> int:
        """Return the price in effect at `fork`."""
        return self.after if fork >= self.threshold else self.before


EXT_CODE_GAS = "ext_code"
BALANCE_GAS = "balance"
EXP_BYTE_GAS = "exp_byte"
SLOAD_GAS = "sload"
CALL_GAS = "call"
SELFDESTRUCT_GAS = "selfdestruct"

VERSIONED_GAS: Dict[str, VersionedPrice] = {
    EXT_CODE_GAS: VersionedPrice(TangerineWhistle, 20, 45),
    BALANCE_GAS: VersionedPrice(TangerineWhistle, 20, 25),
    EXP_BYTE_GAS: VersionedPrice(SpuriousDragon, 10, 4),
    SLOAD_GAS: VersionedPrice(TangerineWhistle, 50, 20),
    CALL_GAS: VersionedPrice(TangerineWhistle, 40, 45),
    SELFDESTRUCT_GAS: VersionedPrice(TangerineWhistle, 0, 350),
}

VERSIONED_INSTRUCTIONS: Dict[Instruction, str] = {
    Instruction.EXTCODESIZE: EXT_CODE_GAS,
    Instruction.EXTCODECOPY: EXT_CODE_GAS,
    Instruction.EXTCODEHASH: EXT_CODE_GAS,
    Instruction.BALANCE: BALANCE_GAS,
    Instruction.EXP: EXP_BYTE_GAS,
    Instruction.SLOAD: SLOAD_GAS,
    Instruction.CALL: CALL_GAS,
    Instruction.CALLCODE: CALL_GAS,
    Instruction.DELEGATECALL: CALL_GAS,
    Instruction.STATICCALL: CALL_GAS,
    Instruction.SELFDESTRUCT: SELFDESTRUCT_GAS,
}


def versioned_gas(price_name: str, fork: Fork) -> int:
    """Return the named versioned price in effect at `fork`."""
    return VERSIONED_GAS[price_name].at(fork)


def has_versioned_cost(instruction: Instruction) -> bool:
    """Return true if a price of `instruction` depends on the fork."""
    return instruction in VERSIONED_INSTRUCTIONS


def versioned_cost(instruction: Instruction, fork: Fork) -> int:
    """
    Return the fork dependent price of `instruction`.

    For EXP this is the price per exponent byte, for the call family and
    EXTCODECOPY the base price the dynamic costs are added to.
    """
    if instruction not in VERSIONED_INSTRUCTIONS:
        raise InvalidInstructionError(f"{instruction} has no fork dependent price")
    return versioned_gas(VERSIONED_INSTRUCTIONS[instruction], fork)


def run_gas(instruction: Instruction) -> int:
    """
    Return the gas cost of an instruction with a constant price that does not
    change with the fork.
    """
    if instruction == Instruction.JUMPDEST:
        return JUMPDEST_GAS
    if instruction.tier == Tier.SPECIAL:
        raise InvalidInstructionError(f"Invalid gas tier for instruction {instruction}")
    return TIER_GAS[instruction.tier]


fixed_tier_cost = run_gas
