"""
Gas Meter
^^^^^^^^^

Upper bounds on the gas consumed by single assembly items.

A `GasMeter` walks one straight-line path of assembly items. Each call to
`estimate_max` returns a bound for one item and feeds that item to the known
state, so the next call sees its effect on the stack, memory and storage. At
a control flow branch, construct a new meter on a `copy()` of the state for
every successor.
"""

import logging
from typing import Mapping, Protocol

from evm_assembly import (
    AssemblyItem,
    AssemblyItemType,
    ExpressionClasses,
    Instruction,
)
from evm_assembly.assembly_item import PUSH_LIKE_TYPES
from evm_assembly.instructions import is_log_instruction
from evm_versions import Fork

from . import cost_table
from .consumption import GasConsumption

logger = logging.getLogger(__name__)

# Instructions whose whole price is the fork dependent price.
DIRECTLY_VERSIONED = frozenset(
    {
        Instruction.SLOAD,
        Instruction.BALANCE,
        Instruction.EXTCODESIZE,
        Instruction.EXTCODEHASH,
    }
)

CALL_INSTRUCTIONS = frozenset(
    {
        Instruction.CALL,
        Instruction.CALLCODE,
        Instruction.DELEGATECALL,
        Instruction.STATICCALL,
    }
)

COPY_INSTRUCTIONS = frozenset(
    {
        Instruction.CALLDATACOPY,
        Instruction.CODECOPY,
        Instruction.RETURNDATACOPY,
    }
)


class KnownStateOracle(Protocol):
    """The abstract machine state consumed by the gas meter."""

    @property
    def expression_classes(self) -> ExpressionClasses:
        """Return the table resolving class ids to known constants."""
        ...

    @property
    def storage_content(self) -> Mapping[int, int]:
        """Return the known storage contents, keyed by the class of the slot."""
        ...

    def relative_stack_element(self, offset: int) -> int:
        """Return the class of the stack element `offset` positions from the top."""
        ...

    def feed_item(self, item: AssemblyItem) -> None:
        """Apply the effect of `item` to the state."""
        ...

    def copy(self) -> "KnownStateOracle":
        """Return an independent copy of the state."""
        ...


class GasMeter:
    """
    Computes the maximum gas consumption of assembly items.

    The meter must be fed strictly subsequent items of a single path. The
    state is shared with the caller and updated in place; the meter itself
    only adds the largest memory offset accessed so far.
    """

    def __init__(
        self, state: KnownStateOracle, fork: Fork, largest_memory_access: int = 0
    ) -> None:
        """Construct a new gas meter given the current state."""
        self._state = state
        self._fork = fork
        self._gas_costs = fork.gas_costs()
        self._memory_expansion_gas = fork.memory_expansion_gas_calculator()
        self._largest_memory_access = largest_memory_access

    @property
    def state(self) -> KnownStateOracle:
        """Return the state updated by this meter."""
        return self._state

    @property
    def fork(self) -> Fork:
        """Return the fork whose prices are used."""
        return self._fork

    @property
    def largest_memory_access(self) -> int:
        """Return the largest memory offset accessed since the creation of the meter."""
        return self._largest_memory_access

    @staticmethod
    def run_gas(instruction: Instruction) -> int:
        """Return the price of an instruction with a constant, fork independent price."""
        return cost_table.run_gas(instruction)

    def estimate_max(
        self, item: AssemblyItem, include_external_costs: bool = True
    ) -> GasConsumption:
        """
        Return an upper bound on the gas consumed by `item` and update the state.

        If `include_external_costs` is false, surcharges paid on behalf of the
        called contract (value transfer, stipend, account creation) are left
        out and only the cost local to the caller is returned.
        """
        gas = self._estimate(item, include_external_costs)
        if gas.is_infinite:
            logger.debug(f"No finite gas bound for {item}")
        self._state.feed_item(item)
        return gas

    def _estimate(self, item: AssemblyItem, include_external_costs: bool) -> GasConsumption:
        if item.type in PUSH_LIKE_TYPES:
            return GasConsumption(self.run_gas(Instruction.PUSH1))
        if item.type == AssemblyItemType.TAG:
            return GasConsumption(self.run_gas(Instruction.JUMPDEST))
        if item.type != AssemblyItemType.OPERATION:
            return GasConsumption.infinite()

        instruction = item.instruction
        assert instruction is not None
        gas_costs = self._gas_costs
        classes = self._state.expression_classes

        if instruction in DIRECTLY_VERSIONED:
            return GasConsumption(cost_table.versioned_cost(instruction, self._fork))

        if instruction == Instruction.SSTORE:
            slot = self._state.relative_stack_element(0)
            value = self._state.relative_stack_element(-1)
            storage = self._state.storage_content
            if classes.known_zero(value) or (
                slot in storage and classes.known_non_zero(storage[slot])
            ):
                # TODO: take the refund for clearing a slot into account
                return GasConsumption(gas_costs.G_STORAGE_RESET)
            return GasConsumption(gas_costs.G_STORAGE_SET)

        if instruction in (Instruction.RETURN, Instruction.REVERT):
            return GasConsumption(self.run_gas(instruction)) + self.memory_gas_for(0, -1)

        if instruction in (Instruction.MLOAD, Instruction.MSTORE):
            return GasConsumption(self.run_gas(instruction)) + self._memory_gas_after_top(32)

        if instruction == Instruction.MSTORE8:
            return GasConsumption(self.run_gas(instruction)) + self._memory_gas_after_top(1)

        if instruction == Instruction.KECCAK256:
            return (
                GasConsumption(gas_costs.G_KECCAK_256)
                + self.memory_gas_for(0, -1)
                + self.word_gas(
                    gas_costs.G_KECCAK_256_WORD, self._state.relative_stack_element(-1)
                )
            )

        if instruction in COPY_INSTRUCTIONS:
            return (
                GasConsumption(self.run_gas(instruction))
                + self.memory_gas_for(0, -2)
                + self.word_gas(gas_costs.G_COPY, self._state.relative_stack_element(-2))
            )

        if instruction == Instruction.EXTCODECOPY:
            return (
                GasConsumption(cost_table.versioned_cost(instruction, self._fork))
                + self.memory_gas_for(-1, -3)
                + self.word_gas(gas_costs.G_COPY, self._state.relative_stack_element(-3))
            )

        if is_log_instruction(instruction):
            topics = instruction.value - Instruction.LOG0.value
            gas = GasConsumption(gas_costs.G_LOG + gas_costs.G_LOG_TOPIC * topics)
            gas += self.memory_gas_for(0, -1)
            size = classes.known_constant(self._state.relative_stack_element(-1))
            if size is None:
                return GasConsumption.infinite()
            return gas + gas_costs.G_LOG_DATA * int(size)

        if instruction in CALL_INSTRUCTIONS:
            return self._call_gas(instruction, include_external_costs)

        if instruction == Instruction.SELFDESTRUCT:
            gas = GasConsumption(cost_table.versioned_cost(instruction, self._fork))
            if include_external_costs:
                # We very rarely know whether the beneficiary exists.
                gas += gas_costs.G_NEW_ACCOUNT
            return gas

        if instruction in (Instruction.CREATE, Instruction.CREATE2):
            if include_external_costs:
                # The init code is not known, so its consumption is unbounded.
                return GasConsumption.infinite()
            gas = GasConsumption(gas_costs.G_CREATE) + self.memory_gas_for(-1, -2)
            if instruction == Instruction.CREATE2:
                gas += self.word_gas(
                    gas_costs.G_KECCAK_256_WORD, self._state.relative_stack_element(-2)
                )
            return gas

        if instruction == Instruction.EXP:
            gas = GasConsumption(gas_costs.G_EXP)
            byte_gas = cost_table.versioned_cost(instruction, self._fork)
            exponent = classes.known_constant(self._state.relative_stack_element(-1))
            if exponent is None:
                return gas + byte_gas * 32
            return gas + byte_gas * ((int(exponent).bit_length() + 7) // 8)

        return GasConsumption(self.run_gas(instruction))

    def _call_gas(self, instruction: Instruction, include_external_costs: bool) -> GasConsumption:
        gas_costs = self._gas_costs
        classes = self._state.expression_classes

        value_size = 1
        if instruction in (Instruction.DELEGATECALL, Instruction.STATICCALL):
            value_size = 0

        gas = GasConsumption(cost_table.versioned_cost(instruction, self._fork))
        gas += self.memory_gas_for(-2 - value_size, -3 - value_size)
        gas += self.memory_gas_for(-4 - value_size, -5 - value_size)
        if not include_external_costs:
            return gas

        if instruction == Instruction.CALL:
            # We very rarely know whether the address exists.
            gas += gas_costs.G_NEW_ACCOUNT
        if value_size and not classes.known_zero(self._state.relative_stack_element(-2)):
            gas += gas_costs.G_CALL_VALUE + gas_costs.G_CALL_STIPEND
        return gas

    def word_gas(self, multiplier: int, position: int) -> GasConsumption:
        """
        Return `multiplier` times the number of words needed for the byte size
        held by class `position`, or unbounded if the size is not known.
        """
        value = self._state.expression_classes.known_constant(position)
        if value is None:
            return GasConsumption.infinite()
        return GasConsumption(multiplier * ((int(value) + 31) // 32))

    def memory_gas(self, position: int) -> GasConsumption:
        """
        Return the gas needed to access memory up to the offset held by class
        `position`.

        The charge assumes memory was never accessed before, which over-estimates
        the cost of every access after the first one.
        """
        value = self._state.expression_classes.known_constant(position)
        if value is None:
            return GasConsumption.infinite()
        return self._memory_gas_up_to(int(value))

    def memory_gas_for(self, stack_pos_offset: int, stack_pos_size: int) -> GasConsumption:
        """
        Return the gas needed to access the memory area given by an offset and a
        size on the stack, relative to the top.
        """
        classes = self._state.expression_classes
        size = classes.known_constant(self._state.relative_stack_element(stack_pos_size))
        if size is not None and int(size) == 0:
            return GasConsumption(0)
        offset = classes.known_constant(self._state.relative_stack_element(stack_pos_offset))
        if offset is None or size is None:
            return GasConsumption.infinite()
        return self._memory_gas_up_to(int(offset) + int(size))

    def _memory_gas_after_top(self, width: int) -> GasConsumption:
        classes = self._state.expression_classes
        offset = classes.known_constant(self._state.relative_stack_element(0))
        if offset is None:
            return GasConsumption.infinite()
        return self._memory_gas_up_to(int(offset) + width)

    def _memory_gas_up_to(self, end: int) -> GasConsumption:
        # `end` may exceed 2**256; the area is never wrapped around.
        self._largest_memory_access = max(self._largest_memory_access, end)
        return GasConsumption(self._memory_expansion_gas(new_bytes=end))
