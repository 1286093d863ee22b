"""
Abstract machine state tracked along a straight-line sequence of assembly items.

The state records, for every stack height, storage slot and memory offset it
knows about, the expression class of the value held there. Feeding an item
applies the item's effect on the stack, memory and storage. States are never
rolled back: to analyze the successors of a branch, `copy()` the state and
feed each copy independently.
"""

import logging
from types import MappingProxyType
from typing import Dict, Mapping, Optional

from .assembly_item import AssemblyItem, AssemblyItemType
from .expression_classes import CONSTANT_FOLDING, ExpressionClasses
from .instructions import (
    Instruction,
    is_dup_instruction,
    is_push_instruction,
    is_swap_instruction,
)

logger = logging.getLogger(__name__)

# Results depend on more than the arguments, so equal arguments do not imply equal values.
VOLATILE_INSTRUCTIONS = frozenset(
    {
        Instruction.KECCAK256,
        Instruction.GAS,
        Instruction.PC,
        Instruction.MSIZE,
        Instruction.RETURNDATASIZE,
        Instruction.BALANCE,
        Instruction.EXTCODESIZE,
        Instruction.EXTCODEHASH,
    }
)

MEMORY_WRITERS = frozenset(
    {
        Instruction.CALLDATACOPY,
        Instruction.CODECOPY,
        Instruction.EXTCODECOPY,
        Instruction.RETURNDATACOPY,
        Instruction.CALL,
        Instruction.CALLCODE,
        Instruction.DELEGATECALL,
        Instruction.STATICCALL,
    }
)

STORAGE_WRITERS = frozenset(
    {
        Instruction.CALL,
        Instruction.CALLCODE,
        Instruction.DELEGATECALL,
        Instruction.CREATE,
        Instruction.CREATE2,
    }
)


class KnownState:
    """Known stack, memory and storage contents of a straight-line code path."""

    def __init__(self, expression_classes: Optional[ExpressionClasses] = None) -> None:
        """Initialize a state about which nothing is known."""
        self._expression_classes = (
            expression_classes if expression_classes is not None else ExpressionClasses()
        )
        self._stack_height = 0
        self._stack_elements: Dict[int, int] = {}
        self._initial_elements: Dict[int, int] = {}
        self._storage_content: Dict[int, int] = {}
        self._memory_content: Dict[int, int] = {}

    @property
    def expression_classes(self) -> ExpressionClasses:
        """Return the expression class table owned by this state."""
        return self._expression_classes

    @property
    def stack_height(self) -> int:
        """Return the stack height relative to the start of the path."""
        return self._stack_height

    @property
    def storage_content(self) -> Mapping[int, int]:
        """Return the known storage contents, keyed by the class of the slot."""
        return MappingProxyType(self._storage_content)

    @property
    def memory_content(self) -> Mapping[int, int]:
        """Return the known memory words, keyed by the class of the offset."""
        return MappingProxyType(self._memory_content)

    def copy(self) -> "KnownState":
        """Return an independent state to be fed along a different path."""
        state = KnownState(self._expression_classes.copy())
        state._stack_height = self._stack_height
        state._stack_elements = dict(self._stack_elements)
        state._initial_elements = dict(self._initial_elements)
        state._storage_content = dict(self._storage_content)
        state._memory_content = dict(self._memory_content)
        return state

    def stack_element(self, height: int) -> int:
        """Return the class of the stack element at the given absolute height."""
        if height not in self._stack_elements:
            self._stack_elements[height] = self._initial_stack_element(height)
        return self._stack_elements[height]

    def relative_stack_element(self, offset: int) -> int:
        """
        Return the class of the stack element `offset` positions from the top.

        `0` is the top of the stack, `-1` the element below it and so on.
        """
        return self.stack_element(self._stack_height + offset)

    def feed_item(self, item: AssemblyItem) -> None:
        """Apply the effect of `item` to the state."""
        if item.type == AssemblyItemType.TAG:
            return
        if item.type == AssemblyItemType.UNDEFINED:
            logger.debug("Undefined item, forgetting memory and storage contents")
            self._memory_content.clear()
            self._storage_content.clear()
            return
        if item.type != AssemblyItemType.OPERATION:
            self._push(self._expression_classes.find(item))
            return

        instruction = item.instruction
        assert instruction is not None
        if is_dup_instruction(instruction):
            self._push(self.relative_stack_element(1 - instruction.args))
        elif is_swap_instruction(instruction):
            self._swap(instruction.args - 1)
        elif instruction == Instruction.POP:
            self._pop(1)
        elif instruction == Instruction.MSTORE:
            self._store_in_memory(self.relative_stack_element(0), self.relative_stack_element(-1))
            self._pop(2)
        elif instruction == Instruction.MSTORE8:
            self._invalidate_memory(self.relative_stack_element(0), width=1)
            self._pop(2)
        elif instruction == Instruction.MLOAD:
            value = self._load_from_memory(self.relative_stack_element(0))
            self._pop(1)
            self._push(value)
        elif instruction == Instruction.SSTORE:
            self._store_in_storage(self.relative_stack_element(0), self.relative_stack_element(-1))
            self._pop(2)
        elif instruction == Instruction.SLOAD:
            value = self._load_from_storage(self.relative_stack_element(0))
            self._pop(1)
            self._push(value)
        else:
            self._feed_operation(instruction)

    def _feed_operation(self, instruction: Instruction) -> None:
        args = [self.relative_stack_element(-i) for i in range(instruction.args)]
        if instruction in MEMORY_WRITERS:
            self._memory_content.clear()
        if instruction in STORAGE_WRITERS:
            self._storage_content.clear()
        self._pop(instruction.args)
        if instruction.ret == 0:
            return
        if is_push_instruction(instruction):
            # An operation item does not carry the pushed value.
            self._push(self._expression_classes.new_class(instruction))
        elif instruction in CONSTANT_FOLDING or not (
            instruction.info.side_effects or instruction in VOLATILE_INSTRUCTIONS
        ):
            self._push(self._expression_classes.find(instruction, args))
        else:
            self._push(self._expression_classes.new_class((instruction, tuple(args))))

    def _initial_stack_element(self, height: int) -> int:
        if height not in self._initial_elements:
            self._initial_elements[height] = self._expression_classes.new_class(
                ("initial", height)
            )
        return self._initial_elements[height]

    def _push(self, class_id: int) -> None:
        self._stack_height += 1
        self._stack_elements[self._stack_height] = class_id

    def _pop(self, count: int) -> None:
        for _ in range(count):
            self._stack_elements.pop(self._stack_height, None)
            self._stack_height -= 1

    def _swap(self, depth: int) -> None:
        top = self.relative_stack_element(0)
        other = self.relative_stack_element(-depth)
        self._stack_elements[self._stack_height] = other
        self._stack_elements[self._stack_height - depth] = top

    def _invalidate_memory(self, offset: int, width: int) -> None:
        start = self._expression_classes.known_constant(offset)
        if start is None:
            self._memory_content.clear()
            return
        for key in list(self._memory_content):
            other = self._expression_classes.known_constant(key)
            # A word stored at `other` overlaps the written bytes unless disjoint.
            if other is None or (
                int(other) < int(start) + width and int(start) < int(other) + 32
            ):
                del self._memory_content[key]

    def _store_in_memory(self, offset: int, value: int) -> None:
        self._invalidate_memory(offset, width=32)
        self._memory_content[offset] = value

    def _load_from_memory(self, offset: int) -> int:
        if offset in self._memory_content:
            return self._memory_content[offset]
        value = self._expression_classes.new_class((Instruction.MLOAD, offset))
        self._memory_content[offset] = value
        return value

    def _store_in_storage(self, slot: int, value: int) -> None:
        slot_value = self._expression_classes.known_constant(slot)
        for key in list(self._storage_content):
            other = self._expression_classes.known_constant(key)
            if slot_value is None or other is None or other == slot_value:
                del self._storage_content[key]
        self._storage_content[slot] = value

    def _load_from_storage(self, slot: int) -> int:
        if slot in self._storage_content:
            return self._storage_content[slot]
        value = self._expression_classes.new_class((Instruction.SLOAD, slot))
        self._storage_content[slot] = value
        return value
