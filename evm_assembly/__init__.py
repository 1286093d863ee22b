"""EVM assembly items and the abstract state tracked while walking them."""

from .assembly_item import AssemblyItem, AssemblyItemType
from .expression_classes import ExpressionClasses
from .instructions import (
    Instruction,
    InstructionInfo,
    InvalidInstructionError,
    Tier,
    dup_instruction,
    log_instruction,
    push_instruction,
    swap_instruction,
)
from .known_state import KnownState

__all__ = (
    "AssemblyItem",
    "AssemblyItemType",
    "ExpressionClasses",
    "Instruction",
    "InstructionInfo",
    "InvalidInstructionError",
    "KnownState",
    "Tier",
    "dup_instruction",
    "log_instruction",
    "push_instruction",
    "swap_instruction",
)
