"""
Value numbering for stack and memory values.

Every distinct expression (a pushed literal, an instruction applied to some
argument classes, or a fresh unknown value) is assigned an integer id. Two
expressions evaluating to the same constant share an id, so ids can be
compared to detect equal values across instructions.
"""

from typing import Callable, Dict, Hashable, List, NamedTuple, Optional, Sequence, Tuple

from ethereum_types.numeric import U256

from .assembly_item import AssemblyItem, AssemblyItemType
from .instructions import Instruction


def _shl(shift: U256, value: U256) -> U256:
    if int(shift) >= 256:
        return U256(0)
    return U256((int(value) << int(shift)) & int(U256.MAX_VALUE))


def _shr(shift: U256, value: U256) -> U256:
    if int(shift) >= 256:
        return U256(0)
    return value >> shift


def _byte(index: U256, value: U256) -> U256:
    if int(index) >= 32:
        return U256(0)
    return U256((int(value) >> (248 - 8 * int(index))) & 0xFF)


def _bool(condition: bool) -> U256:
    return U256(1) if condition else U256(0)


# Arguments are ordered from the top of the stack downwards.
CONSTANT_FOLDING: Dict[Instruction, Callable[..., U256]] = {
    Instruction.ADD: lambda a, b: a.wrapping_add(b),
    Instruction.SUB: lambda a, b: a.wrapping_sub(b),
    Instruction.MUL: lambda a, b: a.wrapping_mul(b),
    Instruction.DIV: lambda a, b: U256(0) if b == 0 else a // b,
    Instruction.MOD: lambda a, b: U256(0) if b == 0 else a % b,
    Instruction.EXP: lambda a, b: a.wrapping_pow(b),
    Instruction.ADDMOD: lambda a, b, c: U256(0) if c == 0 else U256((int(a) + int(b)) % int(c)),
    Instruction.MULMOD: lambda a, b, c: U256(0) if c == 0 else U256((int(a) * int(b)) % int(c)),
    Instruction.LT: lambda a, b: _bool(a < b),
    Instruction.GT: lambda a, b: _bool(a > b),
    Instruction.EQ: lambda a, b: _bool(a == b),
    Instruction.ISZERO: lambda a: _bool(a == 0),
    Instruction.AND: lambda a, b: a & b,
    Instruction.OR: lambda a, b: a | b,
    Instruction.XOR: lambda a, b: a ^ b,
    Instruction.NOT: lambda a: ~a,
    Instruction.BYTE: _byte,
    Instruction.SHL: _shl,
    Instruction.SHR: _shr,
}


class Expression(NamedTuple):
    """An equivalence class of values."""

    id: int
    key: Hashable
    args: Tuple[int, ...]
    constant: Optional[U256]


class ExpressionClasses:
    """
    Append-only table of expression classes.

    Ids are never invalidated. Copies of a known state that fork at a control
    flow branch each own a `copy()` of the table, so ids created on one path
    are unknown to the other.
    """

    def __init__(self) -> None:
        """Initialize an empty table."""
        self._expressions: List[Expression] = []
        self._index: Dict[Tuple[Hashable, Tuple[int, ...]], int] = {}
        self._constants: Dict[int, int] = {}

    def copy(self) -> "ExpressionClasses":
        """Return an independent table holding the same classes."""
        table = ExpressionClasses()
        table._expressions = list(self._expressions)
        table._index = dict(self._index)
        table._constants = dict(self._constants)
        return table

    def __len__(self) -> int:
        """Return the number of classes."""
        return len(self._expressions)

    def find(self, item: AssemblyItem | Instruction, args: Sequence[int] = ()) -> int:
        """
        Return the id of the class of `item` applied to the `args` classes,
        creating it if it does not exist yet.
        """
        if isinstance(item, Instruction):
            item = AssemblyItem.operation(item)
        key = (item, tuple(args))
        if key in self._index:
            return self._index[key]

        constant = self._evaluate(item, key[1])
        if constant is not None and int(constant) in self._constants:
            class_id = self._constants[int(constant)]
            self._index[key] = class_id
            return class_id

        class_id = self._append(item, key[1], constant)
        self._index[key] = class_id
        return class_id

    def new_class(self, tag: Hashable = None) -> int:
        """Create a class for a value about which nothing is known."""
        return self._append(("unknown", len(self._expressions), tag), (), None)

    def known_constant(self, class_id: int) -> Optional[U256]:
        """Return the value of the class if it is a known constant, `None` otherwise."""
        return self._expressions[class_id].constant

    def known_zero(self, class_id: int) -> bool:
        """Return true if the class is known to be zero."""
        constant = self.known_constant(class_id)
        return constant is not None and int(constant) == 0

    def known_non_zero(self, class_id: int) -> bool:
        """Return true if the class is known to be non-zero."""
        constant = self.known_constant(class_id)
        return constant is not None and int(constant) != 0

    def _append(
        self, key: Hashable, args: Tuple[int, ...], constant: Optional[U256]
    ) -> int:
        class_id = len(self._expressions)
        self._expressions.append(Expression(class_id, key, args, constant))
        if constant is not None:
            self._constants[int(constant)] = class_id
        return class_id

    def _evaluate(self, item: AssemblyItem, args: Tuple[int, ...]) -> Optional[U256]:
        if item.type == AssemblyItemType.PUSH:
            return U256(item.data)
        if item.type != AssemblyItemType.OPERATION:
            return None
        assert item.instruction is not None
        fold = CONSTANT_FOLDING.get(item.instruction)
        if fold is None or len(args) != item.instruction.args:
            return None
        values = [self.known_constant(arg) for arg in args]
        if any(value is None for value in values):
            return None
        return fold(*values)
