"""
Gas Consumption
^^^^^^^^^^^^^^^

An upper bound on gas: either a finite amount or "unbounded" when no finite
static bound could be established.
"""

import functools
from typing import SupportsInt, Tuple

from ethereum_types.numeric import Uint

INFINITE_GAS_MARKER = "[???]"


@functools.total_ordering
class GasConsumption:
    """
    Upper bound on the gas consumed by an instruction or a sequence of them.

    Unbounded values dominate: adding anything to an unbounded value yields an
    unbounded value, and an unbounded value compares greater than any bounded
    one. All unbounded values are equal. Bounded values are arbitrary
    precision and never wrap.
    """

    __slots__ = ("_value", "_is_infinite")

    def __init__(self, value: SupportsInt = 0, is_infinite: bool = False) -> None:
        """Create a bound of `value` units, or an unbounded value."""
        self._is_infinite = is_infinite
        self._value = Uint(0) if is_infinite else Uint(value)

    @classmethod
    def infinite(cls) -> "GasConsumption":
        """Return the unbounded value."""
        return cls(0, is_infinite=True)

    @property
    def value(self) -> Uint:
        """Return the bound; meaningless (zero) for unbounded values."""
        return self._value

    @property
    def is_infinite(self) -> bool:
        """Return true if no finite bound is known."""
        return self._is_infinite

    def _tuple(self) -> Tuple[bool, int]:
        return (self._is_infinite, int(self._value))

    def __add__(self, other: object) -> "GasConsumption":
        """
        Sum two bounds.

        Plain integers are accepted as bounded values.
        """
        if isinstance(other, (int, Uint)):
            other = GasConsumption(other)
        if not isinstance(other, GasConsumption):
            return NotImplemented
        if self._is_infinite or other._is_infinite:
            return GasConsumption.infinite()
        return GasConsumption(self._value + other._value)

    __radd__ = __add__

    def __eq__(self, other: object) -> bool:
        """Compare bounds; plain integers compare as bounded values."""
        if isinstance(other, GasConsumption):
            return self._tuple() == other._tuple()
        if isinstance(other, int):
            return not self._is_infinite and int(self._value) == other
        return NotImplemented

    def __lt__(self, other: object) -> bool:
        """Order bounds, with unbounded values greatest."""
        if isinstance(other, (int, Uint)):
            other = GasConsumption(other)
        if not isinstance(other, GasConsumption):
            return NotImplemented
        return self._tuple() < other._tuple()

    def __hash__(self) -> int:
        """Hash consistently with equality, including equality with integers."""
        if self._is_infinite:
            return hash(INFINITE_GAS_MARKER)
        return hash(int(self._value))

    def __int__(self) -> int:
        """Return the bound as an integer; unbounded values cannot be converted."""
        if self._is_infinite:
            raise OverflowError("Unbounded gas consumption has no integer value")
        return int(self._value)

    def __str__(self) -> str:
        """Return the decimal bound, or the unknown cost marker."""
        if self._is_infinite:
            return INFINITE_GAS_MARKER
        return str(self._value)

    def __repr__(self) -> str:
        """Return a representation for debugging."""
        if self._is_infinite:
            return "GasConsumption.infinite()"
        return f"GasConsumption({int(self._value)})"
