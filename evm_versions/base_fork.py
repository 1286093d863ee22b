"""Abstract base class for EVM protocol versions (forks)."""

from abc import ABC, ABCMeta, abstractmethod
from typing import ClassVar, Optional, Protocol, Type

from evm_assembly import Instruction

from .gas_costs import GasCosts


class MemoryExpansionGasCalculator(Protocol):
    """A protocol to calculate the gas cost of memory expansion at a given fork."""

    def __call__(self, *, new_bytes: int, previous_bytes: int = 0) -> int:
        """Return gas cost of expanding the memory by the given length."""
        pass


class CalldataGasCalculator(Protocol):
    """A protocol to calculate the transaction gas cost of calldata at a given fork."""

    def __call__(self, *, data: bytes) -> int:
        """Return the transaction gas cost of calldata given its contents."""
        pass


class CodeDepositGasCalculator(Protocol):
    """A protocol to calculate the cost of storing the code of a created contract."""

    def __call__(self, *, code: bytes) -> int:
        """Return the gas cost of depositing the given code."""
        pass


class TransactionIntrinsicCostCalculator(Protocol):
    """A protocol to calculate the intrinsic gas cost of a transaction at a given fork."""

    def __call__(self, *, calldata: bytes = b"", contract_creation: bool = False) -> int:
        """
        Return the intrinsic gas cost of a transaction given its properties.

        Args:
            calldata: The data of the transaction.
            contract_creation: Whether the transaction creates a contract.

        Returns:
            Gas cost of a transaction

        """
        pass


class BaseForkMeta(ABCMeta):
    """Metaclass for BaseFork."""

    @abstractmethod
    def name(cls) -> str:
        """Return the name of the fork (e.g., Byzantium), must be implemented by subclasses."""
        pass

    def __repr__(cls) -> str:
        """Print the name of the fork, instead of the class."""
        return cls.name()

    def __gt__(cls, other: "BaseForkMeta") -> bool:
        """Compare if a fork is newer than some other fork (cls > other)."""
        return cls is not other and issubclass(cls, other)

    def __ge__(cls, other: "BaseForkMeta") -> bool:
        """Compare if a fork is newer than or equal to some other fork (cls >= other)."""
        return cls is other or issubclass(cls, other)

    def __lt__(cls, other: "BaseForkMeta") -> bool:
        """Compare if a fork is older than some other fork (cls < other)."""
        # "Older" means other is a subclass of cls, but not the same.
        return cls is not other and issubclass(other, cls)

    def __le__(cls, other: "BaseForkMeta") -> bool:
        """Compare if a fork is older than or equal to some other fork (cls <= other)."""
        return cls is other or issubclass(other, cls)


class BaseFork(ABC, metaclass=BaseForkMeta):
    """
    An abstract class representing an EVM protocol version.

    Must contain all the methods used by every fork.
    """

    _solc_name: ClassVar[Optional[str]] = None

    def __init_subclass__(cls, *, solc_name: Optional[str] = None) -> None:
        """Initialize new fork with values that don't carry over to subclass forks."""
        cls._solc_name = solc_name

    # Gas related abstract methods

    @classmethod
    @abstractmethod
    def gas_costs(cls) -> GasCosts:
        """Return dataclass with the gas costs constants for the fork."""
        pass

    @classmethod
    @abstractmethod
    def memory_expansion_gas_calculator(cls) -> MemoryExpansionGasCalculator:
        """Return a callable that calculates the gas cost of memory expansion for the fork."""
        pass

    @classmethod
    @abstractmethod
    def calldata_gas_calculator(cls) -> CalldataGasCalculator:
        """
        Return callable that calculates the transaction gas cost for its calldata
        depending on its contents.
        """
        pass

    @classmethod
    @abstractmethod
    def code_deposit_gas_calculator(cls) -> CodeDepositGasCalculator:
        """Return callable that calculates the cost of depositing created contract code."""
        pass

    @classmethod
    @abstractmethod
    def transaction_intrinsic_cost_calculator(cls) -> TransactionIntrinsicCostCalculator:
        """Return callable that calculates the intrinsic gas cost of a transaction for the fork."""
        pass

    # EVM information abstract methods

    @classmethod
    @abstractmethod
    def supports_returndata(cls) -> bool:
        """Return true if RETURNDATASIZE, RETURNDATACOPY and REVERT are available."""
        pass

    @classmethod
    @abstractmethod
    def has_static_call(cls) -> bool:
        """Return true if STATICCALL is available."""
        pass

    @classmethod
    @abstractmethod
    def has_bitwise_shifting(cls) -> bool:
        """Return true if SHL, SHR and SAR are available."""
        pass

    @classmethod
    @abstractmethod
    def has_create2(cls) -> bool:
        """Return true if CREATE2 is available."""
        pass

    @classmethod
    @abstractmethod
    def has_ext_code_hash(cls) -> bool:
        """Return true if EXTCODEHASH is available."""
        pass

    @classmethod
    def has_opcode(cls, instruction: Instruction) -> bool:
        """Return whether `instruction` is valid at this fork."""
        if instruction in (
            Instruction.RETURNDATASIZE,
            Instruction.RETURNDATACOPY,
            Instruction.REVERT,
        ):
            return cls.supports_returndata()
        if instruction == Instruction.STATICCALL:
            return cls.has_static_call()
        if instruction in (Instruction.SHL, Instruction.SHR, Instruction.SAR):
            return cls.has_bitwise_shifting()
        if instruction == Instruction.CREATE2:
            return cls.has_create2()
        if instruction == Instruction.EXTCODEHASH:
            return cls.has_ext_code_hash()
        return True

    # Meta information about the fork

    @classmethod
    def name(cls) -> str:
        """Return name of the fork."""
        return cls.__name__

    @classmethod
    def solc_name(cls) -> str:
        """Return fork name as it's meant to be passed to the solc compiler."""
        if cls._solc_name is not None:
            return cls._solc_name
        name = cls.name()
        return name[0].lower() + name[1:]

    @classmethod
    def parent(cls) -> Type["BaseFork"] | None:
        """Return the parent fork."""
        base_class = cls.__bases__[0]
        assert issubclass(base_class, BaseFork)
        if base_class == BaseFork:
            return None
        return base_class


# Fork Type
Fork = Type[BaseFork]
