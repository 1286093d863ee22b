"""All EVM protocol version (fork) class definitions."""

from ..base_fork import (
    BaseFork,
    CalldataGasCalculator,
    CodeDepositGasCalculator,
    MemoryExpansionGasCalculator,
    TransactionIntrinsicCostCalculator,
)
from ..gas_costs import GasCosts
from .helpers import ceiling_division


# All forks must be listed here !!! in the order they were introduced !!!
class Homestead(BaseFork):
    """Homestead fork."""

    @classmethod
    def gas_costs(cls) -> GasCosts:
        """Return dataclass with the defined gas costs constants for genesis."""
        return GasCosts(
            G_EXP=2,
            G_KECCAK_256=4,
            G_KECCAK_256_WORD=1,
            G_STORAGE_SET=1_250,
            G_STORAGE_RESET=310,
            R_STORAGE_CLEAR=950,
            G_LOG=24,
            G_LOG_DATA=1,
            G_LOG_TOPIC=24,
            G_CREATE=2_000,
            G_CODE_DEPOSIT_BYTE=12,
            G_CALL_STIPEND=1_000,
            G_CALL_VALUE=550,
            G_NEW_ACCOUNT=1_600,
            R_SELF_DESTRUCT=1_500,
            G_MEMORY=1,
            G_QUAD_COEFF_DIV=1_024,
            G_TRANSACTION=25_000,
            G_TRANSACTION_CREATE=20_000,
            G_TX_DATA_ZERO=1,
            G_TX_DATA_NON_ZERO=4,
            G_COPY=1,
            G_BALANCE_OF=50,
            G_TRANSFER_ASSET=550,
        )

    @classmethod
    def memory_expansion_gas_calculator(cls) -> MemoryExpansionGasCalculator:
        """Return callable that calculates the gas cost of memory expansion for the fork."""
        gas_costs = cls.gas_costs()

        def fn(*, new_bytes: int, previous_bytes: int = 0) -> int:
            if new_bytes <= previous_bytes:
                return 0
            new_words = ceiling_division(new_bytes, 32)
            previous_words = ceiling_division(previous_bytes, 32)

            def c(w: int) -> int:
                return (gas_costs.G_MEMORY * w) + ((w * w) // gas_costs.G_QUAD_COEFF_DIV)

            return c(new_words) - c(previous_words)

        return fn

    @classmethod
    def calldata_gas_calculator(cls) -> CalldataGasCalculator:
        """
        Return callable that calculates the transaction gas cost for its calldata
        depending on its contents.
        """
        gas_costs = cls.gas_costs()

        def fn(*, data: bytes) -> int:
            cost = 0
            for b in bytes(data):
                if b == 0:
                    cost += gas_costs.G_TX_DATA_ZERO
                else:
                    cost += gas_costs.G_TX_DATA_NON_ZERO
            return cost

        return fn

    @classmethod
    def code_deposit_gas_calculator(cls) -> CodeDepositGasCalculator:
        """Return callable that charges the code deposit price for every byte of code."""
        gas_costs = cls.gas_costs()

        def fn(*, code: bytes) -> int:
            return gas_costs.G_CODE_DEPOSIT_BYTE * len(code)

        return fn

    @classmethod
    def transaction_intrinsic_cost_calculator(cls) -> TransactionIntrinsicCostCalculator:
        """
        Return callable that calculates the intrinsic gas cost of a transaction,
        taking contract creation into account.
        """
        gas_costs = cls.gas_costs()
        calldata_gas_calculator = cls.calldata_gas_calculator()

        def fn(*, calldata: bytes = b"", contract_creation: bool = False) -> int:
            intrinsic_cost: int = gas_costs.G_TRANSACTION
            if contract_creation:
                intrinsic_cost += gas_costs.G_TRANSACTION_CREATE
            return intrinsic_cost + calldata_gas_calculator(data=calldata)

        return fn

    @classmethod
    def supports_returndata(cls) -> bool:
        """At Homestead, return data opcodes are not available."""
        return False

    @classmethod
    def has_static_call(cls) -> bool:
        """At Homestead, STATICCALL is not available."""
        return False

    @classmethod
    def has_bitwise_shifting(cls) -> bool:
        """At Homestead, shift opcodes are not available."""
        return False

    @classmethod
    def has_create2(cls) -> bool:
        """At Homestead, CREATE2 is not available."""
        return False

    @classmethod
    def has_ext_code_hash(cls) -> bool:
        """At Homestead, EXTCODEHASH is not available."""
        return False


class TangerineWhistle(Homestead):
    """Tangerine Whistle fork, repricing IO-heavy operations."""

    pass


class SpuriousDragon(TangerineWhistle):
    """Spurious Dragon fork, repricing the exponent bytes of EXP."""

    pass


class Byzantium(SpuriousDragon):
    """Byzantium fork."""

    @classmethod
    def supports_returndata(cls) -> bool:
        """At Byzantium, RETURNDATASIZE, RETURNDATACOPY and REVERT were introduced."""
        return True

    @classmethod
    def has_static_call(cls) -> bool:
        """At Byzantium, STATICCALL opcode was introduced."""
        return True


class Constantinople(Byzantium):
    """Constantinople fork."""

    @classmethod
    def has_bitwise_shifting(cls) -> bool:
        """At Constantinople, SHL, SHR and SAR were introduced."""
        return True

    @classmethod
    def has_create2(cls) -> bool:
        """At Constantinople, `CREATE2` opcode is added."""
        return True

    @classmethod
    def has_ext_code_hash(cls) -> bool:
        """At Constantinople, EXTCODEHASH was introduced."""
        return True


class Petersburg(Constantinople):
    """Petersburg fork."""

    pass
