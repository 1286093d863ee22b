"""Defines the data class that will contain gas cost constants on each fork."""

from dataclasses import dataclass


@dataclass(kw_only=True, frozen=True)
class GasCosts:
    """Class that contains the gas cost constants for any fork."""

    G_EXP: int

    G_KECCAK_256: int
    G_KECCAK_256_WORD: int

    G_STORAGE_SET: int
    G_STORAGE_RESET: int
    R_STORAGE_CLEAR: int

    G_LOG: int
    G_LOG_DATA: int
    G_LOG_TOPIC: int

    G_CREATE: int
    G_CODE_DEPOSIT_BYTE: int

    G_CALL_STIPEND: int
    G_CALL_VALUE: int
    G_NEW_ACCOUNT: int

    R_SELF_DESTRUCT: int

    G_MEMORY: int
    G_QUAD_COEFF_DIV: int

    G_TRANSACTION: int
    G_TRANSACTION_CREATE: int
    G_TX_DATA_ZERO: int
    G_TX_DATA_NON_ZERO: int

    G_COPY: int

    G_BALANCE_OF: int
    G_TRANSFER_ASSET: int
