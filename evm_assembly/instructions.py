"""
EVM Instruction Encoding (Opcodes)
^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^

Machine readable representations of EVM instructions together with the
information the optimizer needs about them: stack arity, price tier and
whether they have side effects.
"""

import enum
from typing import Dict, NamedTuple


class InvalidInstructionError(ValueError):
    """Raised when an instruction is used where it is not meaningful."""


class Tier(enum.IntEnum):
    """Gas price tier of an instruction, indexing the tier price sequence."""

    ZERO = 0
    BASE = 1
    VERY_LOW = 2
    LOW = 3
    MID = 4
    HIGH = 5
    EXT = 6
    SPECIAL = 7


class InstructionInfo(NamedTuple):
    """Static information about an instruction."""

    name: str
    args: int
    ret: int
    tier: Tier
    side_effects: bool = False


class Instruction(enum.Enum):
    """
    Enum for EVM Opcodes
    """

    # Computation Ops
    STOP = 0x00

    # Arithmetic Ops
    ADD = 0x01
    MUL = 0x02
    SUB = 0x03
    DIV = 0x04
    SDIV = 0x05
    MOD = 0x06
    SMOD = 0x07
    ADDMOD = 0x08
    MULMOD = 0x09
    EXP = 0x0A
    SIGNEXTEND = 0x0B

    # Comparison Ops
    LT = 0x10
    GT = 0x11
    SLT = 0x12
    SGT = 0x13
    EQ = 0x14
    ISZERO = 0x15

    # Bitwise Ops
    AND = 0x16
    OR = 0x17
    XOR = 0x18
    NOT = 0x19
    BYTE = 0x1A
    SHL = 0x1B
    SHR = 0x1C
    SAR = 0x1D

    # Keccak Op
    KECCAK256 = 0x20

    # Environmental Ops
    ADDRESS = 0x30
    BALANCE = 0x31
    ORIGIN = 0x32
    CALLER = 0x33
    CALLVALUE = 0x34
    CALLDATALOAD = 0x35
    CALLDATASIZE = 0x36
    CALLDATACOPY = 0x37
    CODESIZE = 0x38
    CODECOPY = 0x39
    GASPRICE = 0x3A
    EXTCODESIZE = 0x3B
    EXTCODECOPY = 0x3C
    RETURNDATASIZE = 0x3D
    RETURNDATACOPY = 0x3E
    EXTCODEHASH = 0x3F

    # Block Ops
    BLOCKHASH = 0x40
    COINBASE = 0x41
    TIMESTAMP = 0x42
    NUMBER = 0x43
    DIFFICULTY = 0x44
    GASLIMIT = 0x45

    # Control Flow Ops
    JUMP = 0x56
    JUMPI = 0x57
    PC = 0x58
    GAS = 0x5A
    JUMPDEST = 0x5B

    # Storage Ops
    SLOAD = 0x54
    SSTORE = 0x55

    # Pop Operation
    POP = 0x50

    # Memory Operations
    MLOAD = 0x51
    MSTORE = 0x52
    MSTORE8 = 0x53
    MSIZE = 0x59

    # Push Operations
    PUSH1 = 0x60
    PUSH2 = 0x61
    PUSH3 = 0x62
    PUSH4 = 0x63
    PUSH5 = 0x64
    PUSH6 = 0x65
    PUSH7 = 0x66
    PUSH8 = 0x67
    PUSH9 = 0x68
    PUSH10 = 0x69
    PUSH11 = 0x6A
    PUSH12 = 0x6B
    PUSH13 = 0x6C
    PUSH14 = 0x6D
    PUSH15 = 0x6E
    PUSH16 = 0x6F
    PUSH17 = 0x70
    PUSH18 = 0x71
    PUSH19 = 0x72
    PUSH20 = 0x73
    PUSH21 = 0x74
    PUSH22 = 0x75
    PUSH23 = 0x76
    PUSH24 = 0x77
    PUSH25 = 0x78
    PUSH26 = 0x79
    PUSH27 = 0x7A
    PUSH28 = 0x7B
    PUSH29 = 0x7C
    PUSH30 = 0x7D
    PUSH31 = 0x7E
    PUSH32 = 0x7F

    # Dup operations
    DUP1 = 0x80
    DUP2 = 0x81
    DUP3 = 0x82
    DUP4 = 0x83
    DUP5 = 0x84
    DUP6 = 0x85
    DUP7 = 0x86
    DUP8 = 0x87
    DUP9 = 0x88
    DUP10 = 0x89
    DUP11 = 0x8A
    DUP12 = 0x8B
    DUP13 = 0x8C
    DUP14 = 0x8D
    DUP15 = 0x8E
    DUP16 = 0x8F

    # Swap operations
    SWAP1 = 0x90
    SWAP2 = 0x91
    SWAP3 = 0x92
    SWAP4 = 0x93
    SWAP5 = 0x94
    SWAP6 = 0x95
    SWAP7 = 0x96
    SWAP8 = 0x97
    SWAP9 = 0x98
    SWAP10 = 0x99
    SWAP11 = 0x9A
    SWAP12 = 0x9B
    SWAP13 = 0x9C
    SWAP14 = 0x9D
    SWAP15 = 0x9E
    SWAP16 = 0x9F

    # Log Operations
    LOG0 = 0xA0
    LOG1 = 0xA1
    LOG2 = 0xA2
    LOG3 = 0xA3
    LOG4 = 0xA4

    # System Operations
    CREATE = 0xF0
    CALL = 0xF1
    CALLCODE = 0xF2
    RETURN = 0xF3
    DELEGATECALL = 0xF4
    CREATE2 = 0xF5
    STATICCALL = 0xFA
    REVERT = 0xFD
    INVALID = 0xFE
    SELFDESTRUCT = 0xFF

    @classmethod
    def from_byte(cls, opcode: int) -> "Instruction":
        """Return the instruction encoded by the given byte."""
        try:
            return cls(opcode)
        except ValueError:
            raise InvalidInstructionError(f"Unknown opcode: 0x{opcode:02x}") from None

    @property
    def info(self) -> InstructionInfo:
        """Return the static information of the instruction."""
        return INSTRUCTION_INFO[self]

    @property
    def args(self) -> int:
        """Return the number of stack items consumed."""
        return self.info.args

    @property
    def ret(self) -> int:
        """Return the number of stack items produced."""
        return self.info.ret

    @property
    def tier(self) -> Tier:
        """Return the price tier."""
        return self.info.tier

    def __str__(self) -> str:
        """Return the mnemonic."""
        return self.name


def is_push_instruction(instruction: Instruction) -> bool:
    """Return true for PUSH1 to PUSH32."""
    return Instruction.PUSH1.value <= instruction.value <= Instruction.PUSH32.value


def is_dup_instruction(instruction: Instruction) -> bool:
    """Return true for DUP1 to DUP16."""
    return Instruction.DUP1.value <= instruction.value <= Instruction.DUP16.value


def is_swap_instruction(instruction: Instruction) -> bool:
    """Return true for SWAP1 to SWAP16."""
    return Instruction.SWAP1.value <= instruction.value <= Instruction.SWAP16.value


def is_log_instruction(instruction: Instruction) -> bool:
    """Return true for LOG0 to LOG4."""
    return Instruction.LOG0.value <= instruction.value <= Instruction.LOG4.value


def push_instruction(number: int) -> Instruction:
    """Return the PUSH instruction pushing `number` bytes."""
    if not 1 <= number <= 32:
        raise InvalidInstructionError(f"Invalid PUSH size: {number}")
    return Instruction(Instruction.PUSH1.value + number - 1)


def dup_instruction(number: int) -> Instruction:
    """Return the DUP instruction duplicating the `number`-th stack item."""
    if not 1 <= number <= 16:
        raise InvalidInstructionError(f"Invalid DUP number: {number}")
    return Instruction(Instruction.DUP1.value + number - 1)


def swap_instruction(number: int) -> Instruction:
    """Return the SWAP instruction exchanging the top with the `number + 1`-th item."""
    if not 1 <= number <= 16:
        raise InvalidInstructionError(f"Invalid SWAP number: {number}")
    return Instruction(Instruction.SWAP1.value + number - 1)


def log_instruction(topics: int) -> Instruction:
    """Return the LOG instruction taking `topics` topics."""
    if not 0 <= topics <= 4:
        raise InvalidInstructionError(f"Invalid LOG topic count: {topics}")
    return Instruction(Instruction.LOG0.value + topics)


def _info(name: str, args: int, ret: int, tier: Tier, side_effects: bool = False):
    return InstructionInfo(name, args, ret, tier, side_effects)


INSTRUCTION_INFO: Dict[Instruction, InstructionInfo] = {
    Instruction.STOP: _info("STOP", 0, 0, Tier.ZERO, True),
    Instruction.ADD: _info("ADD", 2, 1, Tier.VERY_LOW),
    Instruction.SUB: _info("SUB", 2, 1, Tier.VERY_LOW),
    Instruction.MUL: _info("MUL", 2, 1, Tier.LOW),
    Instruction.DIV: _info("DIV", 2, 1, Tier.LOW),
    Instruction.SDIV: _info("SDIV", 2, 1, Tier.LOW),
    Instruction.MOD: _info("MOD", 2, 1, Tier.LOW),
    Instruction.SMOD: _info("SMOD", 2, 1, Tier.LOW),
    Instruction.EXP: _info("EXP", 2, 1, Tier.SPECIAL),
    Instruction.NOT: _info("NOT", 1, 1, Tier.VERY_LOW),
    Instruction.LT: _info("LT", 2, 1, Tier.VERY_LOW),
    Instruction.GT: _info("GT", 2, 1, Tier.VERY_LOW),
    Instruction.SLT: _info("SLT", 2, 1, Tier.VERY_LOW),
    Instruction.SGT: _info("SGT", 2, 1, Tier.VERY_LOW),
    Instruction.EQ: _info("EQ", 2, 1, Tier.VERY_LOW),
    Instruction.ISZERO: _info("ISZERO", 1, 1, Tier.VERY_LOW),
    Instruction.AND: _info("AND", 2, 1, Tier.VERY_LOW),
    Instruction.OR: _info("OR", 2, 1, Tier.VERY_LOW),
    Instruction.XOR: _info("XOR", 2, 1, Tier.VERY_LOW),
    Instruction.BYTE: _info("BYTE", 2, 1, Tier.VERY_LOW),
    Instruction.SHL: _info("SHL", 2, 1, Tier.VERY_LOW),
    Instruction.SHR: _info("SHR", 2, 1, Tier.VERY_LOW),
    Instruction.SAR: _info("SAR", 2, 1, Tier.VERY_LOW),
    Instruction.ADDMOD: _info("ADDMOD", 3, 1, Tier.MID),
    Instruction.MULMOD: _info("MULMOD", 3, 1, Tier.MID),
    Instruction.SIGNEXTEND: _info("SIGNEXTEND", 2, 1, Tier.LOW),
    Instruction.KECCAK256: _info("KECCAK256", 2, 1, Tier.SPECIAL),
    Instruction.ADDRESS: _info("ADDRESS", 0, 1, Tier.BASE),
    Instruction.BALANCE: _info("BALANCE", 1, 1, Tier.EXT),
    Instruction.ORIGIN: _info("ORIGIN", 0, 1, Tier.BASE),
    Instruction.CALLER: _info("CALLER", 0, 1, Tier.BASE),
    Instruction.CALLVALUE: _info("CALLVALUE", 0, 1, Tier.BASE),
    Instruction.CALLDATALOAD: _info("CALLDATALOAD", 1, 1, Tier.VERY_LOW),
    Instruction.CALLDATASIZE: _info("CALLDATASIZE", 0, 1, Tier.BASE),
    Instruction.CALLDATACOPY: _info("CALLDATACOPY", 3, 0, Tier.VERY_LOW, True),
    Instruction.CODESIZE: _info("CODESIZE", 0, 1, Tier.BASE),
    Instruction.CODECOPY: _info("CODECOPY", 3, 0, Tier.VERY_LOW, True),
    Instruction.GASPRICE: _info("GASPRICE", 0, 1, Tier.BASE),
    Instruction.EXTCODESIZE: _info("EXTCODESIZE", 1, 1, Tier.EXT),
    Instruction.EXTCODECOPY: _info("EXTCODECOPY", 4, 0, Tier.EXT, True),
    Instruction.RETURNDATASIZE: _info("RETURNDATASIZE", 0, 1, Tier.BASE),
    Instruction.RETURNDATACOPY: _info("RETURNDATACOPY", 3, 0, Tier.VERY_LOW, True),
    Instruction.EXTCODEHASH: _info("EXTCODEHASH", 1, 1, Tier.EXT),
    Instruction.BLOCKHASH: _info("BLOCKHASH", 1, 1, Tier.EXT),
    Instruction.COINBASE: _info("COINBASE", 0, 1, Tier.BASE),
    Instruction.TIMESTAMP: _info("TIMESTAMP", 0, 1, Tier.BASE),
    Instruction.NUMBER: _info("NUMBER", 0, 1, Tier.BASE),
    Instruction.DIFFICULTY: _info("DIFFICULTY", 0, 1, Tier.BASE),
    Instruction.GASLIMIT: _info("GASLIMIT", 0, 1, Tier.BASE),
    Instruction.POP: _info("POP", 1, 0, Tier.BASE),
    Instruction.MLOAD: _info("MLOAD", 1, 1, Tier.VERY_LOW),
    Instruction.MSTORE: _info("MSTORE", 2, 0, Tier.VERY_LOW, True),
    Instruction.MSTORE8: _info("MSTORE8", 2, 0, Tier.VERY_LOW, True),
    Instruction.SLOAD: _info("SLOAD", 1, 1, Tier.SPECIAL),
    Instruction.SSTORE: _info("SSTORE", 2, 0, Tier.SPECIAL, True),
    Instruction.JUMP: _info("JUMP", 1, 0, Tier.MID, True),
    Instruction.JUMPI: _info("JUMPI", 2, 0, Tier.HIGH, True),
    Instruction.PC: _info("PC", 0, 1, Tier.BASE),
    Instruction.MSIZE: _info("MSIZE", 0, 1, Tier.BASE),
    Instruction.GAS: _info("GAS", 0, 1, Tier.BASE),
    Instruction.JUMPDEST: _info("JUMPDEST", 0, 0, Tier.SPECIAL, True),
    Instruction.CREATE: _info("CREATE", 3, 1, Tier.SPECIAL, True),
    Instruction.CALL: _info("CALL", 7, 1, Tier.SPECIAL, True),
    Instruction.CALLCODE: _info("CALLCODE", 7, 1, Tier.SPECIAL, True),
    Instruction.RETURN: _info("RETURN", 2, 0, Tier.ZERO, True),
    Instruction.DELEGATECALL: _info("DELEGATECALL", 6, 1, Tier.SPECIAL, True),
    Instruction.CREATE2: _info("CREATE2", 4, 1, Tier.SPECIAL, True),
    Instruction.STATICCALL: _info("STATICCALL", 6, 1, Tier.SPECIAL, True),
    Instruction.REVERT: _info("REVERT", 2, 0, Tier.ZERO, True),
    Instruction.INVALID: _info("INVALID", 0, 0, Tier.ZERO, True),
    Instruction.SELFDESTRUCT: _info("SELFDESTRUCT", 1, 0, Tier.SPECIAL, True),
}

for _n in range(1, 33):
    _push = push_instruction(_n)
    INSTRUCTION_INFO[_push] = _info(_push.name, 0, 1, Tier.VERY_LOW)

for _n in range(1, 17):
    _dup = dup_instruction(_n)
    INSTRUCTION_INFO[_dup] = _info(_dup.name, _n, _n + 1, Tier.VERY_LOW)
    _swap = swap_instruction(_n)
    INSTRUCTION_INFO[_swap] = _info(_swap.name, _n + 1, _n + 1, Tier.VERY_LOW)

for _n in range(0, 5):
    _log = log_instruction(_n)
    INSTRUCTION_INFO[_log] = _info(_log.name, _n + 2, 0, Tier.SPECIAL, True)
