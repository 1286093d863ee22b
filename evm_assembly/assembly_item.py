"""Assembly items: operations and the pseudo-instructions emitted by the code generator."""

from dataclasses import dataclass
from enum import Enum

from .instructions import Instruction, InvalidInstructionError

MAX_PUSH_VALUE = 2**256 - 1


class AssemblyItemType(str, Enum):
    """Kind of an assembly item."""

    UNDEFINED = "undefined"
    OPERATION = "operation"
    PUSH = "push"
    PUSH_STRING = "push_string"
    PUSH_TAG = "push_tag"
    PUSH_SUB = "push_sub"
    PUSH_SUB_SIZE = "push_sub_size"
    PUSH_PROGRAM_SIZE = "push_program_size"
    TAG = "tag"
    PUSH_DATA = "push_data"
    PUSH_LIBRARY_ADDRESS = "push_library_address"
    PUSH_DEPLOY_TIME_ADDRESS = "push_deploy_time_address"

    def __str__(self) -> str:
        """Return the name of the item type."""
        return self.name


PUSH_LIKE_TYPES = frozenset(
    {
        AssemblyItemType.PUSH,
        AssemblyItemType.PUSH_STRING,
        AssemblyItemType.PUSH_TAG,
        AssemblyItemType.PUSH_SUB,
        AssemblyItemType.PUSH_SUB_SIZE,
        AssemblyItemType.PUSH_PROGRAM_SIZE,
        AssemblyItemType.PUSH_DATA,
        AssemblyItemType.PUSH_LIBRARY_ADDRESS,
        AssemblyItemType.PUSH_DEPLOY_TIME_ADDRESS,
    }
)


@dataclass(frozen=True)
class AssemblyItem:
    """
    A single item of an assembly stream.

    `OPERATION` items carry an instruction. All other item types are
    pseudo-instructions; `data` holds the literal value for `PUSH`, the tag
    number for `TAG`/`PUSH_TAG` and an opaque identifier (sub-assembly index,
    data hash, string hash, library name hash) for the rest.
    """

    type: AssemblyItemType
    instruction: Instruction | None = None
    data: int = 0

    def __post_init__(self):
        """Validate the item."""
        if self.type == AssemblyItemType.OPERATION:
            if self.instruction is None:
                raise InvalidInstructionError("Operation item requires an instruction")
        elif self.instruction is not None:
            raise InvalidInstructionError(f"{self.type} item cannot carry an instruction")
        if self.data < 0 or self.data > MAX_PUSH_VALUE:
            raise ValueError(f"Item data out of range: {self.data}")

    @classmethod
    def operation(cls, instruction: Instruction) -> "AssemblyItem":
        """Create an operation item."""
        return cls(AssemblyItemType.OPERATION, instruction=instruction)

    @classmethod
    def push(cls, value: int) -> "AssemblyItem":
        """Create a push of a literal value."""
        return cls(AssemblyItemType.PUSH, data=value)

    @classmethod
    def tag(cls, number: int) -> "AssemblyItem":
        """Create a tag (jump destination)."""
        return cls(AssemblyItemType.TAG, data=number)

    @classmethod
    def push_tag(cls, number: int) -> "AssemblyItem":
        """Create a push of the address of a tag."""
        return cls(AssemblyItemType.PUSH_TAG, data=number)

    def returns_value(self) -> bool:
        """Return true if the item pushes a value onto the stack."""
        if self.type == AssemblyItemType.OPERATION:
            assert self.instruction is not None
            return self.instruction.ret > 0
        return self.type in PUSH_LIKE_TYPES

    def is_operation(self, instruction: Instruction) -> bool:
        """Return true if this is an operation item running `instruction`."""
        return self.type == AssemblyItemType.OPERATION and self.instruction == instruction

    def __str__(self) -> str:
        """Return the item in assembly text notation."""
        if self.type == AssemblyItemType.OPERATION:
            return str(self.instruction)
        if self.type == AssemblyItemType.PUSH:
            return f"PUSH 0x{self.data:x}"
        if self.type == AssemblyItemType.TAG:
            return f"tag_{self.data}"
        if self.type == AssemblyItemType.PUSH_TAG:
            return f"PUSH [tag_{self.data}]"
        return f"{self.type} 0x{self.data:x}"
