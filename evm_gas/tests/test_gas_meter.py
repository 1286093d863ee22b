"""Test the gas meter on single instructions and short paths."""

from concurrent.futures import ThreadPoolExecutor
from typing import Callable, List

import pytest

from evm_assembly import AssemblyItem, AssemblyItemType, Instruction, KnownState
from evm_versions import (
    Byzantium,
    Constantinople,
    Fork,
    Homestead,
    Petersburg,
    SpuriousDragon,
    TangerineWhistle,
    get_forks,
)

from ..consumption import GasConsumption
from ..gas_meter import GasMeter

push = AssemblyItem.push
op = AssemblyItem.operation

# An operand whose value is not known statically.
UNKNOWN = op(Instruction.CALLDATASIZE)


def run(
    items: List[AssemblyItem],
    fork: Fork = Petersburg,
    include_external_costs: bool = True,
) -> GasConsumption:
    """Feed all items to a fresh meter and return the cost of the last one."""
    meter = GasMeter(KnownState(), fork)
    gas = GasConsumption()
    for item in items:
        gas = meter.estimate_max(item, include_external_costs)
    return gas


@pytest.mark.parametrize(
    "instruction",
    [
        Instruction.STOP,
        Instruction.ADD,
        Instruction.MUL,
        Instruction.ADDMOD,
        Instruction.JUMP,
        Instruction.JUMPI,
        Instruction.BLOCKHASH,
        Instruction.CALLER,
        Instruction.POP,
        Instruction.DUP1,
        Instruction.SWAP16,
        Instruction.JUMPDEST,
    ],
)
def test_fixed_price_instructions(instruction: Instruction):
    """Test that fixed price instructions cost their price at every fork and state."""
    for fork in get_forks():
        assert run([op(instruction)], fork) == GasMeter.run_gas(instruction)
        assert run([UNKNOWN, push(7), op(instruction)], fork) == GasMeter.run_gas(instruction)


@pytest.mark.parametrize(
    "item,expected",
    [
        pytest.param(push(0x40), GasConsumption(1), id="push"),
        pytest.param(AssemblyItem.push_tag(1), GasConsumption(1), id="push_tag"),
        pytest.param(
            AssemblyItem(AssemblyItemType.PUSH_DATA, data=3), GasConsumption(1), id="push_data"
        ),
        pytest.param(AssemblyItem.tag(1), GasConsumption(1), id="tag"),
        pytest.param(
            AssemblyItem(AssemblyItemType.UNDEFINED), GasConsumption.infinite(), id="undefined"
        ),
    ],
)
def test_pseudo_instructions(item: AssemblyItem, expected: GasConsumption):
    """Test the prices of items that are not operations."""
    assert run([item]) == expected


@pytest.mark.parametrize(
    "instruction,fork,expected",
    [
        pytest.param(Instruction.SLOAD, Homestead, 50, id="sload_homestead"),
        pytest.param(Instruction.SLOAD, TangerineWhistle, 20, id="sload_tangerine_whistle"),
        pytest.param(Instruction.BALANCE, Homestead, 20, id="balance_homestead"),
        pytest.param(Instruction.BALANCE, Petersburg, 25, id="balance_petersburg"),
        pytest.param(Instruction.EXTCODESIZE, Homestead, 20, id="extcodesize_homestead"),
        pytest.param(Instruction.EXTCODESIZE, TangerineWhistle, 45, id="extcodesize_tw"),
        pytest.param(Instruction.EXTCODEHASH, Constantinople, 45, id="extcodehash"),
    ],
)
def test_versioned_instructions(instruction: Instruction, fork: Fork, expected: int):
    """Test instructions whose whole price depends on the fork."""
    assert run([push(1), op(instruction)], fork) == expected


def test_sstore():
    """Test that SSTORE charges the set price unless the write is known to be a reset."""
    meter = GasMeter(KnownState(), Petersburg)
    # Storing zero.
    for item in [push(0), push(1)]:
        meter.estimate_max(item)
    assert meter.estimate_max(op(Instruction.SSTORE)) == 310

    # Storing to a slot whose content is not known.
    for item in [push(5), push(2)]:
        meter.estimate_max(item)
    assert meter.estimate_max(op(Instruction.SSTORE)) == 1_250

    # Overwriting a slot known to hold a non-zero value.
    for item in [push(7), push(2)]:
        meter.estimate_max(item)
    assert meter.estimate_max(op(Instruction.SSTORE)) == 310

    # Slot 1 is known to hold zero.
    for item in [push(7), push(1)]:
        meter.estimate_max(item)
    assert meter.estimate_max(op(Instruction.SSTORE)) == 1_250


@pytest.mark.parametrize(
    "items,expected,largest_memory_access",
    [
        pytest.param(
            [push(40), push(0), op(Instruction.KECCAK256)], 4 + 2 + 2, 40, id="keccak256"
        ),
        pytest.param([push(0), push(0), op(Instruction.KECCAK256)], 4, 0, id="keccak256_empty"),
        pytest.param([push(1), push(0), op(Instruction.MSTORE)], 1 + 1, 32, id="mstore"),
        pytest.param([push(1), push(31), op(Instruction.MSTORE8)], 1 + 1, 32, id="mstore8"),
        pytest.param([push(64), op(Instruction.MLOAD)], 1 + 3, 96, id="mload"),
        pytest.param([push(64), push(0), op(Instruction.RETURN)], 2, 64, id="return"),
        pytest.param([push(64), push(32), op(Instruction.REVERT)], 3, 96, id="revert"),
        pytest.param([push(0), push(1000), op(Instruction.RETURN)], 0, 0, id="return_empty"),
        pytest.param(
            [push(33), push(0), push(0), op(Instruction.CALLDATACOPY)],
            1 + 2 + 2,
            33,
            id="calldatacopy",
        ),
        pytest.param(
            [push(64), push(0), push(32), op(Instruction.CODECOPY)],
            1 + 3 + 2,
            96,
            id="codecopy",
        ),
        pytest.param(
            [push(64), push(0), push(0), push(0x1234), op(Instruction.EXTCODECOPY)],
            45 + 2 + 2,
            64,
            id="extcodecopy",
        ),
        pytest.param(
            [push(32 * 1024 - 32), op(Instruction.MLOAD)],
            1 + 1024 + 1024,
            32 * 1024,
            id="quadratic_memory",
        ),
    ],
)
def test_memory_instructions(items: List[AssemblyItem], expected: int, largest_memory_access: int):
    """Test instructions charging memory expansion and per word costs."""
    meter = GasMeter(KnownState(), Petersburg)
    gas = GasConsumption()
    for item in items:
        gas = meter.estimate_max(item)
    assert gas == expected
    assert meter.largest_memory_access == largest_memory_access


@pytest.mark.parametrize(
    "items",
    [
        pytest.param([push(40), UNKNOWN, op(Instruction.KECCAK256)], id="keccak256_offset"),
        pytest.param([UNKNOWN, push(0), op(Instruction.KECCAK256)], id="keccak256_size"),
        pytest.param([UNKNOWN, op(Instruction.MLOAD)], id="mload"),
        pytest.param([push(1), UNKNOWN, op(Instruction.MSTORE)], id="mstore"),
        pytest.param([push(1), UNKNOWN, op(Instruction.MSTORE8)], id="mstore8"),
        pytest.param([UNKNOWN, push(0), op(Instruction.RETURN)], id="return"),
        pytest.param(
            [UNKNOWN, push(0), push(0), op(Instruction.CALLDATACOPY)], id="calldatacopy"
        ),
        pytest.param(
            [UNKNOWN, push(0), push(0), push(1), op(Instruction.EXTCODECOPY)], id="extcodecopy"
        ),
        pytest.param([UNKNOWN, push(0), op(Instruction.LOG0)], id="log0_size"),
        pytest.param(
            [push(0), push(0), UNKNOWN, push(0), push(0), push(1), push(0), op(Instruction.CALL)],
            id="call_input_size",
        ),
        pytest.param([UNKNOWN, push(0), push(0), op(Instruction.CREATE)], id="create"),
    ],
)
def test_unknown_operands(items: List[AssemblyItem]):
    """Test that costs depending on unknown values are unbounded."""
    assert run(items, include_external_costs=False).is_infinite


def test_memory_gas_monotonic():
    """Test that accessing memory further away never costs less."""
    costs = [
        run([push(1), push(offset), op(Instruction.MSTORE)])
        for offset in range(0, 32 * 2048, 32 * 37)
    ]
    assert costs == sorted(costs)
    assert costs[0] < costs[-1]


def test_memory_gas_charged_from_empty():
    """Test that memory already paid for on the path is charged again."""
    meter = GasMeter(KnownState(), Petersburg)
    for item in [push(1), push(0), op(Instruction.MSTORE), push(1), push(0)]:
        meter.estimate_max(item)
    assert meter.estimate_max(op(Instruction.MSTORE)) == 1 + 1


@pytest.mark.parametrize(
    "items,end",
    [
        pytest.param([push(2**256 - 1), op(Instruction.MLOAD)], 2**256 + 31, id="mload"),
        pytest.param([push(1), push(2**256 - 1), op(Instruction.MSTORE8)], 2**256, id="mstore8"),
        pytest.param([push(2), push(2**256 - 1), op(Instruction.RETURN)], 2**256 + 1, id="return"),
        pytest.param(
            [push(64), push(2**256 - 32), op(Instruction.KECCAK256)], 2**256 + 32, id="keccak256"
        ),
    ],
)
def test_memory_end_beyond_word_range(items: List[AssemblyItem], end: int):
    """Test that memory areas ending past 2**256 are charged for their real end."""
    meter = GasMeter(KnownState(), Petersburg)
    gas = GasConsumption()
    for item in items:
        gas = meter.estimate_max(item, include_external_costs=False)
    assert meter.largest_memory_access == end
    assert gas > 2**256
    expansion = Petersburg.memory_expansion_gas_calculator()(new_bytes=end)
    assert gas >= expansion


def test_largest_memory_access():
    """Test that the largest memory access only grows."""
    meter = GasMeter(KnownState(), Petersburg, largest_memory_access=100)
    for item in [push(1), push(0), op(Instruction.MSTORE)]:
        meter.estimate_max(item)
    assert meter.largest_memory_access == 100

    for item in [push(1), push(200), op(Instruction.MSTORE)]:
        meter.estimate_max(item)
    assert meter.largest_memory_access == 232


@pytest.mark.parametrize(
    "topics,size,expected",
    [
        pytest.param(0, 0, 24, id="log0_empty"),
        pytest.param(0, 10, 24 + 1 + 10, id="log0"),
        pytest.param(2, 10, 24 + 2 * 24 + 1 + 10, id="log2"),
        pytest.param(4, 64, 24 + 4 * 24 + 2 + 64, id="log4"),
    ],
)
def test_log(topics: int, size: int, expected: int):
    """Test the price of LOG instructions."""
    log = op(Instruction(Instruction.LOG0.value + topics))
    items = [push(0xAA)] * topics + [push(size), push(0), log]
    assert run(items) == expected


@pytest.mark.parametrize(
    "exponent,fork,expected",
    [
        pytest.param(0, Petersburg, 2, id="zero_exponent"),
        pytest.param(0xFF, Petersburg, 2 + 4, id="one_byte"),
        pytest.param(0x1000, Petersburg, 2 + 2 * 4, id="two_bytes"),
        pytest.param(2**255, Petersburg, 2 + 32 * 4, id="thirty_two_bytes"),
        pytest.param(0x1000, TangerineWhistle, 2 + 2 * 10, id="two_bytes_before_repricing"),
        pytest.param(0x1000, SpuriousDragon, 2 + 2 * 4, id="two_bytes_at_repricing"),
    ],
)
def test_exp(exponent: int, fork: Fork, expected: int):
    """Test that EXP charges per significant byte of the exponent."""
    assert run([push(exponent), push(2), op(Instruction.EXP)], fork) == expected


def test_exp_unknown_exponent():
    """Test that an unknown exponent is charged as a full word."""
    assert run([UNKNOWN, push(2), op(Instruction.EXP)], Homestead) == 2 + 32 * 10
    assert run([UNKNOWN, push(2), op(Instruction.EXP)], Petersburg) == 2 + 32 * 4


def call_items(instruction: Instruction, value: int) -> List[AssemblyItem]:
    """Return a call with 64 bytes of input at 0 and 32 bytes of output at 0."""
    items = [push(32), push(0), push(64), push(0)]
    if instruction in (Instruction.CALL, Instruction.CALLCODE):
        items.append(push(value))
    return items + [push(0x1234), push(10_000), op(instruction)]


@pytest.mark.parametrize(
    "instruction,value,fork,local,external",
    [
        pytest.param(Instruction.CALL, 0, Petersburg, 45 + 2 + 1, 1_600, id="call"),
        pytest.param(
            Instruction.CALL, 1, Petersburg, 45 + 2 + 1, 1_600 + 550 + 1_000, id="call_value"
        ),
        pytest.param(
            Instruction.CALL, 1, Homestead, 40 + 2 + 1, 1_600 + 550 + 1_000, id="call_homestead"
        ),
        pytest.param(Instruction.CALLCODE, 0, Petersburg, 45 + 2 + 1, 0, id="callcode"),
        pytest.param(
            Instruction.CALLCODE, 1, Petersburg, 45 + 2 + 1, 550 + 1_000, id="callcode_value"
        ),
        pytest.param(Instruction.DELEGATECALL, 0, Petersburg, 45 + 2 + 1, 0, id="delegatecall"),
        pytest.param(Instruction.STATICCALL, 0, Byzantium, 45 + 2 + 1, 0, id="staticcall"),
    ],
)
def test_calls(instruction: Instruction, value: int, fork: Fork, local: int, external: int):
    """Test the call family with and without the costs paid for the callee."""
    items = call_items(instruction, value)
    assert run(items, fork, include_external_costs=False) == local
    assert run(items, fork, include_external_costs=True) == local + external


def test_call_unknown_value():
    """Test that a value not known to be zero is charged the transfer costs."""
    items = [push(0), push(0), push(0), push(0), UNKNOWN, push(1), push(0), op(Instruction.CALL)]
    assert run(items) == 45 + 1_600 + 550 + 1_000


@pytest.mark.parametrize(
    "fork,local,external",
    [
        pytest.param(Homestead, 0, 1_600, id="homestead"),
        pytest.param(TangerineWhistle, 350, 1_600, id="tangerine_whistle"),
        pytest.param(Petersburg, 350, 1_600, id="petersburg"),
    ],
)
def test_selfdestruct(fork: Fork, local: int, external: int):
    """Test SELFDESTRUCT with and without the account creation surcharge."""
    items = [push(0x1234), op(Instruction.SELFDESTRUCT)]
    assert run(items, fork, include_external_costs=False) == local
    assert run(items, fork, include_external_costs=True) == local + external


def test_create():
    """Test that contract creation is only bounded when the init code is excluded."""
    create = [push(64), push(0), push(0), op(Instruction.CREATE)]
    assert run(create, include_external_costs=True).is_infinite
    assert run(create, include_external_costs=False) == 2_000 + 2

    create2 = [push(1), push(64), push(0), push(0), op(Instruction.CREATE2)]
    assert run(create2, include_external_costs=True).is_infinite
    assert run(create2, include_external_costs=False) == 2_000 + 2 + 2


@pytest.mark.parametrize(
    "size,expected",
    [
        pytest.param(0, 0, id="zero"),
        pytest.param(1, 3, id="one_byte"),
        pytest.param(32, 3, id="one_word"),
        pytest.param(33, 6, id="two_words"),
    ],
)
def test_word_gas(size: int, expected: int, meter_factory: Callable[..., GasMeter]):
    """Test that word costs round sizes up to whole words."""
    meter = meter_factory()
    class_id = meter.state.expression_classes.find(push(size))
    assert meter.word_gas(3, class_id) == expected


def test_word_gas_unknown(meter_factory: Callable[..., GasMeter]):
    """Test that an unknown size yields an unbounded word cost."""
    meter = meter_factory()
    assert meter.word_gas(3, meter.state.expression_classes.new_class()).is_infinite


def test_estimate_updates_state(state: KnownState, meter_factory: Callable[..., GasMeter]):
    """Test that every estimated item is fed to the shared state."""
    meter = meter_factory(Homestead)
    assert meter.fork is Homestead
    meter.estimate_max(push(3))
    meter.estimate_max(push(4))
    meter.estimate_max(op(Instruction.ADD))
    assert state.stack_height == 1
    assert state.expression_classes.known_constant(state.relative_stack_element(0)) == 7


def test_meters_on_copies_in_parallel():
    """Test that meters on copies of one state can run concurrently."""
    base = KnownState()
    for item in [push(1), op(Instruction.CALLDATASIZE)]:
        base.feed_item(item)
    size = len(base.expression_classes)

    def estimate(offset: int) -> GasConsumption:
        meter = GasMeter(base.copy(), Petersburg)
        total = GasConsumption()
        for _ in range(50):
            for item in [op(Instruction.GAS), op(Instruction.POP), push(1), push(offset)]:
                total += meter.estimate_max(item)
            total += meter.estimate_max(op(Instruction.MSTORE))
        return total

    offsets = [32 * i for i in range(8)]
    with ThreadPoolExecutor(max_workers=8) as executor:
        results = list(executor.map(estimate, offsets))

    for offset, gas in zip(offsets, results):
        expansion = Petersburg.memory_expansion_gas_calculator()(new_bytes=offset + 32)
        # GAS, POP, two pushes and MSTORE with its memory expansion.
        assert gas == 50 * (1 + 1 + 1 + 1 + 1 + expansion)
    assert len(base.expression_classes) == size
