"""Local pytest configuration used on multiple framework tests."""

from typing import Callable

import pytest

from evm_assembly import KnownState
from evm_gas import GasMeter
from evm_versions import Fork, Petersburg


@pytest.fixture
def state() -> KnownState:
    """Return an empty known state."""
    return KnownState()


@pytest.fixture
def meter_factory(state: KnownState) -> Callable[..., GasMeter]:
    """Return a factory of gas meters sharing the `state` fixture."""

    def factory(fork: Fork = Petersburg) -> GasMeter:
        return GasMeter(state, fork)

    return factory
