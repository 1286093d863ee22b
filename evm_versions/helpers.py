"""Helper methods to resolve protocol versions by name and to enumerate them."""

from typing import Annotated, Any, Callable, List, Type

from pydantic import PlainSerializer, PlainValidator

from .base_fork import BaseFork
from .forks import forks


class InvalidForkError(Exception):
    """Invalid fork error raised when the fork specified is not found or incompatible."""

    def __init__(self, message):
        """Initialize the InvalidForkError exception."""
        super().__init__(message)


all_forks: List[Type[BaseFork]] = []
for fork_name in forks.__dict__:
    fork = forks.__dict__[fork_name]
    if not isinstance(fork, type):
        continue
    if issubclass(fork, BaseFork) and fork is not BaseFork:
        all_forks.append(fork)


def get_forks() -> List[Type[BaseFork]]:
    """
    Return list of all the fork classes implemented by `evm_versions`
    ordered chronologically by deployment.
    """
    return all_forks


def get_parent_fork(fork: Type[BaseFork]) -> Type[BaseFork]:
    """Return parent fork of the specified fork."""
    parent_fork = fork.__base__
    if not parent_fork:
        raise InvalidForkError(f"Parent fork of {fork} not found.")
    return parent_fork


def forks_from_until(
    fork_from: Type[BaseFork], fork_until: Type[BaseFork]
) -> List[Type[BaseFork]]:
    """
    Return specified fork and all forks after it until and including the
    second specified fork.
    """
    prev_fork = fork_until

    forks: List[Type[BaseFork]] = []

    while prev_fork != BaseFork and prev_fork != fork_from:
        forks.insert(0, prev_fork)

        prev_fork = get_parent_fork(prev_fork)

    if prev_fork == BaseFork:
        return []

    forks.insert(0, fork_from)

    return forks


def forks_from(fork: Type[BaseFork]) -> List[Type[BaseFork]]:
    """Return specified fork and all forks after it."""
    return forks_from_until(fork, get_forks()[-1])


def get_fork_by_name(fork_name: str) -> Type[BaseFork]:
    """
    Get a fork by name.

    Both the class name (`TangerineWhistle`) and the compiler name
    (`tangerineWhistle`) are accepted, case insensitively.
    """
    wanted = fork_name.strip().lower()
    for fork in get_forks():
        if wanted in (fork.name().lower(), fork.solc_name().lower()):
            return fork
    raise InvalidForkError(f"Unknown fork: {fork_name}")


def fork_validator_generator(
    cls_name: str, forks: List[Type[BaseFork]]
) -> Callable[[Any], Type[BaseFork]]:
    """Generate a fork validator function."""

    def fork_validator(obj: Any) -> Type[BaseFork]:
        """Get a fork by name or raise an error."""
        if obj is None:
            raise InvalidForkError("Fork cannot be None")
        if isinstance(obj, type) and issubclass(obj, BaseFork) and obj in forks:
            return obj
        if isinstance(obj, str):
            return get_fork_by_name(obj)
        raise InvalidForkError(f"Invalid {cls_name}: {obj} (type: {type(obj)})")

    return fork_validator


# Annotated Pydantic-Friendly Fork Type
Fork = Annotated[
    Type[BaseFork],
    PlainSerializer(str),
    PlainValidator(fork_validator_generator("Fork", all_forks)),
]
