"""
A module for managing gas meter configurations.

Classes:
- GasMeterConfig: Holds the defaults used when estimating gas.
"""

from pathlib import Path

from pydantic import BaseModel, ConfigDict

from evm_versions import Fork


class GasMeterConfig(BaseModel):
    """A class for accessing the defaults of the gas estimators."""

    model_config = ConfigDict(validate_default=True)

    DEFAULT_FORK: Fork = "Petersburg"  # type: ignore[assignment]
    """The protocol version whose prices are used when none is given."""

    INCLUDE_EXTERNAL_COSTS: bool = True
    """Whether costs paid on behalf of called or created contracts are included."""

    LOGGER_CONFIG: Path = Path(__file__).resolve().parent / "logger.cfg"
    """The logging configuration file read by `setup_logger`, installed with this package."""
