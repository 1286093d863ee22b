"""
Initializes the config package.

The config package holds the defaults shared by the gas estimators, making
them accessible throughout the project.
"""

# This import is done to facilitate cleaner imports in the project
# `from config import GasMeterConfig` instead of `from config.app import GasMeterConfig`
from .app import GasMeterConfig

__all__ = ["GasMeterConfig"]
