"""Tests for the `evm_gas` package."""
