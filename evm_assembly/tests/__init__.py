"""Tests for the `evm_assembly` package."""
