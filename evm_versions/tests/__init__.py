"""Tests for the `evm_versions` package."""
