"""Listings of all the EVM protocol versions."""
