"""Chainlink price feed support."""
from .oracle import ChainlinkOracle

__all__ = ["ChainlinkOracle"]
