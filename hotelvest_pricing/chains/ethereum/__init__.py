"""Ethereum chain support."""
from .client import EthereumClient

__all__ = ["EthereumClient"]
