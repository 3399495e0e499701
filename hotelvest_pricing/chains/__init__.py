"""Blockchain client implementations."""
from .ethereum import EthereumClient

__all__ = ["EthereumClient"]
