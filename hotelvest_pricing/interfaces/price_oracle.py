"""Price oracle protocol — live price feed abstraction."""
from typing import Protocol

from ..models import PriceQuote


class PriceOracle(Protocol):
    """Abstract interface for fetching a live asset price."""

    def supports(self, symbol: str) -> bool: ...

    async def fetch_quote(self, symbol: str) -> PriceQuote: ...
