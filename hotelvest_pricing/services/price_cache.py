"""Read-through price cache with fallback pricing."""
from __future__ import annotations

import logging
import time
from typing import Callable

from ..errors import OracleUnavailableError, UnsupportedSymbolError
from ..interfaces.price_oracle import PriceOracle
from ..models import CachedPrice, CacheEntry, PriceQuote
from ..oracles.fallback import FallbackPriceTable

logger = logging.getLogger(__name__)


class PriceCache:
    """
    Per-symbol TTL cache in front of a live oracle.

    On a miss or an expired entry the oracle is asked first; if it fails the
    fallback table answers instead. Either result is cached for the full TTL,
    so a fallback price stays in place until it expires even if the oracle
    recovers sooner. Refresh is lazy: nothing is re-fetched until the next
    read after expiry.
    """

    def __init__(
        self,
        oracle: PriceOracle,
        fallback: FallbackPriceTable,
        ttl_seconds: float = 300.0,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._oracle = oracle
        self._fallback = fallback
        self._ttl = ttl_seconds
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    async def get_price(self, symbol: str) -> PriceQuote:
        symbol = symbol.upper()

        entry = self._entries.get(symbol)
        if entry and self._is_valid(entry):
            logger.debug("Cache hit for %s", symbol)
            return entry.quote

        try:
            quote = await self._oracle.fetch_quote(symbol)
        except OracleUnavailableError as e:
            logger.warning("Error fetching Chainlink price for %s: %s", symbol, e)
            quote = self._fallback_quote(symbol)

        self._entries[symbol] = CacheEntry(quote=quote, cached_at=self._clock())
        return quote

    def clear(self) -> None:
        """Drop every cached entry."""
        self._entries.clear()

    def cached_prices(self) -> list[CachedPrice]:
        """List all entries, expired ones included."""
        return [
            CachedPrice(symbol=symbol, price=entry.quote.price, cached_at=entry.cached_at)
            for symbol, entry in self._entries.items()
        ]

    def _is_valid(self, entry: CacheEntry) -> bool:
        return self._clock() - entry.cached_at < self._ttl

    def _fallback_quote(self, symbol: str) -> PriceQuote:
        if symbol not in self._fallback and not self._oracle.supports(symbol):
            raise UnsupportedSymbolError(symbol)
        return self._fallback.quote(symbol)
