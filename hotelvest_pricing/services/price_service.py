"""Aggregate price queries built on the price cache."""
from __future__ import annotations

import asyncio
import logging
import time
from typing import Callable, Iterable

from ..chains.ethereum import EthereumClient
from ..config import AppConfig, MarketDataConfig
from ..models import (
    CachedPrice,
    Holding,
    HoldingValue,
    MarketSnapshot,
    PortfolioValuation,
    PriceQuote,
)
from ..oracles import ChainlinkOracle, FallbackPriceTable
from .price_cache import PriceCache

logger = logging.getLogger(__name__)

ETH_SYMBOL = "ETH"


class PriceService:
    """Batch lookups, conversions and valuations over a shared PriceCache."""

    def __init__(
        self,
        cache: PriceCache,
        market_data: MarketDataConfig | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._cache = cache
        self._market_data = market_data or MarketDataConfig()
        self._clock = clock

    @classmethod
    def from_config(
        cls, config: AppConfig, clock: Callable[[], float] = time.time
    ) -> PriceService:
        """Wire the Chainlink oracle, fallback table and cache from config."""
        client = EthereumClient(config.ethereum)
        oracle = ChainlinkOracle(client, config.chainlink)
        fallback = FallbackPriceTable(config.pricing, clock=clock)
        cache = PriceCache(
            oracle,
            fallback,
            ttl_seconds=config.pricing.cache_ttl_seconds,
            clock=clock,
        )
        return cls(cache, config.market_data, clock=clock)

    # ------------------------------------------------------------------
    # Prices
    # ------------------------------------------------------------------

    async def get_price(self, symbol: str) -> PriceQuote:
        return await self._cache.get_price(symbol)

    async def get_multiple_prices(self, symbols: Iterable[str]) -> list[PriceQuote]:
        """Fetch prices concurrently; the first failure fails the whole batch."""
        return list(await asyncio.gather(*(self._cache.get_price(s) for s in symbols)))

    # ------------------------------------------------------------------
    # Conversions
    # ------------------------------------------------------------------

    async def convert_usd_to_eth(self, usd_amount: float) -> float:
        eth = await self._cache.get_price(ETH_SYMBOL)
        return usd_amount / eth.price

    async def convert_eth_to_usd(self, eth_amount: float) -> float:
        eth = await self._cache.get_price(ETH_SYMBOL)
        return eth_amount * eth.price

    # ------------------------------------------------------------------
    # Valuation
    # ------------------------------------------------------------------

    async def calculate_portfolio_value(
        self, holdings: Iterable[Holding]
    ) -> PortfolioValuation:
        """Value holdings in USD, one price lookup per distinct symbol."""
        holdings = list(holdings)
        symbols = list(dict.fromkeys(h.symbol.upper() for h in holdings))
        quotes = await self.get_multiple_prices(symbols)
        unit_prices = {q.symbol: q.price for q in quotes}

        breakdown = tuple(
            HoldingValue(
                symbol=h.symbol,
                amount=h.amount,
                unit_price_usd=unit_prices[h.symbol.upper()],
                total_usd=h.amount * unit_prices[h.symbol.upper()],
            )
            for h in holdings
        )
        total = sum(item.total_usd for item in breakdown)

        logger.info(
            "Portfolio of %d holdings valued at $%.2f", len(breakdown), total
        )
        return PortfolioValuation(total_usd=total, breakdown=breakdown)

    async def get_market_data(self) -> MarketSnapshot:
        """Approximate market cap and TVL for the configured main assets."""
        cfg = self._market_data
        prices = await self.get_multiple_prices(cfg.assets)

        market_cap = sum(
            q.price * cfg.supply_multipliers.get(q.symbol, cfg.default_multiplier)
            for q in prices
        )

        return MarketSnapshot(
            prices=tuple(prices),
            market_cap=market_cap,
            total_value_locked=market_cap * cfg.tvl_ratio,
            last_updated=self._clock(),
        )

    # ------------------------------------------------------------------
    # Cache management
    # ------------------------------------------------------------------

    def clear_cache(self) -> None:
        self._cache.clear()
        logger.info("Price cache cleared")

    def get_cached_prices(self) -> list[CachedPrice]:
        return self._cache.cached_prices()
