"""Data models — all frozen (immutable)."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class PriceOrigin(str, Enum):
    """Where a quote's price came from."""

    LIVE = "live"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class PriceQuote:
    """USD price for one asset symbol.

    ``observed_at`` is epoch seconds: the feed's on-chain ``updatedAt`` for
    live quotes, the local clock for fallback quotes.
    """

    symbol: str
    price: float
    decimals: int
    observed_at: float
    origin: PriceOrigin


@dataclass(frozen=True)
class CacheEntry:
    """A cached quote and the wall-clock time it was stored."""

    quote: PriceQuote
    cached_at: float


@dataclass(frozen=True)
class RoundData:
    """Decoded ``latestRoundData()`` result of a Chainlink aggregator."""

    round_id: int
    answer: int
    started_at: int
    updated_at: int
    answered_in_round: int


@dataclass(frozen=True)
class Holding:
    symbol: str
    amount: float


@dataclass(frozen=True)
class HoldingValue:
    """Single line of a portfolio valuation."""

    symbol: str
    amount: float
    unit_price_usd: float
    total_usd: float


@dataclass(frozen=True)
class PortfolioValuation:
    total_usd: float
    breakdown: tuple[HoldingValue, ...] = ()


@dataclass(frozen=True)
class CachedPrice:
    symbol: str
    price: float
    cached_at: float


@dataclass(frozen=True)
class MarketSnapshot:
    """Approximate market figures derived from the main asset prices."""

    prices: tuple[PriceQuote, ...]
    market_cap: float
    total_value_locked: float
    last_updated: float
