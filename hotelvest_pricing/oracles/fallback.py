"""Static fallback prices used when the live oracle is unreachable."""
import time
from typing import Callable

from ..config import PricingConfig
from ..errors import NoFallbackError
from ..models import PriceOrigin, PriceQuote


class FallbackPriceTable:
    """Fixed symbol → USD price lookup."""

    def __init__(
        self, config: PricingConfig, clock: Callable[[], float] = time.time
    ) -> None:
        self.prices = {sym.upper(): price for sym, price in config.fallback_prices.items()}
        self.decimals = config.fallback_decimals
        self._clock = clock

    def __contains__(self, symbol: str) -> bool:
        return symbol.upper() in self.prices

    def quote(self, symbol: str) -> PriceQuote:
        symbol = symbol.upper()
        price = self.prices.get(symbol)
        if price is None:
            raise NoFallbackError(symbol)

        return PriceQuote(
            symbol=symbol,
            price=price,
            decimals=self.decimals,
            observed_at=self._clock(),
            origin=PriceOrigin.FALLBACK,
        )
