"""Chainlink price feed oracle."""
import logging

from ...config import ChainlinkConfig
from ...errors import OracleUnavailableError
from ...interfaces.chain import ChainClient
from ...models import PriceOrigin, PriceQuote
from .abi import (
    DECIMALS_SELECTOR,
    LATEST_ROUND_DATA_SELECTOR,
    decode_decimals,
    decode_round_data,
    format_units,
)

logger = logging.getLogger(__name__)


class ChainlinkOracle:
    """Read USD prices from Chainlink aggregator contracts."""

    def __init__(self, client: ChainClient, config: ChainlinkConfig) -> None:
        self._client = client
        self.price_feeds = {sym.upper(): addr for sym, addr in config.feeds.items()}

    def supports(self, symbol: str) -> bool:
        return symbol.upper() in self.price_feeds

    async def fetch_quote(self, symbol: str) -> PriceQuote:
        """Fetch the latest round of the symbol's feed.

        Every failure, including an unknown symbol, is raised as
        OracleUnavailableError. No retry happens here.
        """
        symbol = symbol.upper()
        feed_address = self.price_feeds.get(symbol)
        if not feed_address:
            raise OracleUnavailableError(
                symbol, f"No Chainlink price feed available for {symbol}"
            )

        try:
            round_raw = await self._client.eth_call(
                feed_address, LATEST_ROUND_DATA_SELECTOR
            )
            decimals_raw = await self._client.eth_call(feed_address, DECIMALS_SELECTOR)

            round_data = decode_round_data(round_raw)
            decimals = decode_decimals(decimals_raw)
        except Exception as e:
            raise OracleUnavailableError(symbol, str(e)) from e

        if round_data.answer <= 0:
            raise OracleUnavailableError(
                symbol, f"Non-positive answer {round_data.answer} in round {round_data.round_id}"
            )

        price = format_units(round_data.answer, decimals)
        logger.debug(
            "Chainlink %s: $%.4f (round %d, updated %d)",
            symbol,
            price,
            round_data.round_id,
            round_data.updated_at,
        )

        return PriceQuote(
            symbol=symbol,
            price=price,
            decimals=decimals,
            observed_at=float(round_data.updated_at),
            origin=PriceOrigin.LIVE,
        )
