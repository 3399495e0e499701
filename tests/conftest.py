"""Shared test fixtures, fakes and sample data."""
from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from hotelvest_pricing.config import (
    AppConfig,
    ChainlinkConfig,
    EthereumConfig,
    MarketDataConfig,
    PricingConfig,
)
from hotelvest_pricing.errors import OracleUnavailableError
from hotelvest_pricing.models import PriceOrigin, PriceQuote
from hotelvest_pricing.oracles.chainlink.abi import (
    DECIMALS_SELECTOR,
    LATEST_ROUND_DATA_SELECTOR,
)
from hotelvest_pricing.oracles.fallback import FallbackPriceTable
from hotelvest_pricing.services.price_cache import PriceCache

ETH_FEED = "0x5f4eC3Df9cbd43714FE2740f5E3616155c5b8419"
BTC_FEED = "0xF4030086522a5bEEa4988F8cA5B36dbC97BeE88c"
LINK_FEED = "0x2c1d072e956AFFC0D435Cb7AC38EF18d24d9127c"


# ---------------------------------------------------------------------------
# ABI encoding helpers
# ---------------------------------------------------------------------------


def encode_word(value: int) -> str:
    """Encode an int as a 32-byte two's-complement word (no 0x prefix)."""
    return format(value % (1 << 256), "064x")


def encode_round_data(
    answer: int,
    round_id: int = 110680464442257320000,
    started_at: int = 1_700_000_000,
    updated_at: int = 1_700_000_000,
    answered_in_round: int | None = None,
) -> str:
    if answered_in_round is None:
        answered_in_round = round_id
    words = [round_id, answer, started_at, updated_at, answered_in_round]
    return "0x" + "".join(encode_word(w) for w in words)


def encode_decimals(decimals: int) -> str:
    return "0x" + encode_word(decimals)


# ---------------------------------------------------------------------------
# Fakes
# ---------------------------------------------------------------------------


class FakeClock:
    """Manually advanced clock returning epoch seconds."""

    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeChainClient:
    """In-memory eth_call responder keyed by (address, selector)."""

    def __init__(self) -> None:
        self.responses: dict[tuple[str, str], str] = {}
        self.calls: list[tuple[str, str]] = []
        self.error: Exception | None = None

    def set_feed(
        self, address: str, answer: int, decimals: int = 8, updated_at: int = 1_700_000_000
    ) -> None:
        self.responses[(address, LATEST_ROUND_DATA_SELECTOR)] = encode_round_data(
            answer, updated_at=updated_at
        )
        self.responses[(address, DECIMALS_SELECTOR)] = encode_decimals(decimals)

    async def eth_call(self, to: str, data: str, block: str = "latest") -> str:
        self.calls.append((to, data))
        if self.error is not None:
            raise self.error
        if (to, data) not in self.responses:
            raise RuntimeError("RPC Error: execution reverted")
        return self.responses[(to, data)]


class FakeOracle:
    """Live oracle stand-in with switchable failure and a call counter."""

    def __init__(self, prices: dict[str, float]) -> None:
        self.prices = dict(prices)
        self.failing = False
        self.calls: list[str] = []

    def supports(self, symbol: str) -> bool:
        return symbol.upper() in self.prices

    async def fetch_quote(self, symbol: str) -> PriceQuote:
        self.calls.append(symbol)
        if self.failing or symbol not in self.prices:
            raise OracleUnavailableError(symbol, "simulated outage")
        return PriceQuote(
            symbol=symbol,
            price=self.prices[symbol],
            decimals=8,
            observed_at=1_700_000_000.0,
            origin=PriceOrigin.LIVE,
        )


# ---------------------------------------------------------------------------
# Config fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def sample_ethereum_config() -> EthereumConfig:
    return EthereumConfig(
        rpc_endpoints=("https://rpc1.example.com", "https://rpc2.example.com"),
        rpc_timeout=10,
    )


@pytest.fixture()
def sample_chainlink_config() -> ChainlinkConfig:
    return ChainlinkConfig(feeds={"ETH": ETH_FEED, "BTC": BTC_FEED, "LINK": LINK_FEED})


@pytest.fixture()
def sample_pricing_config() -> PricingConfig:
    return PricingConfig(
        cache_ttl_seconds=300.0,
        fallback_decimals=8,
        fallback_prices={"ETH": 3200.0, "BTC": 67000.0, "USDC": 1.0},
    )


@pytest.fixture()
def sample_market_config() -> MarketDataConfig:
    return MarketDataConfig(
        assets=("ETH", "BTC", "USDC"),
        supply_multipliers={"ETH": 120_000_000.0, "BTC": 19_000_000.0},
        default_multiplier=1_000_000.0,
        tvl_ratio=0.15,
    )


@pytest.fixture()
def sample_app_config(
    sample_ethereum_config: EthereumConfig,
    sample_chainlink_config: ChainlinkConfig,
    sample_pricing_config: PricingConfig,
    sample_market_config: MarketDataConfig,
) -> AppConfig:
    return AppConfig(
        ethereum=sample_ethereum_config,
        chainlink=sample_chainlink_config,
        pricing=sample_pricing_config,
        market_data=sample_market_config,
    )


# ---------------------------------------------------------------------------
# Component fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def fake_oracle() -> FakeOracle:
    return FakeOracle({"ETH": 3500.0, "BTC": 100000.0, "LINK": 15.0})


@pytest.fixture()
def fallback_table(sample_pricing_config: PricingConfig, clock: FakeClock) -> FallbackPriceTable:
    return FallbackPriceTable(sample_pricing_config, clock=clock)


@pytest.fixture()
def price_cache(
    fake_oracle: FakeOracle, fallback_table: FallbackPriceTable, clock: FakeClock
) -> PriceCache:
    return PriceCache(fake_oracle, fallback_table, ttl_seconds=300.0, clock=clock)


# ---------------------------------------------------------------------------
# Config YAML fixture
# ---------------------------------------------------------------------------

SAMPLE_YAML = textwrap.dedent("""\
    ethereum:
      rpc_endpoints: ["https://rpc.example.com"]
      rpc_timeout: 10
    chainlink:
      feeds:
        eth: "0x5f4eC3Df9cbd43714FE2740f5E3616155c5b8419"
        BTC: "0xF4030086522a5bEEa4988F8cA5B36dbC97BeE88c"
    pricing:
      cache_ttl_seconds: 120
      fallback_prices: {ETH: 3200, BTC: 67000, MATIC: 0.85}
    market_data:
      assets: [ETH, BTC]
      supply_multipliers: {ETH: 120000000}
      tvl_ratio: 0.2
""")


@pytest.fixture()
def sample_yaml_path(tmp_path: Path) -> Path:
    cfg_file = tmp_path / "config.yaml"
    cfg_file.write_text(SAMPLE_YAML)
    return cfg_file


@pytest.fixture()
def fake_chain_client() -> FakeChainClient:
    client = FakeChainClient()
    client.set_feed(ETH_FEED, 350_012_345_678)
    client.set_feed(BTC_FEED, 10_000_000_000_000)
    return client
