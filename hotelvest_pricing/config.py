"""Configuration loader — reads config.yaml, interpolates env vars, validates."""
from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Frozen config dataclasses
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class EthereumConfig:
    rpc_endpoints: tuple[str, ...] = ()
    rpc_timeout: int = 30


@dataclass(frozen=True)
class ChainlinkConfig:
    feeds: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class PricingConfig:
    cache_ttl_seconds: float = 300.0
    fallback_decimals: int = 8
    fallback_prices: dict[str, float] = field(default_factory=dict)


@dataclass(frozen=True)
class MarketDataConfig:
    assets: tuple[str, ...] = ("ETH", "BTC", "LINK", "USDC")
    supply_multipliers: dict[str, float] = field(
        default_factory=lambda: {
            "ETH": 120_000_000.0,
            "BTC": 19_000_000.0,
            "LINK": 617_000_000.0,
            "USDC": 32_000_000_000.0,
        }
    )
    default_multiplier: float = 1_000_000.0
    tvl_ratio: float = 0.15


@dataclass(frozen=True)
class AppConfig:
    ethereum: EthereumConfig = field(default_factory=EthereumConfig)
    chainlink: ChainlinkConfig = field(default_factory=ChainlinkConfig)
    pricing: PricingConfig = field(default_factory=PricingConfig)
    market_data: MarketDataConfig = field(default_factory=MarketDataConfig)


# ---------------------------------------------------------------------------
# Env interpolation
# ---------------------------------------------------------------------------

_ENV_VAR_RE = re.compile(r"\$\{([^}]+)}")
_ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")


def _interpolate_env(value: Any) -> Any:
    """Recursively replace ${VAR} references with environment variable values."""
    if isinstance(value, str):
        return _ENV_VAR_RE.sub(lambda m: os.environ.get(m.group(1), ""), value)
    if isinstance(value, dict):
        return {k: _interpolate_env(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_interpolate_env(item) for item in value]
    return value


# ---------------------------------------------------------------------------
# YAML → dataclass builders
# ---------------------------------------------------------------------------


def _build_ethereum(raw: dict[str, Any]) -> EthereumConfig:
    # Endpoints whose ${VAR} resolved to nothing are dropped
    endpoints = tuple(e for e in raw.get("rpc_endpoints", []) if e)
    return EthereumConfig(
        rpc_endpoints=endpoints,
        rpc_timeout=int(raw.get("rpc_timeout", 30)),
    )


def _build_chainlink(raw: dict[str, Any]) -> ChainlinkConfig:
    feeds = {str(sym).upper(): str(addr) for sym, addr in raw.get("feeds", {}).items()}
    return ChainlinkConfig(feeds=feeds)


def _build_pricing(raw: dict[str, Any]) -> PricingConfig:
    fallback_prices = {
        str(sym).upper(): float(price)
        for sym, price in raw.get("fallback_prices", {}).items()
    }
    return PricingConfig(
        cache_ttl_seconds=float(raw.get("cache_ttl_seconds", 300)),
        fallback_decimals=int(raw.get("fallback_decimals", 8)),
        fallback_prices=fallback_prices,
    )


def _build_market_data(raw: dict[str, Any]) -> MarketDataConfig:
    defaults = MarketDataConfig()
    return MarketDataConfig(
        assets=tuple(str(a).upper() for a in raw.get("assets", defaults.assets)),
        supply_multipliers={
            str(sym).upper(): float(mult)
            for sym, mult in raw.get(
                "supply_multipliers", defaults.supply_multipliers
            ).items()
        },
        default_multiplier=float(
            raw.get("default_multiplier", defaults.default_multiplier)
        ),
        tvl_ratio=float(raw.get("tvl_ratio", defaults.tvl_ratio)),
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_config(config_path: str | Path | None = None) -> AppConfig:
    """Load and validate application configuration from YAML + .env.

    Args:
        config_path: Path to config.yaml. Defaults to ``config.yaml`` in the
            project root (one level up from the package directory).
    """
    load_dotenv()

    if config_path is None:
        config_path = Path(__file__).resolve().parent.parent / "config.yaml"
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path) as f:
        raw = yaml.safe_load(f) or {}

    raw = _interpolate_env(raw)

    cfg = AppConfig(
        ethereum=_build_ethereum(raw.get("ethereum", {})),
        chainlink=_build_chainlink(raw.get("chainlink", {})),
        pricing=_build_pricing(raw.get("pricing", {})),
        market_data=_build_market_data(raw.get("market_data", {})),
    )

    _validate(cfg)
    logger.info("Configuration loaded from %s", config_path)
    return cfg


def _validate(cfg: AppConfig) -> None:
    """Raise on invalid configuration."""
    if not cfg.ethereum.rpc_endpoints:
        raise ValueError("At least one Ethereum RPC endpoint must be configured")

    if cfg.ethereum.rpc_timeout <= 0:
        raise ValueError("rpc_timeout must be positive")

    for symbol, address in cfg.chainlink.feeds.items():
        if not _ADDRESS_RE.match(address):
            raise ValueError(f"Feed '{symbol}' has invalid address '{address}'")

    if cfg.pricing.cache_ttl_seconds <= 0:
        raise ValueError("cache_ttl_seconds must be positive")

    for symbol, price in cfg.pricing.fallback_prices.items():
        if price <= 0:
            raise ValueError(f"Fallback price for '{symbol}' must be positive")

    if not 0 <= cfg.market_data.tvl_ratio <= 1:
        raise ValueError("tvl_ratio must be between 0 and 1")
