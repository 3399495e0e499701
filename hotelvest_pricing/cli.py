"""Command-line interface for hotelvest price lookups."""
from __future__ import annotations

import argparse
import asyncio
import sys
from datetime import datetime, timezone

from .config import load_config
from .errors import PricingError
from .logging_setup import configure_logging
from .models import Holding
from .services import PriceService


def parse_holding(value: str) -> Holding:
    """Parse ``SYMBOL=AMOUNT`` into a Holding."""
    symbol, sep, amount = value.partition("=")
    if not sep or not symbol:
        raise argparse.ArgumentTypeError(f"Expected SYMBOL=AMOUNT, got '{value}'")
    try:
        return Holding(symbol=symbol.strip().upper(), amount=float(amount))
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid amount in '{value}'") from None


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse CLI parser."""
    parser = argparse.ArgumentParser(
        prog="hotelvest-prices",
        description="Chainlink USD price lookups with cached fallback pricing",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to config.yaml (default: config.yaml in project root)",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)",
    )

    sub = parser.add_subparsers(dest="command")

    price_parser = sub.add_parser("price", help="Latest USD price for symbols")
    price_parser.add_argument("symbols", nargs="+", help="Asset symbols, e.g. ETH BTC")

    portfolio_parser = sub.add_parser("portfolio", help="Value holdings in USD")
    portfolio_parser.add_argument(
        "holdings", nargs="+", type=parse_holding, help="Holdings as SYMBOL=AMOUNT"
    )

    convert_parser = sub.add_parser("convert", help="Convert between USD and ETH")
    convert_parser.add_argument("direction", choices=["usd-to-eth", "eth-to-usd"])
    convert_parser.add_argument("amount", type=float)

    sub.add_parser("market", help="Market snapshot for the main assets")

    return parser


def _fmt_time(ts: float) -> str:
    return datetime.fromtimestamp(ts, timezone.utc).strftime("%Y-%m-%d %H:%M:%S")


async def _run(args: argparse.Namespace) -> None:
    """Execute the selected command."""
    configure_logging(args.log_level)
    config = load_config(args.config)
    service = PriceService.from_config(config)

    if args.command == "price":
        for quote in await service.get_multiple_prices(args.symbols):
            print(
                f"{quote.symbol:<6} ${quote.price:,.4f}  "
                f"[{quote.origin.value}] {_fmt_time(quote.observed_at)} UTC"
            )
    elif args.command == "portfolio":
        valuation = await service.calculate_portfolio_value(args.holdings)
        for item in valuation.breakdown:
            print(
                f"{item.symbol:<6} {item.amount:,.4f} @ ${item.unit_price_usd:,.2f}"
                f" = ${item.total_usd:,.2f}"
            )
        print(f"Total: ${valuation.total_usd:,.2f}")
    elif args.command == "convert":
        if args.direction == "usd-to-eth":
            eth = await service.convert_usd_to_eth(args.amount)
            print(f"${args.amount:,.2f} = {eth:,.6f} ETH")
        else:
            usd = await service.convert_eth_to_usd(args.amount)
            print(f"{args.amount:,.6f} ETH = ${usd:,.2f}")
    elif args.command == "market":
        snapshot = await service.get_market_data()
        for quote in snapshot.prices:
            print(f"{quote.symbol:<6} ${quote.price:,.4f}  [{quote.origin.value}]")
        print(f"Market cap: ${snapshot.market_cap:,.0f}")
        print(f"TVL: ${snapshot.total_value_locked:,.0f}")
        print(f"{_fmt_time(snapshot.last_updated)} UTC")
    else:
        build_parser().print_help()
        sys.exit(1)


def main() -> None:
    """Entry point."""
    parser = build_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    try:
        asyncio.run(_run(args))
    except PricingError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        sys.exit(1)
