"""Pure ABI helpers for Chainlink aggregator reads — no I/O."""
from __future__ import annotations

from decimal import Decimal

from ...models import RoundData

# keccak256("latestRoundData()")[:4]
LATEST_ROUND_DATA_SELECTOR = "0xfeaf968c"
# keccak256("decimals()")[:4]
DECIMALS_SELECTOR = "0x313ce567"

WORD_HEX_CHARS = 64
_INT256_SIGN_BIT = 1 << 255
_UINT256_RANGE = 1 << 256


def split_words(raw: str) -> list[str]:
    """Split an ABI-encoded hex return value into 32-byte words.

    Raises ValueError on a missing ``0x`` prefix, an empty result (call
    against an address without code) or a length that is not word-aligned.
    """
    if not raw.startswith("0x"):
        raise ValueError(f"Not a hex string: {raw!r}")

    body = raw[2:]
    if not body:
        raise ValueError("Empty call result")
    if len(body) % WORD_HEX_CHARS:
        raise ValueError(f"Result length {len(body)} is not a multiple of 32 bytes")

    return [body[i : i + WORD_HEX_CHARS] for i in range(0, len(body), WORD_HEX_CHARS)]


def decode_uint(word: str) -> int:
    return int(word, 16)


def decode_int(word: str) -> int:
    """Decode a two's-complement int256 word."""
    value = int(word, 16)
    if value & _INT256_SIGN_BIT:
        value -= _UINT256_RANGE
    return value


def decode_round_data(raw: str) -> RoundData:
    """Decode ``(uint80, int256, uint256, uint256, uint80)``."""
    words = split_words(raw)
    if len(words) < 5:
        raise ValueError(f"latestRoundData returned {len(words)} words, expected 5")

    return RoundData(
        round_id=decode_uint(words[0]),
        answer=decode_int(words[1]),
        started_at=decode_uint(words[2]),
        updated_at=decode_uint(words[3]),
        answered_in_round=decode_uint(words[4]),
    )


def decode_decimals(raw: str) -> int:
    """Decode a ``uint8`` return value."""
    value = decode_uint(split_words(raw)[0])
    if value > 0xFF:
        raise ValueError(f"decimals() out of uint8 range: {value}")
    return value


def format_units(value: int, decimals: int) -> float:
    """Convert a fixed-point integer into a float, e.g. (320000000000, 8) → 3200.0."""
    return float(Decimal(value).scaleb(-decimals))
