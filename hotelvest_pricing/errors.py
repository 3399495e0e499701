"""Pricing exceptions."""


class PricingError(Exception):
    """Base exception for price lookup failures."""

    def __init__(self, message: str, code: str = "PRICING_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)


class OracleUnavailableError(PricingError):
    """Raised when a live feed read fails (network, timeout, revert, bad data)."""

    def __init__(self, symbol: str, reason: str):
        self.symbol = symbol
        super().__init__(
            f"Price unavailable for {symbol}: {reason}", code="ORACLE_UNAVAILABLE"
        )


class NoFallbackError(PricingError):
    """Raised when the oracle failed and no fallback price exists."""

    def __init__(self, symbol: str, message: str | None = None, code: str = "NO_FALLBACK"):
        self.symbol = symbol
        super().__init__(message or f"No fallback price available for {symbol}", code=code)


class UnsupportedSymbolError(NoFallbackError):
    """Raised when a symbol has neither a feed address nor a fallback price."""

    def __init__(self, symbol: str):
        super().__init__(
            symbol,
            message=f"Unsupported symbol: {symbol}",
            code="UNSUPPORTED_SYMBOL",
        )
