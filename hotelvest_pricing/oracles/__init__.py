"""Price sources."""
from .chainlink import ChainlinkOracle
from .fallback import FallbackPriceTable

__all__ = ["ChainlinkOracle", "FallbackPriceTable"]
