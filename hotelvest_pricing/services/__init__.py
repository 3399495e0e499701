"""Service modules"""
from .price_cache import PriceCache
from .price_service import PriceService

__all__ = ["PriceCache", "PriceService"]
