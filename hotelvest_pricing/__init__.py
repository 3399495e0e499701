"""Chainlink-backed USD price lookups for the hotel investment marketplace."""
