"""Split local/sync key-value storage for the trading extension."""

__version__ = "0.1.0"
