"""CryptoBoard - cryptocurrency dashboard backed by a cache -> live -> fallback data chain."""

__version__ = "1.0.0"
