"""depshare - shared dependency deduplication proxy."""

__version__ = "0.1.0"
