"""Terminal typing drills fed from a word list."""

__version__ = "0.1.0"
