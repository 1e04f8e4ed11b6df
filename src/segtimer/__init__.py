"""segtimer: a full-screen seven-segment countdown timer for the terminal."""

__version__ = "0.1.0"
