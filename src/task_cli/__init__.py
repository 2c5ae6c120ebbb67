"""Local terminal task tracker with an arrow-key menu."""

__version__ = "0.1.0"
