"""Subtitle translation client with simulated progress reporting."""

__version__ = "0.1.0"
