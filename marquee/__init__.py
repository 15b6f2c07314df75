"""Marquee: now-playing catalog refresh and rating alerts."""

__version__ = "1.0.0"
