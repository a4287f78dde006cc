"""Idle RPG tick engine and Monte Carlo balance simulator."""

__version__ = "0.4.0"
