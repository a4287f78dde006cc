"""Utility functions for formatting and display."""
from .config import DEFAULT_BALANCE, BalanceConfig


def format_number(value: float) -> str:
    """Format a count with K/M/B suffix."""
    if value >= 1_000_000_000:
        return f"{value / 1_000_000_000:.1f}B"
    if value >= 1_000_000:
        return f"{value / 1_000_000:.1f}M"
    if value >= 1_000:
        return f"{value / 1_000:.1f}K"
    if isinstance(value, float) and not value.is_integer():
        return f"{value:.1f}"
    return str(int(value))


def format_time(seconds: int) -> str:
    """Format seconds into human-readable time (hours/minutes/seconds)."""
    seconds = int(seconds)
    if seconds >= 3600:
        hours = seconds // 3600
        minutes = (seconds % 3600) // 60
        return f"{hours}h {minutes}m"
    if seconds >= 60:
        minutes = seconds // 60
        secs = seconds % 60
        return f"{minutes}m {secs}s"
    return f"{seconds}s"


def format_ticks(ticks: float, balance: BalanceConfig = DEFAULT_BALANCE) -> str:
    """Format a tick count as game time at the configured tick rate."""
    return format_time(int(ticks * balance.tick_seconds))
