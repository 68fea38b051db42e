# Area: Shared
"""
fhe_quest._shared.formatting — Display helpers
==============================================

Countdown, address and ether formatting used by the CLI and outcome banners.
"""

from decimal import Decimal

from web3 import Web3


def format_time(seconds: int) -> str:
    """Format a duration as HH:MM:SS. Negative input is clamped to zero."""
    seconds = max(0, int(seconds))
    hours = seconds // 3600
    minutes = (seconds % 3600) // 60
    secs = seconds % 60
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


def format_address(address: str) -> str:
    """Shorten an address to 0x1234...abcd."""
    if not address or len(address) <= 10:
        return address or ""
    return f"{address[:6]}...{address[-4:]}"


def format_ether(wei: int) -> str:
    """Format a wei amount in ether, without trailing zeros."""
    value = Decimal(Web3.from_wei(int(wei), "ether"))
    return format(value.normalize(), "f")
