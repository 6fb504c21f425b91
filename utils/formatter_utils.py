# MIT License
#
# Copyright (c) 2018 Evgeny Medvedev, evge.medvedev@gmail.com
#
# Permission is hereby granted, free of charge, to any person obtaining a copy
# of this software and associated documentation files (the "Software"), to deal
# in the Software without restriction, including without limitation the rights
# to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
# copies of the Software, and to permit persons to whom the Software is
# furnished to do so, subject to the following conditions:
#
# The above copyright notice and this permission notice shall be included in all
# copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
# IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
# FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
# AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
# LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
# OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.
#
# Modified by: Cuong CT, 6/12/2025
# Change Description: using eth_utils library for implement some formatter utilities
# - Added exact decimal <-> base-unit conversion for token amounts (parse_units / format_units).
# - Added duration and address display helpers for governance actions.

import re
from typing import Optional

from eth_utils import to_int
from eth_utils import to_normalized_address as eth_to_normalized_address

from utils.logger_utils import get_logger

logger = get_logger("Formatter Utils")

# Plain decimal text: "10", "1.5", ".5", "2." (no sign, no exponent)
DECIMAL_AMOUNT_PATTERN = re.compile(r"^(\d*)(?:\.(\d*))?$")


def hex_to_dec(hex_string: str | None) -> int | None:
    """
    Converts a hex string to decimal integer.
    """
    if hex_string is None:
        return None
    try:
        return to_int(hexstr=hex_string)
    except (ValueError, TypeError):
        logger.warning(f"Invalid hex string for conversion: {hex_string}")
        return None


def to_normalized_address(address: Optional[str]) -> Optional[str]:
    """
    Convert address to lowercase.
    Safe-guards against None or invalid types.
    """
    if address is None or not isinstance(address, str):
        return None

    try:
        return eth_to_normalized_address(address)
    except ValueError:
        return address.lower()


def parse_units(amount: str, decimals: int) -> int:
    """
    Converts a human decimal amount ("1.5") into integer base units (1.5 * 10**decimals).
    The conversion is exact: more fractional digits than `decimals` is an error, not a rounding.

    Raises:
        ValueError: If the text is not a plain non-negative decimal number.
    """
    if decimals < 0:
        raise ValueError(f"decimals must be non-negative, got {decimals}")
    text = amount.strip() if isinstance(amount, str) else ""
    match = DECIMAL_AMOUNT_PATTERN.match(text)
    if not text or not match or text == ".":
        raise ValueError(f"Not a decimal amount: {amount!r}")

    whole, fraction = match.group(1) or "0", (match.group(2) or "").rstrip("0")
    if len(fraction) > decimals:
        raise ValueError(f"Too many decimal places in {amount!r} (max {decimals})")

    return int(whole) * 10 ** decimals + int(fraction.ljust(decimals, "0") or "0")


def format_units(value: int, decimals: int) -> str:
    """
    Inverse of parse_units: integer base units to the shortest exact decimal text.
    """
    sign = "-" if value < 0 else ""
    whole, remainder = divmod(abs(value), 10 ** decimals)
    if remainder == 0:
        return f"{sign}{whole}"
    fraction = str(remainder).rjust(decimals, "0").rstrip("0")
    return f"{sign}{whole}.{fraction}"


def format_token_amount(value: int | str | None, decimals: int = 18) -> str:
    """
    Display rounding of a token amount: thousands separators and at most two decimals (truncated).
    """
    if not value:
        return "0"
    whole, remainder = divmod(int(value), 10 ** decimals)
    decimal_str = str(remainder).rjust(decimals, "0")[:2]
    if remainder == 0 or decimal_str == "00":
        return f"{whole:,}"
    return f"{whole:,}.{decimal_str}"


def format_duration(seconds: int) -> str:
    """
    Human readable duration used in parameter-change descriptions ("2 days").
    """
    if seconds < 60:
        return f"{seconds} seconds"
    if seconds < 3600:
        return f"{seconds // 60} minutes"
    if seconds < 86400:
        return f"{seconds // 3600} hours"
    return f"{seconds // 86400} days"


def format_seconds(seconds: int) -> str:
    """Compact countdown form: 1d, 3h, 12m or 45s."""
    minutes = seconds // 60
    hours = minutes // 60
    days = hours // 24
    if days > 0:
        return f"{days}d"
    if hours > 0:
        return f"{hours}h"
    if minutes > 0:
        return f"{minutes}m"
    return f"{seconds}s"


def shorten_address(address: str | None, chars: int = 4) -> str:
    if not address or len(address) < 10:
        return address or ""
    return f"{address[:chars + 2]}...{address[-chars:]}"
