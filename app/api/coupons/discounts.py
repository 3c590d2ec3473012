"""
Discount labels are free text ("20%", "$10", "Free Shipping"). These helpers
derive a label from a coupon title and re-parse labels for sorting, filtering
and store meta titles.
"""

import re
from enum import Enum
from typing import Optional, Tuple

PERCENT_PATTERN = re.compile(r'(\d+)%')
AMOUNT_PATTERN = re.compile(r'\$?\s?(\d+)\$?')
FREE_SHIPPING_PATTERN = re.compile(r'free\s+shipping', re.IGNORECASE)
NUMERIC_DISCOUNT_PATTERN = re.compile(r'(\$)?\s*(\d+)\s*(%|\$)?')

FREE_SHIPPING_LABEL = 'Free Shipping'


class DiscountTier(str, Enum):
    NONE = 'none'
    FREE_SHIPPING = 'free_shipping'
    HIGH = 'high'
    LOW = 'low'
    OTHER = 'other'


def derive_discount(title: Optional[str]) -> str:
    title = title or ''
    if FREE_SHIPPING_PATTERN.search(title):
        return FREE_SHIPPING_LABEL
    match = PERCENT_PATTERN.search(title)
    if match:
        return f'{match.group(1)}%'
    match = AMOUNT_PATTERN.search(title)
    if match:
        return f'${match.group(1)}'
    return ''


def extract_percent(discount: Optional[str]) -> int:
    if not discount:
        return 0
    match = PERCENT_PATTERN.search(discount)
    return int(match.group(1)) if match else 0


def is_free_shipping(discount: Optional[str]) -> bool:
    return 'free ship' in (discount or '').lower()


def discount_tier(discount: Optional[str]) -> DiscountTier:
    if not discount:
        return DiscountTier.NONE
    if is_free_shipping(discount):
        return DiscountTier.FREE_SHIPPING
    if PERCENT_PATTERN.search(discount):
        return DiscountTier.HIGH if extract_percent(discount) >= 20 else DiscountTier.LOW
    return DiscountTier.OTHER


def parse_numeric_discount(discount: Optional[str]) -> Optional[Tuple[int, str]]:
    """Return (value, symbol) for labels like '$55', '55$' or '50 %'."""
    match = NUMERIC_DISCOUNT_PATTERN.search(discount or '')
    if not match:
        return None
    prefix_dollar, value, suffix = match.groups()
    symbol = '$' if prefix_dollar else suffix or '%'
    return int(value), symbol
