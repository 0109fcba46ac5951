"""Utility functions for launch amounts and display formatting"""

import re
from decimal import Decimal

_SCHEME_RE = re.compile(r"^https?://", re.IGNORECASE)


def percent_of_supply(token_supply: int, percent: Decimal) -> int:
    """
    Convert a percentage of supply to a whole token amount

    Args:
        token_supply: Total tokens issued
        percent: Share in percent (0-100)

    Returns:
        Token amount, rounded down
    """
    return int(Decimal(token_supply) * Decimal(percent) / Decimal(100))


def strip_url_scheme(url: str) -> str:
    """Drop a leading http:// or https:// so only the domain is sent"""
    return _SCHEME_RE.sub("", url.strip())


def format_xrp(amount: float) -> str:
    """Format an XRP amount with at most 2 decimals"""
    return f"{Decimal(str(amount)).quantize(Decimal('0.01')).normalize():f}"


_TWITTER_RE = re.compile(r"^(https?://)?(www\.)?(twitter|x)\.com/", re.IGNORECASE)
_TELEGRAM_RE = re.compile(r"^(https?://)?(t|telegram)\.me/", re.IGNORECASE)


def parse_links(text: str) -> dict:
    """
    Sort a free-form list of links into website, twitter and telegram

    Links may be separated by spaces, commas or new lines. A bare @handle is
    taken as the X account. Only the first link of each kind is kept.
    """
    links = {}
    for token in re.split(r"[\s,]+", text.strip()):
        if not token:
            continue
        if _TELEGRAM_RE.match(token):
            links.setdefault("telegram", token)
        elif _TWITTER_RE.match(token) or token.startswith("@"):
            links.setdefault("twitter", token)
        else:
            links.setdefault("website", token)
    return links
