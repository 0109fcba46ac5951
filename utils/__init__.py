"""Utils module exports"""

from .converters import percent_of_supply, strip_url_scheme, format_xrp, parse_links

__all__ = ['percent_of_supply', 'strip_url_scheme', 'format_xrp', 'parse_links']
