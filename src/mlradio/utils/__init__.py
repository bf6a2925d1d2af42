"""
Cross-cutting utilities for mlradio.

Contains:
- parsers: Argument and command parsing
"""

from .parsers import *

__all__ = [
    # From parsers
    'parse_command',
    'parse_percent',
]
