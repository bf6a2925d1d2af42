"""
Argument and command parsing utilities.

Cross-cutting utilities for parsing user input and command arguments.
"""

from typing import List, Optional


def parse_command(user_input: str) -> tuple[str, List[str]]:
    """
    Parse user input into command and arguments.

    Args:
        user_input: Raw user input string

    Returns:
        Tuple of (command, args) where command is lowercase and args is a list
    """
    parts = user_input.strip().split()
    if not parts:
        return "", []

    command = parts[0].lower()
    args = parts[1:] if len(parts) > 1 else []
    return command, args


def parse_percent(value: str) -> Optional[float]:
    """
    Parse a 0-100 percentage into a 0.0-1.0 fraction.

    Accepts an optional trailing '%'. Out-of-range values are rejected.

    Example:
        '30' -> 0.3, '75%' -> 0.75, '150' -> None, 'loud' -> None
    """
    try:
        number = float(value.strip().rstrip("%"))
    except ValueError:
        return None

    if not 0 <= number <= 100:
        return None
    return number / 100


__all__ = ['parse_command', 'parse_percent']
