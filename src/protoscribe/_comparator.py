"""Locale-independent, byte-wise string ordering.

Type names and import paths are sorted with these helpers so that output does
not depend on the host locale. Strings are encoded to ASCII, with characters
outside of it replaced by ``?``, and compared byte by byte. When one string is
a strict prefix of the other, the shorter one sorts first.
"""

from collections.abc import Callable, Iterable
from typing import TypeVar

T = TypeVar("T")


def sort_key(value: str) -> bytes:
    """Return the byte key used to order ``value``.

    Args:
        value: String to order.

    Returns:
        ASCII encoding of the string with unencodable characters replaced.
    """
    return value.encode("ascii", errors="replace")


def compare(left: str, right: str) -> int:
    """Compare two strings byte-wise.

    Args:
        left: First string.
        right: Second string.

    Returns:
        -1 if ``left`` sorts first, 1 if ``right`` sorts first, 0 if equal.
    """
    left_key, right_key = sort_key(left), sort_key(right)
    if left_key < right_key:
        return -1
    if left_key > right_key:
        return 1
    return 0


def sorted_by_name(items: Iterable[T], name: Callable[[T], str]) -> list[T]:
    """Stable sort of ``items`` by the byte key of ``name(item)``."""
    return sorted(items, key=lambda item: sort_key(name(item)))
