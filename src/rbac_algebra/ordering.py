"""Partial ordering shared by permissions, roles and resources.

A comparison result is an ``int | None``:

- ``1``: the left operand is greater (permits strictly more)
- ``0``: both operands are equivalent
- ``-1``: the left operand is less
- ``None``: the operands are incomparable

:class:`PartiallyOrdered` derives ``<``, ``<=``, ``>`` and ``>=`` from
``try_compare_to``. Every operator returns ``False`` for incomparable
operands, so ``not (a < b)`` does not imply ``a >= b``.
"""
from __future__ import annotations

Comparison = int | None


def negate(comparison: Comparison) -> Comparison:
    """Flip the direction of a comparison result, keeping ``None``."""
    return None if comparison is None else -comparison


def at_least(comparison: Comparison) -> bool:
    """Return True for an ``Equal`` or ``Greater`` verdict."""
    return comparison is not None and comparison >= 0


def at_most(comparison: Comparison) -> bool:
    """Return True for an ``Equal`` or ``Less`` verdict."""
    return comparison is not None and comparison <= 0


def compare_componentwise(*comparisons: Comparison) -> Comparison:
    """Combine per-dimension verdicts into one verdict.

    Greater only if no dimension regresses and at least one advances;
    Less symmetrically. Any incomparable dimension, or dimensions pulling
    in opposite directions, make the whole pair incomparable.

    Examples
    --------
    >>> compare_componentwise(0, 1)
    1
    >>> compare_componentwise(1, -1) is None
    True
    """
    if any(comparison is None for comparison in comparisons):
        return None
    if all(comparison == 0 for comparison in comparisons):
        return 0
    if all(at_least(comparison) for comparison in comparisons):
        return 1
    if all(at_most(comparison) for comparison in comparisons):
        return -1
    return None


def verdict_over(comparisons: list[Comparison]) -> Comparison:
    """Verdict for one value against every member of a collection.

    ``1`` if the value dominates every member, ``-1`` if every member
    dominates it, otherwise ``None``. An empty collection yields ``None``.
    """
    if not comparisons:
        return None
    if all(at_least(comparison) for comparison in comparisons):
        return 1
    if all(at_most(comparison) for comparison in comparisons):
        return -1
    return None


class PartiallyOrdered:
    """Mixin deriving rich comparisons from :meth:`try_compare_to`."""

    def try_compare_to(self, other: object) -> Comparison:
        raise NotImplementedError

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, PartiallyOrdered):
            return NotImplemented
        comparison = self.try_compare_to(other)
        return comparison is not None and comparison < 0

    def __le__(self, other: object) -> bool:
        if not isinstance(other, PartiallyOrdered):
            return NotImplemented
        return at_most(self.try_compare_to(other))

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, PartiallyOrdered):
            return NotImplemented
        comparison = self.try_compare_to(other)
        return comparison is not None and comparison > 0

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, PartiallyOrdered):
            return NotImplemented
        return at_least(self.try_compare_to(other))

    def comparable_with(self, other: object) -> bool:
        """Return True if ``try_compare_to`` reaches a verdict."""
        return self.try_compare_to(other) is not None
