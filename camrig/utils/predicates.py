"""Comparison helpers for optionally-set shared objects."""

from typing import Any, Optional


def check_shared_equal(lhs: Optional[Any], rhs: Optional[Any]) -> bool:
    """
    Compare two optional handles by value.

    Two handles are shared-equal when both are unset, or both are set and
    their referents compare equal. This differs from plain ``==`` (which
    would compare ``None`` against an object) and from identity (``is``),
    which the rig binding uses instead.

    Args:
        lhs: First handle, may be None.
        rhs: Second handle, may be None.

    Returns:
        True if both are None or both are set and ``lhs == rhs``.

    Example:
        >>> check_shared_equal(None, None)
        True
        >>> check_shared_equal(None, 1)
        False
    """
    if lhs is None and rhs is None:
        return True
    if lhs is None or rhs is None:
        return False
    if lhs is rhs:
        return True
    return bool(lhs == rhs)
