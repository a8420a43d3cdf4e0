"""
Contract checks.

A contract violation is a caller error (null argument, index out of range,
inconsistent rig binding). It always raises and is never meant to be
caught and "fixed" by library code. Expected per-point outcomes such as a
point projecting outside the image are reported as data instead, see
:mod:`camrig.cameras.projection_result`.
"""

import logging
import numbers
from typing import Any, Optional


class ContractViolationError(ValueError):
    """Raised when a caller breaks an invariant of the API."""


class IndexOutOfRangeError(ContractViolationError, IndexError):
    """Raised when an index lies outside the valid range of a container."""


def check(
    condition: bool,
    message: str,
    logger: Optional[logging.Logger] = None,
) -> None:
    """
    Raise ContractViolationError with ``message`` unless ``condition`` holds.

    Args:
        condition: Invariant that must hold.
        message: Diagnostic naming the invariant and the offending values.
        logger: Optional logger; the violation is logged at ERROR level first.

    Raises:
        ContractViolationError: If ``condition`` is false.
    """
    if not condition:
        if logger is not None:
            logger.error(message)
        raise ContractViolationError(message)


def check_not_none(
    value: Any,
    name: str,
    logger: Optional[logging.Logger] = None,
) -> Any:
    """
    Ensure a required argument is present.

    Returns:
        The value itself, so the check can be used inline.
    """
    check(value is not None, f"{name} must not be None", logger)
    return value


def check_index(
    index: int,
    size: int,
    name: str = "index",
    logger: Optional[logging.Logger] = None,
) -> int:
    """
    Ensure ``0 <= index < size``.

    Raises:
        IndexOutOfRangeError: If the index is out of range.
    """
    valid = isinstance(index, numbers.Integral) and not isinstance(index, bool)
    if not valid or index < 0 or index >= size:
        if size > 0:
            message = f"{name} {index} out of range [0, {size - 1}]"
        else:
            message = f"{name} {index} out of range (container is empty)"
        if logger is not None:
            logger.error(message)
        raise IndexOutOfRangeError(message)
    return int(index)
