"""Utility modules."""

from .checks import ContractViolationError, IndexOutOfRangeError, check, check_index, check_not_none
from .config_loader import ConfigLoader, load_config
from .ids import CameraId, FrameId, HashId, NCameraId, NFramesId
from .logger import LoggerMixin, get_logger, setup_logger
from .predicates import check_shared_equal

__all__ = [
    "ContractViolationError",
    "IndexOutOfRangeError",
    "check",
    "check_index",
    "check_not_none",
    "ConfigLoader",
    "load_config",
    "CameraId",
    "FrameId",
    "HashId",
    "NCameraId",
    "NFramesId",
    "LoggerMixin",
    "get_logger",
    "setup_logger",
    "check_shared_equal",
]
