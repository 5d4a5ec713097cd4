"""reactorscan utilities package."""

from .constants import (
    CONFIG_FILE,
    DETACHED_EXECUTION_ID,
    ERROR_LOG_FILE,
    FLOATING_VERSIONS,
    REPORT_FILE,
    WORK_DIR,
)
from .error_handler import handle_exceptions
from .exit_codes import ExitCodes
from .logging import logger

__all__ = [
    "WORK_DIR",
    "ERROR_LOG_FILE",
    "CONFIG_FILE",
    "REPORT_FILE",
    "DETACHED_EXECUTION_ID",
    "FLOATING_VERSIONS",
    "handle_exceptions",
    "ExitCodes",
    "logger",
]
