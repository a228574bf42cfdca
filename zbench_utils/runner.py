# SPDX-License-Identifier: Apache-2.0
"""Shared entry-point wrapper: fatal errors become a logged message and exit code 1."""

from typing import Callable

from .codec import CodecError
from .fsutils import NoFilesError
from .logging import StructuredLogger
from .metrics import MetricsPushError
from .samples import InsufficientSamplesError
from .transform import MissingSuffixError
from .validation import ValidationError

EXIT_OK = 0
EXIT_FAILURE = 1

FATAL_ERRORS = (
    ValidationError,
    NoFilesError,
    InsufficientSamplesError,
    MissingSuffixError,
    CodecError,
    MetricsPushError,
    OSError,
)


def run_tool(logger: StructuredLogger, body: Callable[[], None]) -> int:
    """
    Run a tool body and translate failures into an exit code.

    There is no retry: the first fatal error ends the run. Files the body
    already wrote stay on disk.
    """
    try:
        body()
    except FATAL_ERRORS as e:
        logger.error(f"{logger.name}_failed", error=str(e), error_type=type(e).__name__)
        return EXIT_FAILURE
    except KeyboardInterrupt:
        logger.info("keyboard_interrupt")
        return EXIT_FAILURE
    return EXIT_OK
