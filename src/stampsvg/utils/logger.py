"""Global logging and error handling utilities"""
import logging
import sys
import traceback
from typing import Optional, Union

# Detect debug mode - True if running from source, False if packaged
DEBUG_MODE = not getattr(sys, 'frozen', False)

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

_logger = logging.getLogger('stampsvg')


def setup_logging(level: Union[int, str] = logging.WARNING, stream=None) -> None:
    """Configure root logging for command line use.

    Args:
        level: logging level or its name ("DEBUG", "INFO", ...)
        stream: output stream, stdout when omitted
    """
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown log level: {level}")
        level = resolved
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(stream if stream is not None else sys.stdout)],
        force=True,
    )


def loggerRaise(e: Exception, user_message: Optional[str] = None):
    """Handle an unexpected exception at an application boundary

    Args:
        e: The exception to handle
        user_message: User-friendly message to log (optional)

    In DEBUG_MODE the exception is raised as is, traceback and all.
    Packaged builds log the message with the full traceback first.
    Either way the exception propagates.
    """
    if DEBUG_MODE:
        raise e

    tb = ''.join(traceback.format_exception(type(e), e, e.__traceback__))
    message = user_message if user_message else str(e)
    _logger.error(f"{message}\n{tb}")
    raise e
