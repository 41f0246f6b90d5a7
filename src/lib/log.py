"""
Loguru logging for the parse and generate pipeline.

LOG() writes only when a ProgramState is connected and its verbosity is at
least the requested level, so the parser and generator can trace freely
when used as a library or under pytest: nothing is written until the CLI
calls state_connectToLogger().

Levels used across razorhost:
    1  pipeline stages (reading, parsing, generating, output file)
    2  every recoverable parse error, via LOG_parseError()
    3  directive dispatch and descriptor details

Usage:
    from razorhost.lib.log import LOG, state_connectToLogger

    state_connectToLogger(state)
    LOG("Parsing template...", level=1)
"""

from loguru import logger
from typing import Any, Optional
from contextvars import ContextVar
import sys

# ProgramState of the running pipeline, if any
_program_state: ContextVar[Optional[Any]] = ContextVar('program_state', default=None)

logger_format = (
    "<green>{time:HH:mm:ss}</green> │ "
    "<level>{level: <7}</level> │ "
    "<cyan>{function: <24}</cyan> @ "
    "<cyan>{line: <4}</cyan> ║ "
    "<level>{message}</level>"
)

logger.remove()
logger.add(sys.stderr, format=logger_format, level="DEBUG")


def state_connectToLogger(state: Any) -> None:
    """Make ``state.verbosity`` govern every later LOG() call in this context"""
    _program_state.set(state)


def verbosity_allows(level: int) -> bool:
    state = _program_state.get()
    return bool(state) and hasattr(state, 'verbosity') and state.verbosity >= level


def LOG(message: str, level: int = 1, **kwargs: Any) -> None:
    """
    Log a debug message if the connected state's verbosity allows.

    Args:
        message: Log message to display
        level: Minimum verbosity level required (1=normal, 2=verbose, 3=debug)
        **kwargs: Additional loguru metadata

    Example:
        LOG("Parsed 12 blocks", level=2)
        LOG("Dispatching directive '@model' at (0:0,1)", level=3)
    """
    if verbosity_allows(level):
        logger.opt(depth=1).debug(message, **kwargs)


def LOG_parseError(error: Any, level: int = 2) -> None:
    """
    Log a recoverable parse error as a warning.

    Args:
        error: RazorError; rendered as "Line N, column M: message"
        level: Minimum verbosity level required
    """
    if verbosity_allows(level):
        logger.opt(depth=1).warning(str(error))
