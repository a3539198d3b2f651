"""
pagedown logging

LOG(message, level) writes through loguru only when the verbosity bound to
the current context reaches `level`. The CLI binds its ProgramState with
state_connectToLogger; library callers that bind nothing get no output, and
each thread or task keeps its own binding because it lives in a ContextVar.

Levels used across pagedown:
    1  CLI stages: inputs read, PDF written, final report
    2  Decisions made while laying out: template resolved for a content
       type, table page breaks with repeated headers, unsupported nodes
       skipped, page counts of composed documents
    3  Counts from the front end: parsed block nodes, extracted key points,
       action items and topics

Setting PAGEDOWN_DEBUG_MODE=true raises every context to level 3, whether
or not a state has been bound.

Usage:
    from pagedown.lib.log import LOG, state_connectToLogger

    state_connectToLogger(state)
    LOG("Composed 3 page(s) with template 'meeting'", level=2)
"""

from loguru import logger
from typing import Any, Optional
from contextvars import ContextVar
import sys

from ..config import appsettings

_program_state: ContextVar[Optional[Any]] = ContextVar('program_state', default=None)

logger_format = (
    "<green>{time:HH:mm:ss}</green> │ "
    "<level>{level: <5}</level> │ "
    "<cyan>{function: <20}</cyan> @ "
    "<cyan>{line: <4}</cyan> ║ "
    "<level>{message}</level>"
)

logger.remove()
logger.add(sys.stderr, format=logger_format, level="DEBUG")

DEBUG_LEVEL = 3


def state_connectToLogger(state: Any) -> None:
    """Bind `state` (anything with a `verbosity` attribute) to the current context"""
    _program_state.set(state)


def verbosity_get() -> int:
    """Verbosity in effect for the current context"""
    state = _program_state.get()
    verbosity = getattr(state, 'verbosity', 0) if state is not None else 0
    if appsettings.debug_mode:
        verbosity = max(verbosity, DEBUG_LEVEL)
    return verbosity


def LOG(message: str, level: int = 1, **kwargs: Any) -> None:
    """
    Log `message` when the context's verbosity is at least `level`.

    The record is attributed to the caller's function and line.
    """
    if verbosity_get() >= level:
        logger.opt(depth=1).debug(message, **kwargs)
