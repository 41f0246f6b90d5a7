"""
Directive registration model

Defines the keyword -> handler entries held by the parser's dispatch table.
"""

from dataclasses import dataclass
from typing import Callable


@dataclass(frozen=True)
class DirectiveRegistration:
    """
    One entry of a parser's directive dispatch table

    Attributes:
        keyword: Exact lowercase keyword following the transition (no '@')
        handler: Zero-argument bound parser method that consumes the directive
    """
    keyword: str
    handler: Callable[[], None]
