"""
razorhost - Razor template parser with MVC directives

Parses Razor templates, recognising @model, @inject, @route and the
@http* route directives, and generates view class source.
"""

__version__ = "1.0.0"

from .parser import CodeParser, ParseResult
from .directives import DirectiveParser, DirectiveRegistry
from .generator import ClassGenerator
from .log import LOG, state_connectToLogger

__all__ = [
    "CodeParser",
    "ParseResult",
    "DirectiveParser",
    "DirectiveRegistry",
    "ClassGenerator",
    "LOG",
    "state_connectToLogger",
    "__version__",
]
