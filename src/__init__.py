"""
razorhost - Razor template parser with MVC directives

Parses Razor templates, recognising @model, @inject, @route and the
@http* route directives, and generates view class source.
"""

__version__ = "1.0.0"

from .lib import (
    CodeParser,
    ParseResult,
    DirectiveParser,
    DirectiveRegistry,
    ClassGenerator,
    LOG,
    state_connectToLogger,
)

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
