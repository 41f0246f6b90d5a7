"""
Models package for razorhost

Contains data structures and type definitions for the parse pipeline.
"""

from .state import ProgramState, DirectiveState, pipeline
from .directives import DirectiveRegistration
from .errors import RazorError, DirectiveAssertError
from .generators import (
    SetBaseTypeCodeGenerator,
    ModelCodeGenerator,
    InjectParameterGenerator,
    RouteCodeGenerator,
)
from .syntax import (
    SymbolKind,
    SourceLocation,
    Symbol,
    Span,
    SpanKind,
    Block,
    BlockType,
    AcceptedCharacters,
)

__all__ = [
    "ProgramState",
    "DirectiveState",
    "pipeline",
    "DirectiveRegistration",
    "RazorError",
    "DirectiveAssertError",
    "SetBaseTypeCodeGenerator",
    "ModelCodeGenerator",
    "InjectParameterGenerator",
    "RouteCodeGenerator",
    "SymbolKind",
    "SourceLocation",
    "Symbol",
    "Span",
    "SpanKind",
    "Block",
    "BlockType",
    "AcceptedCharacters",
]
