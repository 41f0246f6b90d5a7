"""
Code-generation descriptors

Opaque payloads attached to emitted spans. The directive layer only builds
them; lib.generator.ClassGenerator is the one consumer that interprets them.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class SetBaseTypeCodeGenerator:
    """
    Base class override produced by ``@inherits``

    Attributes:
        base_type: Type name exactly as written (trimmed)
    """
    base_type: str

    @property
    def resolved_base_type(self) -> str:
        return self.base_type


@dataclass(frozen=True)
class ModelCodeGenerator:
    """
    Strongly-typed model produced by ``@model``

    The generated class derives from the configured base type closed over
    the model type.

    Example:
        >>> ModelCodeGenerator("RazorPage", "MyApp.Person").resolved_base_type
        'RazorPage<MyApp.Person>'
    """
    base_type: str
    model_type: str

    @property
    def resolved_base_type(self) -> str:
        return f"{self.base_type}<{self.model_type}>"


@dataclass(frozen=True)
class InjectParameterGenerator:
    """
    Activated property produced by ``@inject <type> <property>``

    Either field may be empty when the directive was malformed; the error
    has already been reported by then.
    """
    type_name: str
    property_name: str


@dataclass(frozen=True)
class RouteCodeGenerator:
    """
    Route template produced by ``@route`` and the ``@http*`` aliases

    Attributes:
        pattern: Trimmed rest-of-line text, quotes included if written
        verb: Lowercase HTTP verb, or None for a bare ``@route``
    """
    pattern: str
    verb: Optional[str] = None
