"""
Class generator for parsed Razor templates

Transforms a ParseResult into C# view class source by interpreting the
descriptors the directive layer attached to spans.
"""

import json
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from ..models.generators import (
    InjectParameterGenerator,
    ModelCodeGenerator,
    RouteCodeGenerator,
    SetBaseTypeCodeGenerator,
)
from ..models.syntax import Block, BlockType, SpanKind
from .log import LOG
from .parser import ParseResult


INDENT = "    "


def csharp_stringLiteral(text: str) -> str:
    """Quote text as a C# regular string literal"""
    return json.dumps(text)


def routePattern_unquote(pattern: str) -> str:
    """
    Strip one pair of surrounding double quotes from a route pattern

    Example:
        >>> routePattern_unquote('"/foo/{bar}"')
        '/foo/{bar}'
    """
    if len(pattern) >= 2 and pattern[0] == '"' and pattern[-1] == '"':
        return pattern[1:-1]
    return pattern


class ClassGenerator:
    """
    Generates a view class from a parsed template

    Responsibilities:
    - Resolve the base class from @model / @inherits descriptors
    - Emit one activated property per @inject
    - Emit one route attribute per @route / @http* directive
    - Emit markup as WriteLiteral() and expressions as Write() calls
    - Optionally write the source file
    """

    def __init__(
        self,
        result: ParseResult,
        output_dir: Optional[str] = None,
        class_name: Optional[str] = None,
        namespace: Optional[str] = None,
        default_base_type: Optional[str] = None,
    ) -> None:
        """
        Initialize generator

        Args:
            result: Parse result to generate from
            output_dir: Directory for the generated file; nothing is written if None
            class_name: Generated class name (default from settings)
            namespace: Generated namespace (default from settings)
            default_base_type: Base class when no @model/@inherits is present
        """
        from ..config import appsettings

        self.result = result
        self.output_dir = Path(output_dir) if output_dir is not None else None
        self.class_name = class_name or appsettings.class_name
        self.namespace = namespace or appsettings.root_namespace
        self.default_base_type = default_base_type or appsettings.base_type

        self.base_type = self.default_base_type
        self.injections: List[InjectParameterGenerator] = []
        self.routes: List[RouteCodeGenerator] = []

        self.handlers: Dict[type, Callable[[Any], None]] = {
            SetBaseTypeCodeGenerator: self.baseType_collect,
            ModelCodeGenerator: self.baseType_collect,
            InjectParameterGenerator: self.injection_collect,
            RouteCodeGenerator: self.route_collect,
        }

    def generate(self) -> Dict[str, Any]:
        """
        Generate class source

        Returns:
            dict with status, source, base_type, injections, routes and
            output_file (None when no output_dir was given)
        """
        LOG("Collecting descriptors...", level=2)
        for descriptor in self.result.generators():
            handler = self.handlers.get(type(descriptor))
            if handler is not None:
                handler(descriptor)

        body = self.body_generate(self.result.blocks)
        source = self.class_build(body)

        output_file = None
        if self.output_dir is not None:
            from ..config import appsettings

            self.output_dir.mkdir(parents=True, exist_ok=True)
            output_file = self.output_dir / appsettings.outputFile_name(self.class_name)
            output_file.write_text(source, encoding='utf-8')
            LOG(f"Wrote {output_file}", level=2)

        return {
            'status': True,
            'output_file': str(output_file) if output_file is not None else None,
            'source': source,
            'base_type': self.base_type,
            'injections': [(i.type_name, i.property_name) for i in self.injections],
            'routes': [(r.pattern, r.verb) for r in self.routes],
            'error_count': len(self.result.errors),
        }

    def baseType_collect(self, descriptor: Any) -> None:
        # Last one wins; conflicts were already reported by the parser
        self.base_type = descriptor.resolved_base_type

    def injection_collect(self, descriptor: InjectParameterGenerator) -> None:
        if descriptor.type_name and descriptor.property_name:
            self.injections.append(descriptor)
        else:
            LOG(f"Skipping incomplete injection {descriptor}", level=2)

    def route_collect(self, descriptor: RouteCodeGenerator) -> None:
        self.routes.append(descriptor)

    def routeAttribute_generate(self, route: RouteCodeGenerator) -> str:
        """
        Render a route descriptor as an attribute

        Example:
            RouteCodeGenerator('"/foo"', "get") → [HttpGet("/foo")]
        """
        name = "Route" if route.verb is None else f"Http{route.verb.capitalize()}"
        return f"[{name}({csharp_stringLiteral(routePattern_unquote(route.pattern))})]"

    def body_generate(self, blocks: List[Block]) -> List[str]:
        """Statements of the render method, one per markup or expression span"""
        lines = []
        for block in blocks:
            if block.type == BlockType.DIRECTIVE:
                continue
            for span in block.children:
                if span.kind == SpanKind.MARKUP:
                    lines.append(f"WriteLiteral({csharp_stringLiteral(span.content.replace('@@', '@'))});")
                elif span.kind == SpanKind.CODE and block.type == BlockType.EXPRESSION:
                    lines.append(f"Write({span.content});")
        return lines

    def class_build(self, body: List[str]) -> str:
        out = [f"namespace {self.namespace}", "{"]
        for route in self.routes:
            out.append(INDENT + self.routeAttribute_generate(route))
        out.append(f"{INDENT}public class {self.class_name} : {self.base_type}")
        out.append(INDENT + "{")

        for injection in self.injections:
            out.append(INDENT * 2 + "[Activate]")
            out.append(
                f"{INDENT * 2}public {injection.type_name} {injection.property_name} {{ get; private set; }}"
            )
            out.append("")

        out.append(INDENT * 2 + "public override async Task ExecuteAsync()")
        out.append(INDENT * 2 + "{")
        for line in body:
            out.append(INDENT * 3 + line)
        out.append(INDENT * 2 + "}")

        out.append(INDENT + "}")
        out.append("}")
        return "\n".join(out) + "\n"
