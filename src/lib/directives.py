"""
MVC directives for Razor templates

Extends the host CodeParser with the directives an MVC view needs:

- @model <type>                     strongly-typed view model
- @inject <type> <property>         activated service property
- @route <pattern>                  route template for the view
- @httpget/@httpput/@httppost/@httpdelete/@httppatch <pattern>
                                    route template constrained to one verb

Each handler consumes exactly its own line, emits classified spans and
attaches a descriptor from models.generators to the final span.
"""

from functools import partial
from typing import Callable, Dict, List, Optional

from ..models.directives import DirectiveRegistration
from ..models.errors import (
    cannotHaveModelAndInheritsKeyword,
    injectDirectivePropertyNameRequired,
    keyword_mustBeFollowedByTypeName,
    onlyOneModelStatementIsAllowed,
)
from ..models.generators import (
    InjectParameterGenerator,
    ModelCodeGenerator,
    RouteCodeGenerator,
)
from ..models.state import DirectiveState
from ..models.syntax import SpanKind, SymbolKind
from .log import LOG
from .parser import INHERITS_KEYWORD, CodeParser


INJECT_KEYWORD = "inject"
MODEL_KEYWORD = "model"

# Route-family keyword -> verb constraint (None: any verb)
ROUTE_VERBS: Dict[str, Optional[str]] = {
    "route": None,
    "httpget": "get",
    "httpput": "put",
    "httppost": "post",
    "httpdelete": "delete",
    "httppatch": "patch",
}


class DirectiveRegistry:
    """
    Keyword -> handler dispatch table

    Owned by a parser instance; filled once at construction.
    """

    def __init__(self) -> None:
        """Initialize an empty registry"""
        self.registrations: Dict[str, DirectiveRegistration] = {}

    def register(self, keyword: str, handler: Callable[[], None]) -> None:
        """
        Register a handler for a keyword

        Raises:
            ValueError: If the keyword is already registered
        """
        if keyword in self.registrations:
            raise ValueError(f"Directive '{keyword}' is already registered")
        self.registrations[keyword] = DirectiveRegistration(keyword=keyword, handler=handler)

    def get(self, keyword: str) -> Optional[Callable[[], None]]:
        """
        Get directive handler by keyword

        Args:
            keyword: Exact keyword following the transition

        Returns:
            Handler or None if the keyword is not a directive
        """
        registration = self.registrations.get(keyword)
        return registration.handler if registration is not None else None

    def keywords(self) -> List[str]:
        return sorted(self.registrations)

    def __contains__(self, keyword: str) -> bool:
        return keyword in self.registrations

    def __len__(self) -> int:
        return len(self.registrations)


class DirectiveParser(CodeParser):
    """
    Razor code parser with MVC directives

    Tracks the per-document model/inherits state in a DirectiveState and
    reports, without aborting:
    - a second @model in the same document
    - @model combined with @inherits
    - @inject without a type name or property name

    Example:
        >>> result = DirectiveParser("RazorPage").parse("@model Person\\n")
        >>> result.generators()
        [ModelCodeGenerator(base_type='RazorPage', model_type='Person')]
    """

    def __init__(self, base_type: Optional[str] = None, design_time: Optional[bool] = None):
        """
        Initialize parser and register the MVC directives

        Args:
            base_type: Default base class of the generated view; defaults to
                       the configured base_type
            design_time: See CodeParser
        """
        super().__init__(design_time=design_time)

        if base_type is None:
            from ..config import appsettings
            base_type = appsettings.base_type
        self.base_type = base_type
        self.state = DirectiveState(base_type=base_type)

        self.directives_map(self.modelDirective, MODEL_KEYWORD)
        self.directives_map(self.injectDirective, INJECT_KEYWORD)
        for keyword, verb in ROUTE_VERBS.items():
            self.directives_map(partial(self.routeFamilyDirective, keyword, verb), keyword)

    def document_begin(self) -> None:
        self.state = DirectiveState(base_type=self.base_type)

    def inheritsDirective(self) -> None:
        self.directive_assert(INHERITS_KEYWORD)
        self.symbol_acceptAndMoveNext()
        self.state.inherits_end_location = self.current_location

        self.inheritsDirectiveCore()
        self.inheritsAndModel_check()

    def inheritsAndModel_check(self) -> None:
        """Report @model and @inherits in one document at the inherits position"""
        if self.state.conflict_exists():
            self.context.on_error(
                self.state.inherits_end_location,
                cannotHaveModelAndInheritsKeyword(MODEL_KEYWORD),
            )

    def modelDirective(self) -> None:
        self.directive_assert(MODEL_KEYWORD)
        self.symbol_acceptAndMoveNext()

        end_model_location = self.current_location

        self.baseTypeDirective(
            keyword_mustBeFollowedByTypeName(MODEL_KEYWORD),
            self.modelCodeGenerator_create,
        )

        if self.state.model_statement_seen:
            self.context.on_error(end_model_location, onlyOneModelStatementIsAllowed(MODEL_KEYWORD))

        self.state.model_statement_seen = True

        self.inheritsAndModel_check()

    def modelCodeGenerator_create(self, model_type: str) -> ModelCodeGenerator:
        return ModelCodeGenerator(base_type=self.state.base_type, model_type=model_type)

    def routeFamilyDirective(self, keyword: str, verb: Optional[str]) -> None:
        self.directive_assert(keyword)
        self.routeDirectiveHandler(verb)

    def routeDirectiveHandler(self, verb: Optional[str]) -> None:
        """
        Parse '@route "/foo/{bar}"' or '@httpget /foo/{bar}'

        The pattern is the trimmed rest of the line. An empty pattern is
        accepted without error.

        Args:
            verb: Lowercase HTTP verb, None for @route
        """
        self.symbol_acceptAndMoveNext()
        self.block_markDirective()

        self.directiveWhitespace_output()

        if not (self.end_of_file or self.at(SymbolKind.NEWLINE)):
            self.symbol_acceptAndMoveNext()
        self.symbols_acceptUntil(SymbolKind.NEWLINE)
        if not self.context.design_time:
            # Newline is code, except at design time where line boundaries must stay put
            self.symbol_optional(SymbolKind.NEWLINE)

        route = self.span.content().strip()
        LOG(f"Route '{route}' (verb={verb})", level=3)

        self.span.code_generator = RouteCodeGenerator(pattern=route, verb=verb)

        self.block_complete()
        self.span_output(SpanKind.META_CODE)

    def injectDirective(self) -> None:
        """Parse '@inject MyApp.MyService MyServicePropertyName'"""
        self.directive_assert(INJECT_KEYWORD)
        self.symbol_acceptAndMoveNext()
        self.block_markDirective()

        self.directiveWhitespace_output()

        has_type_error = not self.at(SymbolKind.IDENTIFIER)
        if has_type_error:
            self.context.on_error(self.current_location, keyword_mustBeFollowedByTypeName(INJECT_KEYWORD))

        type_name = self.namespaceOrTypeName()
        type_end = len(self.span.symbols)

        property_start_location = self.current_location
        self.symbols_acceptWhile(self.spacing_is(include_newlines=False, include_comments=True))

        if not has_type_error and (self.end_of_file or self.at(SymbolKind.NEWLINE)):
            # Only worth reporting once the type name was read
            self.context.on_error(property_start_location, injectDirectivePropertyNameRequired(INJECT_KEYWORD))

        self.symbols_acceptUntil(SymbolKind.NEWLINE)
        if not self.context.design_time:
            self.symbol_optional(SymbolKind.NEWLINE)

        property_name = "".join(symbol.content for symbol in self.span.symbols[type_end:])

        self.span.code_generator = InjectParameterGenerator(
            type_name=type_name.strip(),
            property_name=property_name.strip(),
        )

        self.block_complete()
        self.span_output(SpanKind.CODE)
