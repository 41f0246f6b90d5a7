"""
Host code parser for Razor templates

Walks the symbol stream of a template, splitting it into blocks of
classified spans:

1. Markup: text runs between transitions become MARKUP spans
2. Transitions: '@' starts a code block
3. Directives: '@keyword' dispatches to the handler registered for keyword
4. Implicit expressions: '@name.member' becomes a CODE span

Key features:
- Cursor primitives shared by every directive handler (accept, accept-while,
  accept-until, optional, single-whitespace split)
- Shared grammar routines: type names and base-type directives
- Errors are recorded, never raised; only a handler entered on the wrong
  keyword aborts the parse

Example:
    >>> result = CodeParser().parse("@inherits MyBase\\n<p>Hi</p>")
    >>> result.generators()
    [SetBaseTypeCodeGenerator(base_type='MyBase')]
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, List, Optional

from ..models.errors import (
    DirectiveAssertError,
    RazorError,
    keyword_mustBeFollowedByTypeName,
    transition_unexpectedCharacter,
)
from ..models.generators import SetBaseTypeCodeGenerator
from ..models.syntax import (
    AcceptedCharacters,
    Block,
    BlockType,
    SourceLocation,
    Span,
    SpanKind,
    Symbol,
    SymbolKind,
)
from .lexer import symbols_tokenize
from .log import LOG, LOG_parseError


INHERITS_KEYWORD = "inherits"


@dataclass
class ParseResult:
    """
    Output of one document parse

    Attributes:
        blocks: Completed blocks in source order
        errors: Recoverable errors in the order they were reported

    Concatenating the content of every block reproduces the source.
    """
    blocks: List[Block] = field(default_factory=list)
    errors: List[RazorError] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.errors

    def spans(self) -> List[Span]:
        return [span for block in self.blocks for span in block.children]

    def generators(self) -> List[Any]:
        """Every attached descriptor in emission order"""
        return [gen for block in self.blocks for gen in block.generators()]


class SpanBuilder:
    """
    Accumulator for the span currently being built

    Attributes:
        symbols: Symbols accepted since the last output
        code_generator: Descriptor to attach when the span is output
        accepted_characters: Edit policy of the span
    """

    def __init__(self) -> None:
        self.reset()

    def reset(self) -> None:
        self.symbols: List[Symbol] = []
        self.code_generator: Optional[Any] = None
        self.accepted_characters = AcceptedCharacters.ANY

    def accept(self, symbol: Symbol) -> None:
        self.symbols.append(symbol)

    def content(self) -> str:
        return "".join(symbol.content for symbol in self.symbols)

    def build(self, kind: SpanKind) -> Span:
        return Span(
            kind=kind,
            symbols=tuple(self.symbols),
            code_generator=self.code_generator,
            accepted_characters=self.accepted_characters,
        )


class ParserContext:
    """
    Mutable state of one document parse

    Attributes:
        source: Template text being parsed
        symbols: Located symbols of source
        position: Index of the current symbol
        design_time: Preserve line structure for tooling
        errors: Ordered error sink
        blocks: Completed blocks
        current_block: Block receiving output spans
        span: Span accumulator
        end_location: Location one past the last character
    """

    def __init__(self, source: str, design_time: bool = False, directives: Iterable[str] = ()) -> None:
        self.source = source
        self.symbols: List[Symbol] = symbols_tokenize(source, directives)
        self.position = 0
        self.design_time = design_time
        self.errors: List[RazorError] = []
        self.blocks: List[Block] = []
        self.current_block: Optional[Block] = None
        self.span = SpanBuilder()
        self.end_location = SourceLocation().advance(source)

    def on_error(self, location: SourceLocation, message: str, length: int = 1) -> None:
        """Append a recoverable error to the sink"""
        error = RazorError(message=message, location=location, length=length)
        self.errors.append(error)
        LOG_parseError(error)

    def block_start(self, block_type: BlockType) -> Block:
        self.current_block = Block(type=block_type)
        return self.current_block

    def block_end(self) -> None:
        if self.current_block is not None:
            self.blocks.append(self.current_block)
        self.current_block = None


class CodeParser:
    r"""
    Host parser for Razor template source

    Handles:
    - Markup/code transitions ('@', with '@@' as a literal '@')
    - Directive dispatch through a keyword registry
    - The @inherits directive
    - Implicit expressions (@Model.Name)

    Subclasses add directives by mapping bound methods in their constructor.
    """

    def __init__(self, design_time: Optional[bool] = None, registry=None):
        """
        Initialize the parser and its directive table

        Args:
            design_time: Leave trailing directive newlines unconsumed.
                         Defaults to the configured design_time_mode.
            registry: Optional DirectiveRegistry to populate

        Attributes:
            design_time: Design-time flag
            directives: Keyword -> handler dispatch table
            context: State of the document being parsed (None between parses)
        """
        if design_time is None:
            from ..config import appsettings
            design_time = appsettings.design_time_mode
        self.design_time = design_time
        self.context: Optional[ParserContext] = None

        # Import and create registry if not provided
        if registry is None:
            from .directives import DirectiveRegistry
            registry = DirectiveRegistry()
        self.directives = registry
        self.directives_map(self.inheritsDirective, INHERITS_KEYWORD)

    def directives_map(self, handler: Callable[[], None], *keywords: str) -> None:
        """Register ``handler`` for each of ``keywords``"""
        for keyword in keywords:
            self.directives.register(keyword, handler)

    # ------------------------------------------------------------------
    # Document loop
    # ------------------------------------------------------------------

    def parse(self, source: str) -> ParseResult:
        """
        Parse template source into blocks of spans

        Args:
            source: Raw template text

        Returns:
            ParseResult with blocks and recoverable errors

        Raises:
            DirectiveAssertError: If a handler was dispatched on a keyword it
                                  does not own
        """
        self.context = ParserContext(
            source, design_time=self.design_time, directives=self.directives.keywords()
        )
        self.document_begin()
        LOG(f"Parsing {len(self.context.symbols)} symbols", level=3)

        while not self.end_of_file:
            if self.at(SymbolKind.TRANSITION):
                self.transition_parse()
            else:
                self.markup_parse()

        return ParseResult(blocks=self.context.blocks, errors=self.context.errors)

    def document_begin(self) -> None:
        """Hook for subclasses to reset per-document state"""

    def markup_parse(self) -> None:
        self.context.block_start(BlockType.MARKUP)
        self.symbols_acceptUntil(SymbolKind.TRANSITION)
        self.span_output(SpanKind.MARKUP)
        self.context.block_end()

    def transition_parse(self) -> None:
        """
        Parse one '@' transition and whatever code follows it

        The block starts as an EXPRESSION block; directive handlers switch
        it to DIRECTIVE.
        """
        self.context.block_start(BlockType.EXPRESSION)
        self.symbol_acceptAndMoveNext()
        self.span_output(SpanKind.TRANSITION)

        symbol = self.current
        if symbol is not None and symbol.kind == SymbolKind.IDENTIFIER:
            handler = self.directives.get(symbol.content)
            if handler is not None:
                LOG(f"Dispatching directive '@{symbol.content}' at {symbol.start}", level=3)
                handler()
            else:
                self.implicitExpression_parse()
        else:
            content = ""
            if symbol is not None:
                # Markup after '@' is one TEXT run; report its first character
                content = symbol.content[:1] if symbol.kind == SymbolKind.TEXT else symbol.content
            self.context.on_error(self.current_location, transition_unexpectedCharacter(content))

        self.span_output(SpanKind.CODE)
        self.context.block_end()

    def implicitExpression_parse(self) -> None:
        """Accept identifier(.identifier)* as a single CODE span"""
        self.symbol_acceptAndMoveNext()
        while self.at(SymbolKind.DOT) and self.peek_at(SymbolKind.IDENTIFIER):
            self.symbol_acceptAndMoveNext()
            self.symbol_acceptAndMoveNext()
        self.span_output(SpanKind.CODE)

    # ------------------------------------------------------------------
    # Cursor primitives
    # ------------------------------------------------------------------

    @property
    def current(self) -> Optional[Symbol]:
        if self.context.position < len(self.context.symbols):
            return self.context.symbols[self.context.position]
        return None

    @property
    def current_location(self) -> SourceLocation:
        symbol = self.current
        return symbol.start if symbol is not None else self.context.end_location

    @property
    def end_of_file(self) -> bool:
        return self.current is None

    @property
    def span(self) -> SpanBuilder:
        return self.context.span

    def at(self, kind: SymbolKind) -> bool:
        symbol = self.current
        return symbol is not None and symbol.kind == kind

    def peek_at(self, kind: SymbolKind, offset: int = 1) -> bool:
        index = self.context.position + offset
        return index < len(self.context.symbols) and self.context.symbols[index].kind == kind

    def symbol_accept(self, symbol: Symbol) -> None:
        """Add a symbol that was held back (not taken from the cursor)"""
        self.span.accept(symbol)

    def symbol_acceptAndMoveNext(self) -> bool:
        symbol = self.current
        if symbol is None:
            return False
        self.span.accept(symbol)
        self.context.position += 1
        return True

    def symbols_acceptWhile(self, predicate: Callable[[Symbol], bool]) -> None:
        while self.current is not None and predicate(self.current):
            self.symbol_acceptAndMoveNext()

    def symbols_acceptUntil(self, *kinds: SymbolKind) -> None:
        while self.current is not None and self.current.kind not in kinds:
            self.symbol_acceptAndMoveNext()

    def symbol_optional(self, kind: SymbolKind) -> bool:
        if self.at(kind):
            self.symbol_acceptAndMoveNext()
            return True
        return False

    def symbol_acceptSingleWhitespace(self) -> Optional[Symbol]:
        """
        Accept one whitespace character if the cursor is on whitespace

        A multi-character whitespace symbol is split: its first character is
        accepted and the remainder is returned for the caller to re-accept
        after outputting the current span.

        Returns:
            The held-back remainder, or None
        """
        if not self.at(SymbolKind.WHITESPACE):
            return None
        symbol = self.current
        self.context.position += 1
        if len(symbol.content) == 1:
            self.span.accept(symbol)
            return None

        first = Symbol(SymbolKind.WHITESPACE, symbol.content[0], symbol.start)
        self.span.accept(first)
        return Symbol(SymbolKind.WHITESPACE, symbol.content[1:], first.end)

    @staticmethod
    def spacing_is(include_newlines: bool, include_comments: bool) -> Callable[[Symbol], bool]:
        """Predicate for whitespace, optionally newlines and comments"""
        def predicate(symbol: Symbol) -> bool:
            return (
                symbol.kind == SymbolKind.WHITESPACE
                or (include_newlines and symbol.kind == SymbolKind.NEWLINE)
                or (include_comments and symbol.kind == SymbolKind.COMMENT)
            )
        return predicate

    # ------------------------------------------------------------------
    # Span and block sink
    # ------------------------------------------------------------------

    def span_output(self, kind: SpanKind) -> None:
        """Emit the accumulated span into the current block (empty spans are dropped)"""
        if self.span.symbols or self.span.code_generator is not None:
            self.context.current_block.children.append(self.span.build(kind))
        self.span.reset()

    def block_complete(self) -> None:
        self.context.current_block.complete = True

    def block_markDirective(self) -> None:
        self.context.current_block.type = BlockType.DIRECTIVE

    def directive_assert(self, keyword: str) -> None:
        """
        Verify the cursor is on ``keyword``

        Raises:
            DirectiveAssertError: The handler was dispatched on another symbol
        """
        symbol = self.current
        if symbol is None or symbol.kind != SymbolKind.IDENTIFIER or symbol.content != keyword:
            found = symbol.content if symbol is not None else "end of file"
            raise DirectiveAssertError(
                f"Expected directive keyword '{keyword}' at {self.current_location}, found '{found}'"
            )

    # ------------------------------------------------------------------
    # Shared grammar routines
    # ------------------------------------------------------------------

    def namespaceOrTypeName(self) -> str:
        """
        Accept a possibly qualified, generic, nullable or array type name

        Never consumes past the end of the current line.

        Returns:
            Exact text consumed (empty if the cursor was not on a name)

        Example:
            "Dictionary<string, List<int>>[] rest" → "Dictionary<string, List<int>>[]"
        """
        start = len(self.span.symbols)
        self.typeName_accept()
        return "".join(symbol.content for symbol in self.span.symbols[start:])

    def typeName_accept(self) -> bool:
        if not (self.symbol_optional(SymbolKind.IDENTIFIER) or self.symbol_optional(SymbolKind.KEYWORD)):
            return False

        self.symbol_optional(SymbolKind.QUESTION_MARK)
        if self.symbol_optional(SymbolKind.DOUBLE_COLON):
            if not self.symbol_optional(SymbolKind.IDENTIFIER):
                self.symbol_optional(SymbolKind.KEYWORD)
        if self.at(SymbolKind.LESS_THAN):
            self.brackets_balance(SymbolKind.LESS_THAN, SymbolKind.GREATER_THAN)
            self.symbol_optional(SymbolKind.QUESTION_MARK)
        if self.symbol_optional(SymbolKind.DOT):
            self.typeName_accept()
        while self.at(SymbolKind.LEFT_BRACKET):
            self.brackets_balance(SymbolKind.LEFT_BRACKET, SymbolKind.RIGHT_BRACKET)
        return True

    def brackets_balance(self, opener: SymbolKind, closer: SymbolKind) -> None:
        """Accept from an opener to its matching closer, stopping at end of line"""
        depth = 0
        while self.current is not None and not self.at(SymbolKind.NEWLINE):
            kind = self.current.kind
            self.symbol_acceptAndMoveNext()
            if kind == opener:
                depth += 1
            elif kind == closer:
                depth -= 1
                if depth == 0:
                    return

    def directiveWhitespace_output(self) -> None:
        """
        Emit keyword plus one whitespace character as META_CODE, then
        accept the rest of the leading spacing into the next span

        A keyword span that took whitespace refuses incremental edits, so
        typing after it always re-parses the directive.
        """
        remaining_ws = self.symbol_acceptSingleWhitespace()
        if len(self.span.symbols) > 1:
            self.span.accepted_characters = AcceptedCharacters.NONE
        self.span_output(SpanKind.META_CODE)

        if remaining_ws is not None:
            self.symbol_accept(remaining_ws)
        self.symbols_acceptWhile(self.spacing_is(include_newlines=False, include_comments=True))

    def baseTypeDirective(
        self, no_type_name_error: str, generator_create: Callable[[str], Any]
    ) -> None:
        """
        Grammar shared by '@inherits <type>' and '@model <type>'

        Expects the keyword to have been accepted. Emits the keyword plus one
        whitespace character as META_CODE and the rest of the line as CODE
        carrying the descriptor built by ``generator_create``.

        Args:
            no_type_name_error: Message reported when no type name follows
            generator_create: Factory (trimmed type name) -> descriptor
        """
        self.block_markDirective()
        self.directiveWhitespace_output()

        if self.end_of_file or self.at(SymbolKind.WHITESPACE) or self.at(SymbolKind.NEWLINE):
            self.context.on_error(self.current_location, no_type_name_error)

        self.symbols_acceptUntil(SymbolKind.NEWLINE)
        if not self.context.design_time:
            self.symbol_optional(SymbolKind.NEWLINE)

        base_type = self.span.content()
        self.span.code_generator = generator_create(base_type.strip())

        self.block_complete()
        self.span_output(SpanKind.CODE)

    def inheritsDirective(self) -> None:
        self.directive_assert(INHERITS_KEYWORD)
        self.symbol_acceptAndMoveNext()
        self.inheritsDirectiveCore()

    def inheritsDirectiveCore(self) -> None:
        self.baseTypeDirective(
            keyword_mustBeFollowedByTypeName(INHERITS_KEYWORD),
            SetBaseTypeCodeGenerator,
        )
