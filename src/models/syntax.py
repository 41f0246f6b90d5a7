"""
Syntax tree data models

Type-safe structures shared by the lexer, the host parser and the directive
layer: classified symbols, source locations, spans and blocks.
"""

from enum import Enum
from dataclasses import dataclass, field
from typing import Any, List, Optional


class SymbolKind(Enum):
    """
    Classification of a host-language symbol

    Produced by lib.lexer.symbols_tokenize() from the Pygments token stream.
    """
    TEXT = "text"                  # markup between code transitions
    IDENTIFIER = "identifier"
    KEYWORD = "keyword"
    WHITESPACE = "whitespace"      # horizontal whitespace only
    NEWLINE = "newline"            # \n, \r\n or \r
    COMMENT = "comment"            # // and /* */
    STRING_LITERAL = "string"
    CHARACTER_LITERAL = "character"
    NUMBER_LITERAL = "number"
    TRANSITION = "transition"      # @
    DOT = "dot"
    DOUBLE_COLON = "double_colon"
    COMMA = "comma"
    QUESTION_MARK = "question_mark"
    LESS_THAN = "less_than"
    GREATER_THAN = "greater_than"
    LEFT_BRACKET = "left_bracket"
    RIGHT_BRACKET = "right_bracket"
    LEFT_BRACE = "left_brace"
    RIGHT_BRACE = "right_brace"
    LEFT_PAREN = "left_paren"
    RIGHT_PAREN = "right_paren"
    OPERATOR = "operator"
    UNKNOWN = "unknown"


class SpanKind(Enum):
    """Classification of an emitted span"""
    TRANSITION = "transition"
    META_CODE = "metacode"
    CODE = "code"
    MARKUP = "markup"


class BlockType(Enum):
    """Classification of a block of spans"""
    MARKUP = "markup"
    EXPRESSION = "expression"
    DIRECTIVE = "directive"


class AcceptedCharacters(Enum):
    """
    Edit policy attached to a span

    Tells incremental re-parsers which edits a span may absorb without a
    full re-parse. NONE means any edit forces a re-parse.
    """
    NONE = "none"
    ANY = "any"


@dataclass(frozen=True)
class SourceLocation:
    """
    Position in the source document (all indices zero-based)

    Attributes:
        absolute_index: Character offset from the start of the document
        line_index: Line number
        character_index: Column within the line

    Example:
        >>> SourceLocation(0, 0, 0).advance("ab\\ncd")
        SourceLocation(absolute_index=5, line_index=1, character_index=2)
    """
    absolute_index: int = 0
    line_index: int = 0
    character_index: int = 0

    def advance(self, text: str) -> "SourceLocation":
        """Return the location immediately after ``text`` starting here"""
        line = self.line_index
        column = self.character_index
        pos = 0
        while pos < len(text):
            ch = text[pos]
            if ch == "\r" and pos + 1 < len(text) and text[pos + 1] == "\n":
                pos += 1
                ch = "\n"
            if ch in ("\n", "\r"):
                line += 1
                column = 0
            else:
                column += 1
            pos += 1
        return SourceLocation(self.absolute_index + len(text), line, column)

    def __str__(self) -> str:
        return f"({self.absolute_index}:{self.line_index},{self.character_index})"


@dataclass(frozen=True)
class Symbol:
    """
    A single classified token from the host-language tokenizer

    Attributes:
        kind: Token classification
        content: Exact source text of the token
        start: Location of the first character
    """
    kind: SymbolKind
    content: str
    start: SourceLocation

    @property
    def end(self) -> SourceLocation:
        return self.start.advance(self.content)


@dataclass(frozen=True)
class Span:
    """
    An emitted, immutable run of symbols

    Attributes:
        kind: MetaCode, Code, Markup or Transition
        symbols: Symbols in source order
        code_generator: Descriptor for the downstream code emitter (or None)
        accepted_characters: Edit policy for incremental re-parsing

    Example:
        For "@model Foo" the model handler emits two spans:
        Span(kind=META_CODE, content="model ")
        Span(kind=CODE, content="Foo", code_generator=ModelCodeGenerator(...))
    """
    kind: SpanKind
    symbols: tuple
    code_generator: Optional[Any] = None
    accepted_characters: AcceptedCharacters = AcceptedCharacters.ANY

    @property
    def content(self) -> str:
        return "".join(symbol.content for symbol in self.symbols)

    @property
    def start(self) -> Optional[SourceLocation]:
        """Location of the first symbol, None for a descriptor-only span"""
        return self.symbols[0].start if self.symbols else None


@dataclass
class Block:
    """
    Ordered group of spans produced for one markup run, expression or directive

    Attributes:
        type: Block classification (a directive handler switches EXPRESSION
              blocks to DIRECTIVE)
        children: Emitted spans, append-only
        complete: Set when a directive handler finalizes the block
    """
    type: BlockType
    children: List[Span] = field(default_factory=list)
    complete: bool = False

    @property
    def content(self) -> str:
        return "".join(span.content for span in self.children)

    def generators(self) -> List[Any]:
        """Descriptors attached to this block's spans, in emission order"""
        return [span.code_generator for span in self.children if span.code_generator is not None]
