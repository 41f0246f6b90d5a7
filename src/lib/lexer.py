"""
Pygments lexer for the C#-like host language of Razor templates

Classifies template source into the symbol kinds the host parser and the
directive layer reason about. The Pygments token stream is converted into
located Symbol objects by symbols_tokenize().

After an '@' the lexer enters one of two code states:
- 'code': the word after '@' is a registered directive keyword; the
  directive owns the rest of its line
- 'expression': anything else; only identifier(.identifier)* is code, then
  the lexer is back in markup

Token types:
- Token.Razor.Transition: the '@' that switches from markup to code
- Token.Razor.Newline: \\n, \\r\\n or \\r
- Token.Razor.Markup: template text outside code (including the @@ escape)
- Text.Whitespace: horizontal whitespace
- Comment.Single / Comment.Multiline: // and /* */ comments
- Keyword: reserved C# words (string, int, class, ...)
- Name: identifiers
"""

from typing import Iterable, List, Optional

from pygments.lexer import ExtendedRegexLexer, default, words
from pygments.token import (
    Token,
    Text,
    Whitespace,
    Comment,
    Keyword,
    Name,
    String,
    Number,
    Operator,
    Punctuation,
)
from pygments.util import get_list_opt

from ..models.syntax import SourceLocation, Symbol, SymbolKind

Transition = Token.Razor.Transition
Newline = Token.Razor.Newline
Markup = Token.Razor.Markup

CSHARP_KEYWORDS = (
    'abstract', 'as', 'base', 'bool', 'break', 'byte', 'case', 'catch',
    'char', 'checked', 'class', 'const', 'continue', 'decimal', 'default',
    'delegate', 'do', 'double', 'else', 'enum', 'event', 'explicit',
    'extern', 'false', 'finally', 'fixed', 'float', 'for', 'foreach', 'goto',
    'if', 'implicit', 'in', 'int', 'interface', 'internal', 'is', 'lock',
    'long', 'namespace', 'new', 'null', 'object', 'operator', 'out',
    'override', 'params', 'private', 'protected', 'public', 'readonly',
    'ref', 'return', 'sbyte', 'sealed', 'short', 'sizeof', 'stackalloc',
    'static', 'string', 'struct', 'switch', 'this', 'throw', 'true', 'try',
    'typeof', 'uint', 'ulong', 'unchecked', 'unsafe', 'ushort', 'using',
    'virtual', 'void', 'volatile', 'while',
)

PUNCTUATION_KINDS = {
    '.': SymbolKind.DOT,
    '::': SymbolKind.DOUBLE_COLON,
    ',': SymbolKind.COMMA,
    '?': SymbolKind.QUESTION_MARK,
    '<': SymbolKind.LESS_THAN,
    '>': SymbolKind.GREATER_THAN,
    '[': SymbolKind.LEFT_BRACKET,
    ']': SymbolKind.RIGHT_BRACKET,
    '{': SymbolKind.LEFT_BRACE,
    '}': SymbolKind.RIGHT_BRACE,
    '(': SymbolKind.LEFT_PAREN,
    ')': SymbolKind.RIGHT_PAREN,
}


def transition_callback(lexer, match, ctx):
    """Emit the '@' and push 'code' for directives, 'expression' otherwise"""
    yield match.start(), Transition, match.group(0)
    if match.group(1) in lexer.directive_keywords:
        ctx.stack.append('code')
    else:
        ctx.stack.append('expression')
    ctx.pos = match.end()


class CSharpSymbolLexer(ExtendedRegexLexer):
    """
    Lexer for the host language embedded in Razor templates

    Only as much of C# as the directive layer needs: every character of
    input is covered by exactly one token, so the token stream is lossless.

    Options:
        directives: Keywords whose '@' line is lexed as code to end of line

    Example:
        @inject MyApp.IService Svc      (with directives=['inject'])

    Tokens:
        @ → Token.Razor.Transition
        inject → Name
        ' ' → Text.Whitespace
        MyApp → Name
        . → Punctuation
        ...
    """

    name = 'Razor C# host'
    aliases = ['razorhost']
    filenames = ['*.cshtml']

    def __init__(self, **options):
        super().__init__(**options)
        self.directive_keywords = frozenset(get_list_opt(options, 'directives', []))

    tokens = {
        'root': [
            # Markup: only newlines and transitions are significant
            (r'\r\n|\n|\r', Newline),
            (r'@@', Markup),
            (r'@(?=([^\W\d]\w*)?)', transition_callback),
            (r'[^@\r\n]+', Markup),
        ],

        'expression': [
            # identifier(.identifier)*, then straight back to markup
            (r'\.(?=[^\W\d])', Punctuation),
            (words(CSHARP_KEYWORDS, suffix=r'\b'), Keyword, '#pop'),
            (r'[^\W\d]\w*(?=\.[^\W\d])', Name),
            (r'[^\W\d]\w*', Name, '#pop'),
            default('#pop'),
        ],

        'code': [
            # Directive code runs to the end of the line it started on
            (r'\r\n|\n|\r', Newline, '#pop'),
            (r'[^\S\r\n]+', Whitespace),

            # Comments before the '/' operator
            (r'//[^\r\n]*', Comment.Single),
            (r'/\*[\s\S]*?\*/', Comment.Multiline),

            # Literals (unterminated strings stop at end of line)
            (r'"(?:\\.|[^"\\\r\n])*"?', String),
            (r"'(?:\\.|[^'\\\r\n])*'?", String.Char),
            (r'\d+(?:\.\d+)?(?:[eE][+-]?\d+)?[fFdDmMuUlL]*', Number),

            (r'@', Transition),

            (words(CSHARP_KEYWORDS, suffix=r'\b'), Keyword),
            (r'[^\W\d]\w*', Name),

            # Multi-character operators; '>>' is left as two '>' for generics
            (r'\?\?|=>|==|!=|<=|>=|&&|\|\||\+\+|--|<<|[-+*/%&|^]=', Operator),
            (r'::', Punctuation),
            (r'[.,?<>\[\]{}()]', Punctuation),
            (r'[-+*/%&|^!=~;:]', Operator),

            (r'.', Text),
        ],
    }


def get_lexer(directives: Optional[Iterable[str]] = None) -> CSharpSymbolLexer:
    """
    Get a CSharpSymbolLexer instance

    Args:
        directives: Directive keywords that own the rest of their line

    Returns:
        Lexer configured to leave leading/trailing newlines untouched
    """
    return CSharpSymbolLexer(stripnl=False, ensurenl=False, directives=list(directives or ()))


def symbolKind_classify(ttype, value: str) -> SymbolKind:
    """
    Map a Pygments token type (and its text) onto a SymbolKind

    Args:
        ttype: Pygments token type
        value: Token text

    Returns:
        SymbolKind for the token
    """
    if ttype in Markup:
        return SymbolKind.TEXT
    if ttype in Newline:
        return SymbolKind.NEWLINE
    if ttype in Whitespace:
        return SymbolKind.WHITESPACE
    if ttype in Comment:
        return SymbolKind.COMMENT
    if ttype in String.Char:
        return SymbolKind.CHARACTER_LITERAL
    if ttype in String:
        return SymbolKind.STRING_LITERAL
    if ttype in Number:
        return SymbolKind.NUMBER_LITERAL
    if ttype in Transition:
        return SymbolKind.TRANSITION
    if ttype in Keyword:
        return SymbolKind.KEYWORD
    if ttype in Name:
        return SymbolKind.IDENTIFIER
    if ttype in Punctuation:
        return PUNCTUATION_KINDS.get(value, SymbolKind.OPERATOR)
    if ttype in Operator:
        return SymbolKind.OPERATOR
    return SymbolKind.UNKNOWN


def symbols_tokenize(text: str, directives: Optional[Iterable[str]] = None) -> List[Symbol]:
    """
    Tokenize template source into located symbols

    Concatenating the content of the returned symbols reproduces ``text``.

    Args:
        text: Full template source
        directives: Directive keywords whose lines are lexed as code

    Returns:
        Symbols in source order (no end-of-file marker)

    Example:
        >>> [s.kind.value for s in symbols_tokenize("@model Foo", ["model"])]
        ['transition', 'identifier', 'whitespace', 'identifier']
    """
    symbols: List[Symbol] = []
    location = SourceLocation()
    for _, ttype, value in get_lexer(directives).get_tokens_unprocessed(text):
        symbols.append(Symbol(symbolKind_classify(ttype, value), value, location))
        location = location.advance(value)
    return symbols
