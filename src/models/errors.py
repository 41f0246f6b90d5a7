"""
Parser error records and message formatting
"""

from dataclasses import dataclass

from .syntax import SourceLocation


class DirectiveAssertError(RuntimeError):
    """
    A handler was entered on the wrong keyword

    Signals a dispatch-table bug rather than bad input, so it aborts the
    document parse instead of being recorded.
    """


@dataclass(frozen=True)
class RazorError:
    """
    A recoverable error reported while parsing

    Attributes:
        message: Human-readable description
        location: Where the error applies
        length: Number of characters the error spans
    """
    message: str
    location: SourceLocation
    length: int = 1

    def __str__(self) -> str:
        return (
            f"Line {self.location.line_index + 1}, "
            f"column {self.location.character_index + 1}: {self.message}"
        )


def keyword_mustBeFollowedByTypeName(keyword: str) -> str:
    return f"The '{keyword}' keyword must be followed by a type name on the same line."


def onlyOneModelStatementIsAllowed(keyword: str) -> str:
    return f"Only one '{keyword}' statement is allowed in a file."


def cannotHaveModelAndInheritsKeyword(keyword: str) -> str:
    return f"The 'inherits' keyword is not allowed when a '{keyword}' keyword is used."


def injectDirectivePropertyNameRequired(keyword: str) -> str:
    return (
        f"A property name must be specified when using the '{keyword}' statement. "
        f"Format for a '{keyword}' statement is '@{keyword} <Type Name> <Property Name>'."
    )


def transition_unexpectedCharacter(content: str) -> str:
    if not content:
        return "End-of-file was found after the \"@\" character."
    return f"\"{content}\" is not valid at the start of a code block after the \"@\" character."
