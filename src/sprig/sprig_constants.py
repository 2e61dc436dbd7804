"""
Shared lexical constants for the sprig language.

Defines the token-kind enumeration and the fixed vocabularies consumed by both
the lexer and the parser:

    TokenKind:       The seven token classes produced by the lexer.
    KEYWORDS:        Reserved words recognised as keyword tokens.
    PUNCTUATION:     Single-character punctuation tokens.
    OP_PRECEDENCE:   Binary/assignment operator precedence (higher binds tighter).
    OPERATOR_SYMBOLS: Every operator spelling the lexer recognises.
"""

from enum import Enum


class TokenKind(str, Enum):
    """Classification of a lexical token."""

    IDENTIFIER = "identifier"
    NUMBER = "number"
    STRING = "string"
    CHARACTER = "character"
    KEYWORD = "keyword"
    PUNCTUATION = "punctuation"
    OPERATOR = "operator"


KEYWORDS: frozenset[str] = frozenset(
    {"ext", "def", "if", "else", "true", "false", "cls"}
)

PUNCTUATION: frozenset[str] = frozenset({"(", ")", "{", "}", ",", ";"})

OP_PRECEDENCE: dict[str, int] = {
    "=": 1,
    "||": 2,
    "&&": 3,
    "<": 7,
    ">": 7,
    "<=": 7,
    ">=": 7,
    "==": 7,
    "!=": 7,
    "+": 10,
    "-": 10,
    "*": 20,
    "/": 20,
    "%": 20,
}

# "!" is lexed so that "!=" has a prefix to extend; it has no binary precedence.
OPERATOR_SYMBOLS: frozenset[str] = frozenset(OP_PRECEDENCE) | {"!"}

__all__ = ["KEYWORDS", "OPERATOR_SYMBOLS", "OP_PRECEDENCE", "PUNCTUATION", "TokenKind"]
