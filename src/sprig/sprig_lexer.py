"""
Lexical analyzer and token stream for the sprig programming language.

This module provides the components that turn raw source code into the token
stream consumed by the parser:

Classes:
    CharacterStream: Stream abstraction for reading characters with line/column tracking.
    Token: A single classified token with kind, text, and source location.
    Lexer: Converts a CharacterStream into a sequence of tokens.
    TokenStream: One-token lookahead cursor over any token iterable, with the
        error hook the parser aborts through.

Features:
    - Skips whitespace and single-line comments (`#`)
    - Longest-match recognition of operators
    - Recognizes:
        * Identifiers and keywords (`ext`, `def`, `if`, `else`, `true`, `false`, `cls`)
        * Integer numbers
        * Strings (`"..."`) and characters (`'...'`) with escape sequences
        * Punctuation `( ) { } , ;`

Raises:
    SyntaxError: On unterminated literals or characters outside the language.

Example:
    >>> lexer = Lexer(CharacterStream("def f(int x) { x }"))
    >>> lexer.next_token()
    Token(keyword, def)

Exports:
    - CharacterStream
    - Token
    - Lexer
    - TokenStream
"""

from collections.abc import Iterable, Iterator
from typing import Any, NoReturn

from sprig.sprig_constants import KEYWORDS, OPERATOR_SYMBOLS, PUNCTUATION, TokenKind

ESCAPES: dict[str, str] = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "0": "\0",
    "\\": "\\",
    '"': '"',
    "'": "'",
}

_MAX_OPERATOR_LEN = max(len(op) for op in OPERATOR_SYMBOLS)


class CharacterStream:
    """
    A utility for reading characters from a string source with line and column tracking.

    Attributes:
        source (str): The input source string.
        position (int): Current index in the source.
        line (int): Current line number (1-indexed).
        column (int): Current column number (1-indexed).
    """

    def __init__(self, source: str, position: int = 0, line: int = 1, column: int = 1):
        self.source = source
        self.position = position
        self.line = line
        self.column = column

    def next(self) -> str:
        """
        Consumes and returns the next character in the stream.

        Raises:
            SyntaxError: If reading past the end of the source.
        """
        if self.position >= len(self.source):
            raise SyntaxError(
                f"Unexpected end of input at line {self.line}, col {self.column}"
            )
        char = self.source[self.position]
        if char == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        self.position += 1
        return char

    def peek(self, offset: int = 0) -> str:
        """Returns the character at `offset` without advancing, or "" when out of bounds."""
        index = self.position + offset
        if index < 0 or index >= len(self.source):
            return ""
        return self.source[index]

    def end_of_file(self) -> bool:
        return self.position >= len(self.source)


class Token:
    """Represents a single lexical token.

    Attributes:
        kind (TokenKind | None): The token class; None marks the end-of-input sentinel.
        text (str): The token's text (decoded body for string/character literals).
        line (int): The 1-based line number where the token appears (0 if unknown).
        col (int): The 1-based column number where the token starts (0 if unknown).
    """

    def __init__(self, kind: TokenKind | None, text: str, line: int = 0, col: int = 0):
        self.kind = kind
        self.text = text
        self.line = line
        self.col = col

    @classmethod
    def eof(cls, line: int = 0, col: int = 0) -> "Token":
        """Builds the end-of-input sentinel token."""
        return cls(None, "", line, col)

    def is_eof(self) -> bool:
        return self.kind is None

    def __repr__(self) -> str:
        kind = self.kind.value if self.kind is not None else "EOF"
        return f"Token({kind}, {self.text})"

    def __eq__(self, other: Any) -> bool:
        return (
            isinstance(other, Token)
            and self.kind == other.kind
            and self.text == other.text
            and self.line == other.line
            and self.col == other.col
        )

    def __hash__(self) -> int:
        return hash((self.kind, self.text, self.line, self.col))


class Lexer:
    """Lexical analyzer for the sprig language.

    Takes a CharacterStream and converts it into Token objects, one per call
    to `next_token()`, or lazily through `tokens()`.

    Attributes:
        stream (CharacterStream): The source stream to tokenize.
    """

    def __init__(self, stream: CharacterStream) -> None:
        self.stream = stream

    def peek(self, offset: int = 0) -> str:
        return self.stream.peek(offset)

    def advance(self) -> str:
        return self.stream.next()

    def skip_whitespace(self) -> None:
        """Skips all whitespace and comments in the stream."""
        while not self.stream.end_of_file():
            if self.peek() in " \t\r\n":
                self.advance()
            elif self.peek() == "#":
                self.skip_comment()
            else:
                break

    def skip_comment(self) -> None:
        while not self.stream.end_of_file() and self.peek() != "\n":
            self.advance()

    def match_operator(self) -> Token | None:
        """Attempts to match the longest valid operator from the current position.

        Returns:
            Token | None: An operator token if a match is found, otherwise None.
        """
        line, col = self.stream.line, self.stream.column
        max_token = None
        candidate = ""

        for i in range(_MAX_OPERATOR_LEN):
            ch = self.peek(i)
            if ch == "":
                break
            candidate += ch
            if candidate in OPERATOR_SYMBOLS:
                max_token = candidate

        if max_token:
            for _ in range(len(max_token)):
                self.advance()
            return Token(TokenKind.OPERATOR, max_token, line, col)

        return None

    def read_quoted(self, kind: TokenKind) -> Token:
        """Reads a quoted string or character literal, decoding escape sequences.

        Raises:
            SyntaxError: If the literal is unterminated or uses an unknown escape.
        """
        line, col = self.stream.line, self.stream.column
        quote = self.advance()
        val = ""
        while not self.stream.end_of_file() and self.peek() != quote:
            ch = self.advance()
            if ch == "\\":
                if self.stream.end_of_file():
                    break
                esc = self.advance()
                if esc not in ESCAPES:
                    raise SyntaxError(
                        f"Unknown escape sequence '\\{esc}' at line {line}, col {col}"
                    )
                val += ESCAPES[esc]
            else:
                val += ch
        if self.peek() != quote:
            label = "string" if kind is TokenKind.STRING else "character literal"
            raise SyntaxError(f"Unterminated {label} at line {line}, col {col}")
        self.advance()
        return Token(kind, val, line, col)

    def next_token(self) -> Token:
        """Consumes and returns the next Token from the stream.

        Returns the end-of-input sentinel once the source is exhausted.

        Raises:
            SyntaxError: If a malformed token or foreign character is encountered.
        """
        self.skip_whitespace()

        if self.stream.end_of_file():
            return Token.eof(self.stream.line, self.stream.column)

        ch = self.peek()
        line, col = self.stream.line, self.stream.column

        # 1. Identifier or keyword
        if ch.isalpha() or ch == "_":
            ident = ""
            while not self.stream.end_of_file() and (
                self.peek().isalnum() or self.peek() == "_"
            ):
                ident += self.advance()
            kind = TokenKind.KEYWORD if ident in KEYWORDS else TokenKind.IDENTIFIER
            return Token(kind, ident, line, col)

        # 2. Integer
        if ch.isdigit():
            num = ""
            while not self.stream.end_of_file() and self.peek().isdigit():
                num += self.advance()
            return Token(TokenKind.NUMBER, num, line, col)

        # 3. String or character literal
        if ch == '"':
            return self.read_quoted(TokenKind.STRING)
        if ch == "'":
            return self.read_quoted(TokenKind.CHARACTER)

        # 4. Punctuation
        if ch in PUNCTUATION:
            return Token(TokenKind.PUNCTUATION, self.advance(), line, col)

        # 5. Compound or symbolic operator
        token = self.match_operator()
        if token:
            return token

        raise SyntaxError(f"Unexpected character '{ch}' at line {line}, col {col}")

    def tokens(self) -> Iterator[Token]:
        """Yields tokens until end of input; the sentinel itself is not yielded."""
        while True:
            tok = self.next_token()
            if tok.is_eof():
                return
            yield tok


class TokenStream:
    """One-token lookahead cursor over a sequence of tokens.

    The parser only ever sees this interface: `peek()`, `next()`, `at_end()`
    and `report_error()`. No more than one token is buffered, so the stream
    can wrap the lexer's generator directly.

    Example:
        >>> stream = TokenStream.from_source("1 + 2")
        >>> stream.next()
        Token(number, 1)
    """

    def __init__(self, tokens: Iterable[Token]) -> None:
        self._tokens = iter(tokens)
        self._last: Token = Token.eof()
        self._current: Token = self._pull()

    @classmethod
    def from_source(cls, source: str) -> "TokenStream":
        return cls(Lexer(CharacterStream(source)).tokens())

    def _pull(self) -> Token:
        for tok in self._tokens:
            if not tok.is_eof():
                self._last = tok
            return tok
        return Token.eof(self._last.line, self._last.col)

    def peek(self) -> Token:
        return self._current

    def next(self) -> Token:
        tok = self._current
        if not tok.is_eof():
            self._current = self._pull()
        return tok

    def at_end(self) -> bool:
        return self._current.is_eof()

    def report_error(self, message: str, token: Token | None = None) -> NoReturn:
        """Aborts the parse with a SyntaxError located at `token` (or the lookahead)."""
        where = token if token is not None else self._current
        if where.line:
            message = f"{message} at line {where.line}, col {where.col}"
        raise SyntaxError(message)


__all__ = ["CharacterStream", "Lexer", "Token", "TokenStream"]
