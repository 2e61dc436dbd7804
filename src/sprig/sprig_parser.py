"""
sprig Language Parser

Parses a stream of classified sprig tokens into an abstract syntax tree.

Supported Constructs
--------------------
- Literals: numbers, strings, characters, `true` / `false`, identifiers
- Binary and assignment expressions with precedence climbing:
    `=` (1) < `||` (2) < `&&` (3) < comparisons (7) < `+ -` (10) < `* / %` (20)
- Conditionals: `if cond then [else other]`
- Named functions: `def name(type name, ...) body`
- Foreign declarations: `ext name(type [name], ...)`
- Closures: `cls(a, b) { ... }`
- Calls: `f(a, b)` directly after an atom, and once more after a full expression
- Blocks: `{ expr; expr; ... }`

Parser Behavior
---------------
- One token of lookahead; no backtracking and no error recovery.
- Every mismatch aborts through the token stream's `report_error`, which
  raises `SyntaxError`. No partial AST is ever returned.
- Operators of equal precedence fold to the left, including `=`:
  `a = b = c` parses as `(a = b) = c`.
- A call suffix attaches at most twice to one expression position; `f()()()`
  is rejected at top level.
- An empty block `{}` yields no node (None) in whatever position it appears.

Entry Points
------------
- `Parser(stream).parse()`: Parse a full program into its top-level expressions.
- `parse_source(source)`: Lex and parse source text in one step.

Raises
------
SyntaxError
    Raised when unexpected tokens appear or expected punctuation, keywords,
    operators, or names are missing.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import NoReturn, TypeVar

from sprig.sprig_ast import (
    Assign,
    Binary,
    Block,
    BoolLiteral,
    Call,
    CharLiteral,
    Closure,
    Expression,
    Function,
    Identifier,
    If,
    MaybeExpression,
    Number,
    Parameter,
    StringLiteral,
)
from sprig.sprig_constants import OP_PRECEDENCE, TokenKind
from sprig.sprig_lexer import Token, TokenStream

T = TypeVar("T")

# Atom forms introduced by a keyword or an opening bracket, keyed on the
# lookahead's (kind, text). Looked up before falling back to literal tokens.
ATOM_FORMS: dict[tuple[TokenKind, str], str] = {
    (TokenKind.KEYWORD, "ext"): "parse_ext",
    (TokenKind.KEYWORD, "def"): "parse_function",
    (TokenKind.PUNCTUATION, "("): "parse_parenthesized",
    (TokenKind.PUNCTUATION, "{"): "parse_block",
    (TokenKind.KEYWORD, "if"): "parse_if",
    (TokenKind.KEYWORD, "true"): "parse_bool",
    (TokenKind.KEYWORD, "false"): "parse_bool",
    (TokenKind.KEYWORD, "cls"): "parse_closure",
}


class Parser:
    """
    sprig Parser Class

    Recursive-descent parser over a `TokenStream`. All parse state lives on the
    instance (the stream cursor), so independent parsers can run side by side.

    Attributes
    ----------
    stream : TokenStream
        The token cursor being consumed.

    Methods
    -------
    parse() -> list[MaybeExpression]
        Parse a full program: expressions separated by `;` until end of input.
    parse_expression() -> MaybeExpression
        Parse one full expression (atom, operators, trailing call).
    parse_atom() -> MaybeExpression
        Parse the smallest expression unit, with an optional call suffix.
    maybe_binary(left, floor) -> MaybeExpression
        Precedence-climb over operators binding tighter than `floor`.
    delimited(open_, close, separator, element) -> list[T]
        Parse a bracketed, separator-delimited list.
    parse_block() -> MaybeExpression
        Parse `{ ... }`; None when the block is empty.
    """

    def __init__(self, stream: TokenStream | Iterable[Token]) -> None:
        self.stream: TokenStream = (
            stream if isinstance(stream, TokenStream) else TokenStream(stream)
        )

    # Token cursor

    def is_punctuation(self, ch: str | None = None) -> bool:
        tok = self.stream.peek()
        return tok.kind is TokenKind.PUNCTUATION and (ch is None or tok.text[:1] == ch)

    def is_keyword(self, name: str | None = None) -> bool:
        tok = self.stream.peek()
        return tok.kind is TokenKind.KEYWORD and (name is None or tok.text == name)

    def is_operator(self, symbol: str | None = None) -> bool:
        tok = self.stream.peek()
        return tok.kind is TokenKind.OPERATOR and (symbol is None or tok.text == symbol)

    def consume_punctuation(self, ch: str) -> None:
        if not self.is_punctuation(ch):
            self.stream.report_error(f"Token '{ch}' expected")
        self.stream.next()

    def consume_keyword(self, name: str) -> None:
        if not self.is_keyword(name):
            self.stream.report_error(f'Keyword "{name}" expected')
        self.stream.next()

    def consume_operator(self, symbol: str) -> None:
        if not self.is_operator(symbol):
            self.stream.report_error(f"Operator '{symbol}' expected")
        self.stream.next()

    def unexpected(self, tok: Token) -> NoReturn:
        if tok.is_eof():
            self.stream.report_error("Unexpected end of input", tok)
        self.stream.report_error(f'Unexpected token "{tok.text}"', tok)

    # Lists

    def delimited(
        self, open_: str, close: str, separator: str, element: Callable[[], T]
    ) -> list[T]:
        """Parse `open_ element (separator element)* [separator] close`.

        An empty list and a trailing separator are both accepted. Running out
        of tokens before `close` is reported as a missing `close`.
        """
        items: list[T] = []
        first = True
        self.consume_punctuation(open_)
        while not self.stream.at_end():
            if self.is_punctuation(close):
                break
            if first:
                first = False
            else:
                self.consume_punctuation(separator)
            if self.is_punctuation(close):
                break
            items.append(element())
        self.consume_punctuation(close)
        return items

    # Expressions

    def parse(self) -> list[MaybeExpression]:
        """Parse a full sprig program and return its top-level expressions.

        The final expression does not need a trailing `;`. Nesting deeper than
        the interpreter recursion limit is reported as a SyntaxError.
        """
        program: list[MaybeExpression] = []
        try:
            while not self.stream.at_end():
                program.append(self.parse_expression())
                if not self.stream.at_end():
                    self.consume_punctuation(";")
        except RecursionError:
            self.stream.report_error("Expression nested too deeply")
        return program

    def parse_expression(self) -> MaybeExpression:
        return self.maybe_call(self.maybe_binary(self.parse_atom(), 0))

    def maybe_binary(self, left: MaybeExpression, floor: int) -> MaybeExpression:
        """Fold trailing operators whose precedence exceeds `floor` into `left`.

        Each right operand absorbs the operators binding tighter than its own
        operator; after building a node the loop re-tests against the same
        `floor`, so equal-precedence operators associate to the left.
        """
        while self.is_operator():
            tok = self.stream.peek()
            prec = OP_PRECEDENCE.get(tok.text)
            if prec is None:
                self.stream.report_error(f'Unknown operator "{tok.text}"')
            if prec <= floor:
                break
            self.stream.next()
            right = self.maybe_binary(self.parse_atom(), prec)
            if tok.text == "=":
                left = Assign(tok.text, left, right)
            else:
                left = Binary(tok.text, left, right)
        return left

    def maybe_call(self, expr: MaybeExpression) -> MaybeExpression:
        if expr is not None and self.is_punctuation("("):
            return self.parse_call(expr)
        return expr

    def parse_call(self, callee: Expression) -> Call:
        return Call(callee, self.delimited("(", ")", ",", self.parse_expression))

    def parse_atom(self) -> MaybeExpression:
        return self.maybe_call(self._parse_atom_form())

    def _parse_atom_form(self) -> MaybeExpression:
        tok = self.stream.peek()
        if tok.kind is not None:
            text = tok.text[:1] if tok.kind is TokenKind.PUNCTUATION else tok.text
            form = ATOM_FORMS.get((tok.kind, text))
            if form is not None:
                handler: Callable[[], MaybeExpression] = getattr(self, form)
                return handler()

        tok = self.stream.next()
        if tok.kind is TokenKind.IDENTIFIER:
            return Identifier(tok.text)
        if tok.kind is TokenKind.NUMBER:
            return self.parse_number(tok)
        if tok.kind is TokenKind.CHARACTER:
            if not tok.text:
                self.stream.report_error("Empty character literal", tok)
            return CharLiteral(ord(tok.text[0]))
        if tok.kind is TokenKind.STRING:
            return StringLiteral(tok.text)
        self.unexpected(tok)

    def parse_number(self, tok: Token) -> Number:
        try:
            return Number(int(tok.text))
        except ValueError:
            self.stream.report_error(f'Invalid number literal "{tok.text}"', tok)

    def parse_parenthesized(self) -> MaybeExpression:
        self.consume_punctuation("(")
        expr = self.parse_expression()
        self.consume_punctuation(")")
        return expr

    def parse_block(self) -> Block | None:
        statements = self.delimited("{", "}", ";", self.parse_expression)
        if not statements:
            return None
        return Block(statements)

    def parse_if(self) -> If:
        self.consume_keyword("if")
        condition = self.parse_expression()
        then_branch = self.parse_expression()
        else_branch = None
        if self.is_keyword("else"):
            self.stream.next()
            else_branch = self.parse_expression()
        return If(condition, then_branch, else_branch)

    def parse_bool(self) -> BoolLiteral:
        return BoolLiteral(self.stream.next().text == "true")

    def parse_varname(self) -> str:
        tok = self.stream.next()
        if tok.kind is not TokenKind.IDENTIFIER:
            self.stream.report_error("Variable name expected", tok)
        return tok.text

    def parse_param(self) -> Parameter:
        type_tok = self.stream.next()
        if type_tok.kind is not TokenKind.IDENTIFIER:
            self.stream.report_error("Type name expected", type_tok)
        name = None
        if self.stream.peek().kind is TokenKind.IDENTIFIER:
            name = self.stream.next().text
        return Parameter(type_tok.text, name)

    def parse_closure(self) -> Closure | None:
        """Parse `cls(a, b) { ... }`; an empty body yields no node at all."""
        self.consume_keyword("cls")
        params = self.delimited("(", ")", ",", self.parse_varname)
        body = self.parse_block()
        if body is None:
            return None
        return Closure(params, body)

    def parse_ext(self) -> Function:
        self.consume_keyword("ext")
        name_tok = self.stream.next()
        if name_tok.kind is not TokenKind.IDENTIFIER:
            self.stream.report_error("Function name expected", name_tok)
        params = self.delimited("(", ")", ",", self.parse_param)
        return Function(name_tok.text, params, None)

    def parse_function(self) -> Function:
        """Parse `def name [(params)] body`. The name token is taken as-is."""
        self.consume_keyword("def")
        name = self.stream.next().text
        params: list[Parameter] = []
        if self.is_punctuation("("):
            params = self.delimited("(", ")", ",", self.parse_param)
        body = self.parse_expression()
        return Function(name, params, body)


def parse_source(source: str) -> list[MaybeExpression]:
    """Lex and parse sprig source text into its top-level expressions."""
    return Parser(TokenStream.from_source(source)).parse()


__all__ = ["ATOM_FORMS", "Parser", "parse_source"]
