"""
Defines the abstract syntax tree (AST) for the sprig programming language.

Classes:
    Expression:
        Base class of every expression node. Subclasses declare their attribute
        names in `fields`; equality, `repr` and `to_dict()` are derived from them.

    Number, StringLiteral, CharLiteral, BoolLiteral, Identifier:
        Leaf nodes.

    Assign, Binary:
        Operator nodes built by the precedence climber.

    If, Function, Closure, Call, Block:
        Compound nodes.

    Parameter:
        A typed function parameter (`int x`, or bare `int` in foreign declarations).

    ASTDict:
        TypedDict shape of a serialized node, suitable for JSON output.

Each node exclusively owns its children; the tree never shares subtrees.
An optional child (`If.else_branch`, `Function.body`) is None when absent,
and an empty `{}` block is represented by None wherever it appears.

Example:
    node = Binary("+", Number(1), Binary("*", Number(2), Number(3)))
"""

from typing import Any, Optional, TypedDict


class ASTDict(TypedDict, total=False):
    """
    TypedDict representation of an Expression used for serialization.

    Every serialized node has a `kind`; the remaining keys are the node's own
    fields, with child nodes nested as ASTDicts (or None when absent).
    """

    kind: str


class Parameter:
    """A function parameter: a required type name and an optional variable name.

    Attributes:
        type_name (str): The parameter type, taken from an identifier token.
        name (str | None): The parameter name, present only when a second
            identifier follows the type.
    """

    def __init__(self, type_name: str, name: str | None = None):
        self.type_name = type_name
        self.name = name

    def __repr__(self) -> str:
        return f"Parameter({self.type_name!r}, {self.name!r})"

    def __eq__(self, other: Any) -> bool:
        return (
            isinstance(other, Parameter)
            and self.type_name == other.type_name
            and self.name == other.name
        )

    def to_dict(self) -> dict[str, str | None]:
        return {"type_name": self.type_name, "name": self.name}


class Expression:
    """
    Base class for all sprig expression nodes.

    Subclasses set `kind` (the serialized tag) and `fields` (attribute names in
    constructor order). Structural equality compares the concrete class and
    every field, recursing through child nodes and lists.
    """

    kind: str = "expression"
    fields: tuple[str, ...] = ()

    def __repr__(self) -> str:
        parts = ", ".join(f"{name}={getattr(self, name)!r}" for name in self.fields)
        return f"{type(self).__name__}({parts})"

    def __eq__(self, other: Any) -> bool:
        if type(self) is not type(other):
            return False
        return all(getattr(self, name) == getattr(other, name) for name in self.fields)

    def to_dict(self) -> ASTDict:
        data: dict[str, Any] = {"kind": self.kind}
        for name in self.fields:
            data[name] = _serialize(getattr(self, name))
        return data  # type: ignore[return-value]


def _serialize(val: Any) -> Any:
    if isinstance(val, (Expression, Parameter)):
        return val.to_dict()
    if isinstance(val, list):
        return [_serialize(v) for v in val]
    return val


MaybeExpression = Optional[Expression]
"""An expression position that may hold no node (an empty block)."""


class Number(Expression):
    kind = "number"
    fields = ("value",)

    def __init__(self, value: int):
        self.value = value


class StringLiteral(Expression):
    kind = "string"
    fields = ("value",)

    def __init__(self, value: str):
        self.value = value


class CharLiteral(Expression):
    """A character literal, stored as the code point of its first character."""

    kind = "char"
    fields = ("value",)

    def __init__(self, value: int):
        self.value = value


class BoolLiteral(Expression):
    kind = "bool"
    fields = ("value",)

    def __init__(self, value: bool):
        self.value = value


class Identifier(Expression):
    kind = "identifier"
    fields = ("name",)

    def __init__(self, name: str):
        self.name = name


class Assign(Expression):
    """An assignment. The target is not validated as an lvalue."""

    kind = "assign"
    fields = ("operator", "target", "value")

    def __init__(self, operator: str, target: MaybeExpression, value: MaybeExpression):
        self.operator = operator
        self.target = target
        self.value = value


class Binary(Expression):
    kind = "binary"
    fields = ("operator", "left", "right")

    def __init__(self, operator: str, left: MaybeExpression, right: MaybeExpression):
        self.operator = operator
        self.left = left
        self.right = right


class If(Expression):
    kind = "if"
    fields = ("condition", "then_branch", "else_branch")

    def __init__(
        self,
        condition: MaybeExpression,
        then_branch: MaybeExpression,
        else_branch: MaybeExpression = None,
    ):
        self.condition = condition
        self.then_branch = then_branch
        self.else_branch = else_branch


class Function(Expression):
    """
    A named function. A body of None marks a foreign (`ext`) declaration,
    and is also what an empty `{}` body produces.
    """

    kind = "function"
    fields = ("name", "params", "body")

    def __init__(
        self,
        name: str,
        params: list[Parameter] | None = None,
        body: MaybeExpression = None,
    ):
        self.name = name
        self.params: list[Parameter] = params or []
        self.body = body

    @property
    def is_external(self) -> bool:
        return self.body is None


class Closure(Expression):
    kind = "closure"
    fields = ("params", "body")

    def __init__(self, params: list[str], body: Expression):
        self.params = params
        self.body = body


class Call(Expression):
    kind = "call"
    fields = ("callee", "args")

    def __init__(self, callee: Expression, args: list[MaybeExpression] | None = None):
        self.callee = callee
        self.args: list[MaybeExpression] = args or []


class Block(Expression):
    kind = "block"
    fields = ("statements",)

    def __init__(self, statements: list[MaybeExpression]):
        self.statements = statements


def program_to_dicts(program: list[MaybeExpression]) -> list[ASTDict | None]:
    """Serializes a parsed program (a top-level list) into JSON-ready data."""
    return [node.to_dict() if node is not None else None for node in program]


__all__ = [
    "ASTDict",
    "Assign",
    "Binary",
    "Block",
    "BoolLiteral",
    "Call",
    "CharLiteral",
    "Closure",
    "Expression",
    "Function",
    "Identifier",
    "If",
    "MaybeExpression",
    "Number",
    "Parameter",
    "StringLiteral",
    "program_to_dicts",
]
