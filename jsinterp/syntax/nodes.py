"""Abstract syntax tree shared by the parser and the evaluator. The node set is closed: the evaluator handles every
class defined here and nothing else.

Every node records pos, the source offset where it starts. pos is excluded from equality so that trees can be
compared structurally regardless of layout.
"""

from dataclasses import dataclass, field, fields
from typing import List, Optional


class Node:
    """Superclass for all syntax tree nodes."""

    def children(self):
        """Yields (field name, child) for every child node, in source order. Lists are flattened."""
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, Node):
                yield f.name, value
            elif isinstance(value, list):
                for item in value:
                    if isinstance(item, Node):
                        yield f.name, item

    def display(self, indents=0):
        """Recursively displays the tree with readable format.

        Format:
        <Node>(<attr>=<value>, ...,
            <Node>(...)
        )
        """
        attrs = []
        for f in fields(self):
            value = getattr(self, f.name)
            if f.name == "pos" or isinstance(value, Node) or (isinstance(value, list) and value
                                                              and isinstance(value[0], Node)):
                continue
            attrs.append(f"{f.name}={value!r}")

        result = f"{'    ' * indents}{type(self).__name__}({', '.join(attrs)}"
        children = list(self.children())
        if children:
            for __, child in children:
                result += "\n" + child.display(indents + 1)
            result += f"\n{'    ' * indents}"
        return result + ")"


class Expression(Node):
    pass


class Statement(Node):
    pass


@dataclass
class NumberLiteral(Expression):
    value: float
    pos: int = field(default=-1, compare=False)


@dataclass
class StringLiteral(Expression):
    value: str
    pos: int = field(default=-1, compare=False)


@dataclass
class BooleanLiteral(Expression):
    value: bool
    pos: int = field(default=-1, compare=False)


@dataclass
class Identifier(Expression):
    name: str
    pos: int = field(default=-1, compare=False)


@dataclass
class UnaryExpr(Expression):
    op: str
    operand: Expression
    pos: int = field(default=-1, compare=False)


@dataclass
class BinaryExpr(Expression):
    op: str
    left: Expression
    right: Expression
    pos: int = field(default=-1, compare=False)


@dataclass
class AssignExpr(Expression):
    name: str
    value: Expression
    pos: int = field(default=-1, compare=False)


@dataclass
class CallExpr(Expression):
    callee: Expression
    args: List[Expression]
    pos: int = field(default=-1, compare=False)


@dataclass
class LetDeclaration(Statement):
    name: str
    init: Optional[Expression] = None
    pos: int = field(default=-1, compare=False)


@dataclass
class ExpressionStatement(Statement):
    expr: Expression
    pos: int = field(default=-1, compare=False)


@dataclass
class Block(Statement):
    body: List[Statement]
    pos: int = field(default=-1, compare=False)


@dataclass
class FunctionDeclaration(Statement):
    name: str
    params: List[str]
    body: Block
    pos: int = field(default=-1, compare=False)


@dataclass
class ReturnStatement(Statement):
    value: Optional[Expression] = None
    pos: int = field(default=-1, compare=False)


@dataclass
class IfStatement(Statement):
    test: Expression
    consequent: Statement
    alternate: Optional[Statement] = None
    pos: int = field(default=-1, compare=False)


@dataclass
class Program(Node):
    body: List[Statement]
    pos: int = field(default=0, compare=False)
