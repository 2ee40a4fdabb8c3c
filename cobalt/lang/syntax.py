"""Abstract syntax tree for the Cobalt language.

Two closed sets of immutable nodes: expressions (Literal, Unary, Binary, Grouping, Variable, Assign) and statements
(Expression, Print, Var, Block). Nothing else is ever produced by the parser or accepted by the evaluator.
"""

from dataclasses import dataclass, fields
from typing import Optional, Tuple, Union

from cobalt.lang.lexical import Token
from cobalt.lang.values import Value


class Node:
    """Mixin shared by every syntax tree node."""

    def display(self, indents=0):
        """Recursively displays the tree rooted at self with a readable format.

        Format:
        <Node>(
            <field>=<Node>(...),
            <field>=<value>,
        )
        Tokens are shown by lexeme, tuples of nodes as bracketed lists.
        """
        pad = "    " * (indents + 1)
        parts = []
        for field in fields(self):
            value = getattr(self, field.name)
            if isinstance(value, Node):
                parts.append(f"{pad}{field.name}={value.display(indents + 1).lstrip()}")
            elif isinstance(value, tuple):
                inner = "".join(f"\n{node.display(indents + 2)}," for node in value)
                parts.append(f"{pad}{field.name}=[{inner}\n{pad}]" if value else f"{pad}{field.name}=[]")
            elif isinstance(value, Token):
                parts.append(f"{pad}{field.name}='{value.lexeme}'")
            else:
                parts.append(f"{pad}{field.name}={value!r}")

        name = f"{'    ' * indents}{type(self).__name__}"
        return f"{name}(\n" + ",\n".join(parts) + f"\n{'    ' * indents})"


# ============================================================================
# EXPRESSIONS
# ============================================================================

@dataclass(frozen=True)
class Literal(Node):
    value: Value


@dataclass(frozen=True)
class Unary(Node):
    operator: Token
    right: "Expr"


@dataclass(frozen=True)
class Binary(Node):
    left: "Expr"
    operator: Token
    right: "Expr"


@dataclass(frozen=True)
class Grouping(Node):
    expression: "Expr"


@dataclass(frozen=True)
class Variable(Node):
    """Read of name. nullable is set when the use-site is written name? ."""
    name: Token
    nullable: bool = False


@dataclass(frozen=True)
class Assign(Node):
    name: Token
    value: "Expr"


Expr = Union[Literal, Unary, Binary, Grouping, Variable, Assign]


# ============================================================================
# STATEMENTS
# ============================================================================

@dataclass(frozen=True)
class Expression(Node):
    expression: Expr


@dataclass(frozen=True)
class Print(Node):
    expression: Expr


@dataclass(frozen=True)
class Var(Node):
    """var name? = initializer; . A missing initializer binds nil."""
    name: Token
    nullable: bool = False
    initializer: Optional[Expr] = None


@dataclass(frozen=True)
class Block(Node):
    statements: Tuple["Stmt", ...] = ()


Stmt = Union[Expression, Print, Var, Block]
