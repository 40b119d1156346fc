from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class NumberLiteral:
    value: float


@dataclass(frozen=True)
class StringLiteral:
    value: str


@dataclass(frozen=True)
class Identifier:
    name: str


@dataclass(frozen=True)
class BinaryOperation:
    left: "Expression"
    operator: str  # + - * /
    right: "Expression"


@dataclass(frozen=True)
class Comparison:
    left: "Expression"
    operator: str  # > < == !=
    right: "Expression"


@dataclass(frozen=True)
class LogicalOperation:
    left: "Expression"
    operator: str  # and / or
    right: "Expression"


Expression = Union[NumberLiteral, StringLiteral, Identifier, BinaryOperation, Comparison, LogicalOperation]


@dataclass(frozen=True)
class VariableDeclaration:
    name: str
    value: Expression


@dataclass(frozen=True)
class PrintStatement:
    value: Expression


@dataclass(frozen=True)
class IfStatement:
    condition: Expression
    then_body: tuple
    else_body: tuple | None = None


@dataclass(frozen=True)
class WhileLoop:
    condition: Expression
    body: tuple


Statement = Union[VariableDeclaration, PrintStatement, IfStatement, WhileLoop]


@dataclass(frozen=True)
class Program:
    statements: tuple


def describe(node) -> str:
    """One-line summary of a node, used by the debug AST listing."""
    if isinstance(node, VariableDeclaration):
        return f"VariableDeclaration({node.name}, {describe(node.value)})"
    if isinstance(node, PrintStatement):
        return f"PrintStatement({describe(node.value)})"
    if isinstance(node, IfStatement):
        else_count = len(node.else_body) if node.else_body else 0
        return f"IfStatement({describe(node.condition)}, then={len(node.then_body)}, else={else_count})"
    if isinstance(node, WhileLoop):
        return f"WhileLoop({describe(node.condition)}, body={len(node.body)})"
    if isinstance(node, NumberLiteral):
        return f"NumberLiteral({node.value})"
    if isinstance(node, StringLiteral):
        return f'StringLiteral("{node.value}")'
    if isinstance(node, Identifier):
        return f"Identifier({node.name})"
    if isinstance(node, (BinaryOperation, Comparison, LogicalOperation)):
        # left spine in a loop: long operator chains are left-deep
        spine = []
        while isinstance(node, (BinaryOperation, Comparison, LogicalOperation)):
            spine.append(node)
            node = node.left
        text = describe(node)
        for parent in reversed(spine):
            text = _describe_operation(parent, text, describe(parent.right))
        return text
    if isinstance(node, Program):
        return f"Program({', '.join(describe(s) for s in node.statements)})"
    raise TypeError(f"Unknown AST node: {node.__class__.__name__}")


def _describe_operation(node, left, right):
    if isinstance(node, BinaryOperation):
        return f"BinaryOperation({left}, '{node.operator}', {right})"
    return f"{node.__class__.__name__}({left} {node.operator} {right})"
