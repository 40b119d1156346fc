import math

from ast_nodes import (
    Program, VariableDeclaration, PrintStatement, IfStatement, WhileLoop,
    NumberLiteral, StringLiteral, Identifier,
    BinaryOperation, Comparison, LogicalOperation,
)
from pysource import PythonSource


OPERATOR_NODES = (BinaryOperation, Comparison, LogicalOperation)

HEADER = (
    "#!/usr/bin/env python3",
    "# Generated from EBPL",
    "",
)


class PythonGenerator:
    def __init__(self, indent="    "):
        self.indent = indent

    def generate(self, node):
        # entry point
        if not isinstance(node, Program):
            raise TypeError("PythonGenerator expects a Program node at the top")

        out = PythonSource(self.indent)
        for line in HEADER:
            out.emit(line)

        for stmt in node.statements:
            self.generate_stmt(out, stmt, 0)

        return out.render()

    # -------- statements --------
    def generate_stmt(self, out, node, depth):
        if isinstance(node, VariableDeclaration):
            out.emit(f"{node.name} = {self.generate_expr(node.value)}", depth)
            return

        if isinstance(node, PrintStatement):
            out.emit(f"print({self.generate_expr(node.value)})", depth)
            return

        if isinstance(node, IfStatement):
            out.emit(f"if {self.generate_expr(node.condition)}:", depth)
            self.generate_body(out, node.then_body, depth + 1)
            # an empty else is dropped entirely
            if node.else_body:
                out.emit("else:", depth)
                self.generate_body(out, node.else_body, depth + 1)
            return

        if isinstance(node, WhileLoop):
            out.emit(f"while {self.generate_expr(node.condition)}:", depth)
            self.generate_body(out, node.body, depth + 1)
            return

        raise TypeError(f"Unknown statement node: {node.__class__.__name__}")

    def generate_body(self, out, statements, depth):
        if not statements:
            out.emit("pass", depth)
            return
        for stmt in statements:
            self.generate_stmt(out, stmt, depth)

    # -------- expressions --------
    def generate_expr(self, node):
        # Operator chains parse into left-deep trees; walk the left spine in a
        # loop so long sums don't use one stack frame per term.
        spine = []
        while isinstance(node, OPERATOR_NODES):
            spine.append(node)
            node = node.left

        text = self.generate_leaf(node)
        for parent in reversed(spine):
            text = f"({text} {self.operator_text(parent)} {self.generate_expr(parent.right)})"
        return text

    def operator_text(self, node):
        if isinstance(node, LogicalOperation):
            return "and" if node.operator.lower() == "and" else "or"
        return node.operator

    def generate_leaf(self, node):
        if isinstance(node, NumberLiteral):
            if not math.isfinite(node.value):
                return f"float('{node.value}')"
            return repr(node.value)

        if isinstance(node, StringLiteral):
            # no re-escaping; the lexer already rejects embedded quotes
            return f'"{node.value}"'

        if isinstance(node, Identifier):
            return node.name

        raise TypeError(f"Unknown expression node: {node.__class__.__name__}")


def generate(program, indent="    "):
    return PythonGenerator(indent).generate(program)
