import logging
import os
import sys
import traceback

from colorama import Fore, Style, just_fix_windows_console

from ast_nodes import (
    Program, VariableDeclaration, PrintStatement, IfStatement, WhileLoop,
    NumberLiteral, StringLiteral, Identifier,
    BinaryOperation, Comparison, LogicalOperation,
)
from codegen import PythonGenerator
from compiler import EBPLCompiler, format_tokens
from errors import EBPLError
from lexer import Lexer, TokenType
from parser import Parser

logger = logging.getLogger(__name__)

USAGE = """Usage:
  ebpl tokens <file.ebpl>
  ebpl parse <file.ebpl>
  ebpl build <file.ebpl> [-o out.py]
  ebpl repl
  (optional) --debug to show Python traceback
  (optional) --no-color for plain output"""

use_color = True


def paint(text, color):
    if not use_color:
        return text
    return f"{color}{text}{Style.RESET_ALL}"


def report_error(prefix, err, debug=False):
    if debug:
        traceback.print_exc()
    print(paint(f"{prefix}: {err}", Fore.RED), file=sys.stderr)


# AST printer (so you can SEE what the parser built)
def node_outline(node):
    """Return (heading, [(label, child), ...]) for one node."""
    name = node.__class__.__name__

    if isinstance(node, Program):
        return name, [("", s) for s in node.statements]
    if isinstance(node, VariableDeclaration):
        return f"{name} {node.name}", [("value: ", node.value)]
    if isinstance(node, PrintStatement):
        return name, [("value: ", node.value)]
    if isinstance(node, IfStatement):
        children = [("condition: ", node.condition)]
        children += [("then: ", s) for s in node.then_body]
        children += [("else: ", s) for s in node.else_body or ()]
        return name, children
    if isinstance(node, WhileLoop):
        return name, [("condition: ", node.condition)] + [("body: ", s) for s in node.body]
    if isinstance(node, NumberLiteral):
        return f"{name} {node.value}", []
    if isinstance(node, StringLiteral):
        return f'{name} "{node.value}"', []
    if isinstance(node, Identifier):
        return f"{name} {node.name}", []
    if isinstance(node, (BinaryOperation, Comparison, LogicalOperation)):
        return f"{name} {node.operator}", [("left: ", node.left), ("right: ", node.right)]
    raise TypeError(f"Unknown AST node: {name}")


def format_tree(program):
    # explicit stack: left-deep operator chains can be thousands of levels
    lines = []
    stack = [(0, "", program)]
    while stack:
        depth, label, node = stack.pop()
        heading, children = node_outline(node)
        lines.append(f"{'  ' * depth}{label}{heading}")
        for child in reversed(children):
            stack.append((depth + 1, *child))
    return "\n".join(lines)


def read_source(path):
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def cmd_tokens(path, debug=False):
    try:
        code = read_source(path)
        tokens = Lexer(code).tokenize()
    except (OSError, EBPLError) as e:
        report_error("Lex error", e, debug)
        sys.exit(1)

    for line in format_tokens(tokens):
        print(line)


def cmd_parse(path, debug=False):
    try:
        code = read_source(path)
        program = Parser(Lexer(code).tokenize()).parse()
    except (OSError, EBPLError) as e:
        report_error("Parse error", e, debug)
        sys.exit(1)

    print(format_tree(program))


def cmd_build(path, output=None, debug=False):
    try:
        code = read_source(path)
    except OSError as e:
        report_error("Build error", e, debug)
        sys.exit(1)

    compiler = EBPLCompiler()
    result = compiler.compile(code)
    if not result.success:
        report_error("Build error", result.error)
        sys.exit(1)

    if output is None:
        print(result.generated_code)
        return

    with open(output, "w", encoding="utf-8") as f:
        f.write(result.generated_code + "\n")
    logger.info("wrote %s", output)
    print(paint(f"Wrote {output}", Fore.GREEN))


def _count_block_delta(line: str) -> int:
    # IF/WHILE open a block, END closes one; "END IF"/"END WHILE" count once.
    try:
        tokens = Lexer(line).tokenize()
    except EBPLError:
        return 0
    delta = 0
    prev = None
    for tok in tokens:
        if tok.type in (TokenType.IF, TokenType.WHILE) and prev != TokenType.END:
            delta += 1
        elif tok.type == TokenType.END:
            delta -= 1
        prev = tok.type
    return delta


def compile_snippet(source):
    """Compile a REPL snippet; a bare expression is printed."""
    compiler = EBPLCompiler()
    result = compiler.compile(source)
    if result.success:
        return result.generated_code

    try:
        expr = Parser(Lexer(source).tokenize()).expression_only()
    except EBPLError:
        raise EBPLError(result.error) from None
    return PythonGenerator().generate(Program((PrintStatement(expr),)))


def cmd_repl(debug: bool = False):
    print("EBPL REPL. Type :q to quit.")

    buffer_lines = []
    block_depth = 0
    while True:
        prompt = "ebpl> " if not buffer_lines else "...> "
        try:
            line = input(prompt)
        except (EOFError, KeyboardInterrupt):
            print()
            break

        stripped = line.strip()
        if not buffer_lines and stripped in (":q", ":quit", "quit", "exit"):
            break

        if not stripped and not buffer_lines:
            continue

        buffer_lines.append(line)
        block_depth += _count_block_delta(line)

        # Wait for END lines if a block is still open.
        if block_depth > 0:
            continue

        source = "\n".join(buffer_lines) + "\n"
        buffer_lines = []
        block_depth = 0

        try:
            generated = compile_snippet(source)
        except EBPLError as e:
            report_error("Error", e, debug)
            continue

        # skip the shebang/provenance header
        body = generated.split("\n")[3:]
        print("\n".join(body))


def main():
    global use_color

    args = sys.argv[1:]

    debug = False
    if "--debug" in args:
        debug = True
        args.remove("--debug")

    if "--no-color" in args or os.environ.get("NO_COLOR"):
        use_color = False
        if "--no-color" in args:
            args.remove("--no-color")
    else:
        just_fix_windows_console()

    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    output = None
    for flag in ("-o", "--output"):
        if flag in args:
            i = args.index(flag)
            if i + 1 >= len(args):
                print(f"{flag} expects a file name.")
                sys.exit(1)
            output = args[i + 1]
            del args[i:i + 2]

    if not args:
        print(USAGE)
        sys.exit(1)

    cmd = args[0]

    if cmd == "repl":
        if len(args) != 1:
            print(USAGE)
            sys.exit(1)
        cmd_repl(debug=debug)
        return

    if len(args) != 2:
        print(USAGE)
        sys.exit(1)

    path = args[1]

    if output is not None and cmd != "build":
        print("-o is only accepted by build.")
        sys.exit(1)

    if cmd == "tokens":
        cmd_tokens(path, debug=debug)
    elif cmd == "parse":
        cmd_parse(path, debug=debug)
    elif cmd == "build":
        cmd_build(path, output=output, debug=debug)
    else:
        print(f"Unknown command: {cmd}")
        sys.exit(1)


if __name__ == "__main__":
    main()
