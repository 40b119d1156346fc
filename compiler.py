import logging
from dataclasses import dataclass, field

from ast_nodes import describe
from codegen import PythonGenerator
from errors import EBPLError
from lexer import Lexer, TokenType
from parser import Parser

logger = logging.getLogger(__name__)


@dataclass
class CompileResult:
    success: bool
    generated_code: str = ""
    tokens: list = field(default_factory=list)
    ast: list = field(default_factory=list)
    error: str | None = None
    errors: list = field(default_factory=list)

    def to_dict(self):
        """JSON shape handed to the HTTP layer."""
        if self.success:
            return {
                "success": True,
                "generatedCode": self.generated_code,
                "tokens": list(self.tokens),
                "ast": list(self.ast),
            }
        return {
            "success": False,
            "error": self.error,
            "errors": list(self.errors),
        }


class EBPLCompiler:
    """Runs lexer -> parser -> generator and keeps the pieces for inspection.

    One instance holds the state of its latest compile() call; use separate
    instances (or compile_source) for independent compilations.
    """

    def __init__(self, indent="    "):
        self.indent = indent
        self.tokens = []
        self.ast = None
        self.errors = []
        self.generated_code = ""

    def compile(self, source):
        self.tokens = []
        self.ast = None
        self.errors = []
        self.generated_code = ""

        try:
            self.tokens = Lexer(source).tokenize()
            logger.debug("lexed %d tokens", len(self.tokens))

            self.ast = Parser(self.tokens).parse()
            logger.debug("parsed %d top-level statements", len(self.ast.statements))
        except EBPLError as e:
            return self.fail(str(e))
        except RecursionError:
            # the parser's nesting limit normally fires first; this covers
            # callers that are already deep in the stack
            return self.fail("Program is nested too deeply to parse")

        self.generated_code = PythonGenerator(self.indent).generate(self.ast)
        return CompileResult(
            success=True,
            generated_code=self.generated_code,
            tokens=self.tokens_display(),
            ast=self.ast_display(),
        )

    def fail(self, message):
        logger.info("compilation failed: %s", message)
        self.errors.append(message)
        return CompileResult(success=False, error=message, errors=list(self.errors))

    def tokens_display(self):
        return format_tokens(self.tokens)

    def ast_display(self):
        if self.ast is None:
            return ["No AST generated"]
        return [f"Statement {i}: {describe(stmt)}" for i, stmt in enumerate(self.ast.statements, start=1)]


def format_tokens(tokens):
    return [
        f"{tok.type:<20} -> '{tok.value}' (line {tok.line})"
        for tok in tokens
        if tok.type not in (TokenType.NEWLINE, TokenType.EOF)
    ]


def compile_source(source, indent="    "):
    return EBPLCompiler(indent).compile(source)
