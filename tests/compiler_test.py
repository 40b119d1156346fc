import logging
import subprocess
import sys

from compiler import CompileResult, EBPLCompiler, compile_source

PROGRAM = "CREATE VARIABLE x WITH VALUE 5\nPRINT x\n"


def run_python(code):
    proc = subprocess.run(
        [sys.executable, "-c", code],
        text=True,
        capture_output=True,
        timeout=10,
    )
    assert proc.returncode == 0, proc.stderr
    return proc.stdout


def test_successful_compile():
    compiler = EBPLCompiler()
    result = compiler.compile(PROGRAM)

    assert result.success
    assert result.error is None
    assert result.errors == []
    assert result.generated_code == compiler.generated_code
    assert result.generated_code.splitlines()[-2:] == ["x = 5.0", "print(x)"]


def test_generated_program_runs():
    result = compile_source(PROGRAM)
    assert run_python(result.generated_code) == "5.0\n"


def test_loop_program_runs():
    source = "\n".join([
        "CREATE VARIABLE i WITH VALUE 1",
        "WHILE i is less than 4 DO",
        "IF i is equal to 2 THEN",
        'PRINT "two"',
        "ELSE",
        "PRINT i * 10",
        "END IF",
        "CREATE VARIABLE i WITH VALUE i + 1",
        "END WHILE",
    ])
    assert run_python(compile_source(source).generated_code) == "10.0\ntwo\n30.0\n"


def test_compilation_is_deterministic():
    first = EBPLCompiler()
    second = EBPLCompiler()
    a = first.compile(PROGRAM)
    b = second.compile(PROGRAM)
    assert a == b
    assert first.tokens_display() == second.tokens_display()
    assert first.ast_display() == second.ast_display()


def test_lex_error_result():
    compiler = EBPLCompiler()
    result = compiler.compile('PRINT "hello')

    assert not result.success
    assert result.generated_code == ""
    assert result.error == "Unterminated string literal at line 1, col 7"
    assert result.errors == [result.error]
    assert compiler.errors == [result.error]


def test_syntax_error_result():
    result = compile_source("IF x THEN PRINT x END")
    assert not result.success
    assert result.error == "Expected IF, got EOF at line 1, col 22"


def test_state_is_reset_between_compiles():
    compiler = EBPLCompiler()
    compiler.compile(PROGRAM)
    compiler.compile("PRINT @")

    assert compiler.ast is None
    assert compiler.generated_code == ""
    assert compiler.tokens == []
    assert compiler.ast_display() == ["No AST generated"]

    compiler.compile("PRINT 1")
    assert compiler.errors == []


def test_tokens_display_skips_newline_and_eof():
    compiler = EBPLCompiler()
    compiler.compile("PRINT x is less than 2\n")
    assert compiler.tokens_display() == [
        f"{'PRINT':<20} -> 'PRINT' (line 1)",
        f"{'IDENTIFIER':<20} -> 'x' (line 1)",
        f"{'IS_LESS_THAN':<20} -> 'is less than' (line 1)",
        f"{'NUMBER':<20} -> '2' (line 1)",
    ]


def test_ast_display():
    compiler = EBPLCompiler()
    assert compiler.ast_display() == ["No AST generated"]

    compiler.compile(PROGRAM + "IF x is greater than 1 THEN PRINT \"big\" END IF\nWHILE x DO END WHILE")
    assert compiler.ast_display() == [
        "Statement 1: VariableDeclaration(x, NumberLiteral(5.0))",
        "Statement 2: PrintStatement(Identifier(x))",
        'Statement 3: IfStatement(Comparison(Identifier(x) > NumberLiteral(1.0)), then=1, else=0)',
        "Statement 4: WhileLoop(Identifier(x), body=0)",
    ]


def test_result_to_dict():
    ok = compile_source("PRINT 1").to_dict()
    assert ok["success"] is True
    assert set(ok) == {"success", "generatedCode", "tokens", "ast"}
    assert ok["ast"] == ["Statement 1: PrintStatement(NumberLiteral(1.0))"]

    failed = compile_source("PRINT (").to_dict()
    assert failed == {
        "success": False,
        "error": "Unexpected token in expression: EOF at line 1, col 8",
        "errors": ["Unexpected token in expression: EOF at line 1, col 8"],
    }


def test_failure_is_logged(caplog):
    caplog.set_level(logging.INFO, logger="compiler")
    compile_source("PRINT $")
    assert "compilation failed: Unexpected character '$'" in caplog.text


def test_empty_result_defaults():
    result = CompileResult(success=False)
    assert result.tokens == [] and result.ast == [] and result.errors == []


def test_long_flat_sum_compiles():
    compiler = EBPLCompiler()
    result = compiler.compile("PRINT " + " + ".join(["1"] * 2000))

    assert result.success, result.error
    line = result.generated_code.splitlines()[-1]
    assert line.startswith("print(" + "(" * 1999 + "1.0 + 1.0)")
    assert line.count("+") == 1999
    assert result.ast[0].startswith("Statement 1: PrintStatement(BinaryOperation(BinaryOperation(")


def test_long_condition_chain_compiles():
    cond = " and ".join(["x is less than 5"] * 1500)
    result = compile_source(f"WHILE {cond} DO PRINT x END WHILE")
    assert result.success, result.error
    assert result.generated_code.splitlines()[-2].count(" and ") == 1499


def test_deep_parentheses_fail_cleanly():
    result = compile_source("PRINT " + "(" * 1500 + "1" + ")" * 1500)

    assert not result.success
    assert result.generated_code == ""
    assert result.error.startswith("Nesting deeper than 100 levels at line 1")
    assert result.errors == [result.error]


def test_parentheses_up_to_the_limit():
    result = compile_source("PRINT " + "(" * 100 + "x" + ")" * 100)
    assert result.success, result.error
    assert result.generated_code.endswith("print(x)")

    assert not compile_source("PRINT " + "(" * 101 + "x" + ")" * 101).success


def test_deeply_nested_blocks_fail_cleanly():
    source = "WHILE x DO\n" * 150 + "PRINT x\n" + "END WHILE\n" * 150
    result = compile_source(source)
    assert not result.success
    assert "Nesting deeper than 100 levels" in result.error


def test_nested_blocks_within_the_limit():
    source = "WHILE x DO\n" * 60 + "PRINT x\n" + "END WHILE\n" * 60
    result = compile_source(source)
    assert result.success, result.error
    assert result.generated_code.splitlines()[-1] == " " * 240 + "print(x)"


def test_recursion_error_becomes_failure_result(monkeypatch):
    import compiler as compiler_module

    def explode(self):
        raise RecursionError("maximum recursion depth exceeded")

    monkeypatch.setattr(compiler_module.Parser, "parse", explode)
    result = compile_source("PRINT 1")
    assert not result.success
    assert result.error == "Program is nested too deeply to parse"
