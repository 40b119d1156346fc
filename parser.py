from ast_nodes import (
    Program, VariableDeclaration, PrintStatement, IfStatement, WhileLoop,
    NumberLiteral, StringLiteral, Identifier,
    BinaryOperation, Comparison, LogicalOperation,
)
from errors import EBPLSyntaxError
from lexer import Token, TokenType


COMPARISON_OPERATORS = {
    TokenType.IS_GREATER_THAN: ">",
    TokenType.IS_LESS_THAN: "<",
    TokenType.IS_EQUAL_TO: "==",
    TokenType.IS_NOT_EQUAL_TO: "!=",
}

ADDITIVE_OPERATORS = {
    TokenType.PLUS: "+",
    TokenType.MINUS: "-",
}

MULTIPLICATIVE_OPERATORS = {
    TokenType.MULTIPLY: "*",
    TokenType.DIVIDE: "/",
}

LOGICAL_OPERATORS = {
    TokenType.AND: "and",
    TokenType.OR: "or",
}

# Each parenthesis level costs six parser frames, each block level three.
MAX_NESTING = 100


class Parser:
    def __init__(self, tokens):
        self.tokens = list(tokens)
        if not self.tokens or self.tokens[-1].type != TokenType.EOF:
            last = self.tokens[-1] if self.tokens else None
            line = last.line if last else 1
            column = last.column + len(last.value) if last else 1
            self.tokens.append(Token(TokenType.EOF, "", line, column))
        self.pos = 0
        self.depth = 0
        self.current_token = self.tokens[0]

    def advance(self):
        # EOF is sticky
        if self.pos < len(self.tokens) - 1:
            self.pos += 1
        self.current_token = self.tokens[self.pos]

    # move to next token, but only if it matches what we expect
    def eat(self, token_type):
        tok = self.current_token
        if tok.type != token_type:
            raise EBPLSyntaxError(token_type, tok.type, tok.line, tok.column)
        self.advance()
        return tok

    def error_here(self, message):
        tok = self.current_token
        raise EBPLSyntaxError(None, tok.type, tok.line, tok.column, message=message)

    def skip_newlines(self):
        while self.current_token.type == TokenType.NEWLINE:
            self.advance()

    # ---------- TOP LEVEL ----------
    def parse(self):
        statements = []
        self.skip_newlines()

        while self.current_token.type != TokenType.EOF:
            statements.append(self.statement())
            self.skip_newlines()

        return Program(tuple(statements))

    def expression_only(self):
        """Parse a lone expression (REPL input); only newlines may follow it."""
        self.skip_newlines()
        node = self.expression()
        self.skip_newlines()
        if self.current_token.type != TokenType.EOF:
            self.eat(TokenType.EOF)
        return node

    # ---------- STATEMENTS ----------
    def statement(self):
        token_type = self.current_token.type
        if token_type == TokenType.CREATE:
            return self.variable_declaration()
        if token_type == TokenType.PRINT:
            return self.print_statement()
        if token_type == TokenType.IF:
            return self.if_statement()
        if token_type == TokenType.WHILE:
            return self.while_statement()
        self.error_here(f"Unexpected token in statement: {token_type}")

    def variable_declaration(self):
        self.eat(TokenType.CREATE)
        self.eat(TokenType.VARIABLE)
        name = self.eat(TokenType.IDENTIFIER)
        self.eat(TokenType.WITH)
        self.eat(TokenType.VALUE)
        return VariableDeclaration(name.value, self.expression())

    def print_statement(self):
        self.eat(TokenType.PRINT)
        return PrintStatement(self.expression())

    def if_statement(self):
        # Grammar:
        #   IF logical THEN block (ELSE block)? END IF
        self.eat(TokenType.IF)
        condition = self.logical()
        self.eat(TokenType.THEN)
        then_body = self.block(TokenType.END, TokenType.ELSE)

        else_body = None
        if self.current_token.type == TokenType.ELSE:
            self.eat(TokenType.ELSE)
            else_body = self.block(TokenType.END)

        self.eat(TokenType.END)
        self.eat(TokenType.IF)
        return IfStatement(condition, then_body, else_body)

    def while_statement(self):
        self.eat(TokenType.WHILE)
        condition = self.logical()
        self.eat(TokenType.DO)
        body = self.block(TokenType.END)
        self.eat(TokenType.END)
        self.eat(TokenType.WHILE)
        return WhileLoop(condition, body)

    def block(self, *terminators):
        # runs until a terminator or EOF; the caller eats the closing keywords
        self.enter_nesting()
        statements = []
        while self.current_token.type not in terminators and self.current_token.type != TokenType.EOF:
            if self.current_token.type == TokenType.NEWLINE:
                self.advance()
                continue
            statements.append(self.statement())
        self.depth -= 1
        return tuple(statements)

    def enter_nesting(self):
        # blocks and parentheses share one limit so the parse stays well
        # inside the interpreter's recursion limit
        self.depth += 1
        if self.depth > MAX_NESTING:
            self.error_here(f"Nesting deeper than {MAX_NESTING} levels")

    # ---------- EXPRESSIONS ----------
    # expression -> logical
    def expression(self):
        return self.logical()

    # logical -> comparison ((AND|OR) comparison)*
    def logical(self):
        node = self.comparison()
        while self.current_token.type in LOGICAL_OPERATORS:
            op = LOGICAL_OPERATORS[self.current_token.type]
            self.advance()
            node = LogicalOperation(node, op, self.comparison())
        return node

    # comparison -> addition (cmpOp addition)*
    def comparison(self):
        node = self.addition()
        while self.current_token.type in COMPARISON_OPERATORS:
            op = COMPARISON_OPERATORS[self.current_token.type]
            self.advance()
            node = Comparison(node, op, self.addition())
        return node

    # addition -> multiplication ((+|-) multiplication)*
    def addition(self):
        node = self.multiplication()
        while self.current_token.type in ADDITIVE_OPERATORS:
            op = ADDITIVE_OPERATORS[self.current_token.type]
            self.advance()
            node = BinaryOperation(node, op, self.multiplication())
        return node

    # multiplication -> primary ((*|/) primary)*
    def multiplication(self):
        node = self.primary()
        while self.current_token.type in MULTIPLICATIVE_OPERATORS:
            op = MULTIPLICATIVE_OPERATORS[self.current_token.type]
            self.advance()
            node = BinaryOperation(node, op, self.primary())
        return node

    # primary -> NUMBER | STRING | IDENTIFIER | (expression)
    def primary(self):
        tok = self.current_token

        if tok.type == TokenType.NUMBER:
            self.advance()
            return NumberLiteral(float(tok.value))

        if tok.type == TokenType.STRING:
            self.advance()
            return StringLiteral(tok.value)

        if tok.type == TokenType.IDENTIFIER:
            self.advance()
            return Identifier(tok.value)

        if tok.type == TokenType.LPAREN:
            self.advance()
            self.enter_nesting()
            node = self.expression()
            self.eat(TokenType.RPAREN)
            self.depth -= 1
            return node

        self.error_here(f"Unexpected token in expression: {tok.type}")


def parse(tokens):
    return Parser(tokens).parse()
