from dataclasses import dataclass

from errors import EBPLLexError, EBPLUnterminatedStringError


class TokenType:
    # keywords
    CREATE = "CREATE"
    VARIABLE = "VARIABLE"
    WITH = "WITH"
    VALUE = "VALUE"
    SET = "SET"
    TO = "TO"
    IF = "IF"
    THEN = "THEN"
    ELSE = "ELSE"
    END = "END"
    PRINT = "PRINT"
    WHILE = "WHILE"
    DO = "DO"
    AND = "AND"
    OR = "OR"
    NOT = "NOT"

    # multi-word comparisons
    IS_GREATER_THAN = "IS_GREATER_THAN"
    IS_LESS_THAN = "IS_LESS_THAN"
    IS_EQUAL_TO = "IS_EQUAL_TO"
    IS_NOT_EQUAL_TO = "IS_NOT_EQUAL_TO"

    # operators / punctuation
    EQUALS = "EQUALS"
    PLUS = "PLUS"
    MINUS = "MINUS"
    MULTIPLY = "MULTIPLY"
    DIVIDE = "DIVIDE"
    LPAREN = "LPAREN"
    RPAREN = "RPAREN"

    # literals
    IDENTIFIER = "IDENTIFIER"
    NUMBER = "NUMBER"
    STRING = "STRING"

    NEWLINE = "NEWLINE"
    EOF = "EOF"


KEYWORDS = {
    "create": TokenType.CREATE,
    "variable": TokenType.VARIABLE,
    "with": TokenType.WITH,
    "value": TokenType.VALUE,
    "set": TokenType.SET,
    "to": TokenType.TO,
    "if": TokenType.IF,
    "then": TokenType.THEN,
    "else": TokenType.ELSE,
    "end": TokenType.END,
    "print": TokenType.PRINT,
    "while": TokenType.WHILE,
    "do": TokenType.DO,
    "and": TokenType.AND,
    "or": TokenType.OR,
    "not": TokenType.NOT,
}

# Longest phrases first so "is not equal to" is never shadowed.
COMPARISON_PHRASES = (
    ("is not equal to", TokenType.IS_NOT_EQUAL_TO),
    ("is greater than", TokenType.IS_GREATER_THAN),
    ("is less than", TokenType.IS_LESS_THAN),
    ("is equal to", TokenType.IS_EQUAL_TO),
)

SINGLE_CHAR_TOKENS = {
    "+": TokenType.PLUS,
    "-": TokenType.MINUS,
    "*": TokenType.MULTIPLY,
    "/": TokenType.DIVIDE,
    "=": TokenType.EQUALS,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
}


@dataclass(frozen=True)
class Token:
    type: str
    value: str
    line: int = 1
    column: int = 1

    def __repr__(self):
        if self.value:
            return f"{self.type}({self.value!r})"
        return f"{self.type}"


def is_digit(ch):
    return ch is not None and "0" <= ch <= "9"


def is_word_start(ch):
    return ch is not None and (("a" <= ch <= "z") or ("A" <= ch <= "Z") or ch == "_")


def is_word_char(ch):
    return is_word_start(ch) or is_digit(ch)


class Lexer:
    def __init__(self, text):
        self.text = text
        self.pos = 0
        self.current_char = text[0] if text else None
        self.line = 1
        self.column = 1

    def advance(self):
        # track line/column based on current_char before moving
        if self.current_char == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        self.pos += 1
        if self.pos >= len(self.text):
            self.current_char = None
        else:
            self.current_char = self.text[self.pos]

    def char_at(self, idx):
        if idx >= len(self.text):
            return None
        return self.text[idx]

    # IMPORTANT: skip spaces/tabs only (NOT newlines)
    def skip_whitespace(self):
        while self.current_char and self.current_char in " \t":
            self.advance()

    def match_phrase(self, start):
        """Return (token type, phrase, end index) if a comparison phrase starts at `start`."""
        for phrase, token_type in COMPARISON_PHRASES:
            idx = start
            matched = True
            for n, word in enumerate(phrase.split(" ")):
                if n > 0:
                    # words are separated by at least one space or tab
                    if self.char_at(idx) not in (" ", "\t"):
                        matched = False
                        break
                    while self.char_at(idx) in (" ", "\t"):
                        idx += 1
                candidate = self.text[idx:idx + len(word)]
                if candidate.lower() != word:
                    matched = False
                    break
                idx += len(word)
            if matched and not is_word_char(self.char_at(idx)):
                return token_type, phrase, idx
        return None

    def read_word(self):
        start_pos = self.pos
        start_line, start_col = self.line, self.column
        result = ""
        while is_word_char(self.current_char):
            result += self.current_char
            self.advance()

        # the phrase includes the word just read, so match from where it began
        phrase = self.match_phrase(start_pos)
        if phrase is not None:
            token_type, text, end = phrase
            while self.pos < end:
                self.advance()
            return Token(token_type, text, start_line, start_col)

        token_type = KEYWORDS.get(result.lower(), TokenType.IDENTIFIER)
        return Token(token_type, result, start_line, start_col)

    def read_number(self):
        start_line, start_col = self.line, self.column
        result = ""
        has_dot = False

        while is_digit(self.current_char) or self.current_char == ".":
            if self.current_char == ".":
                if has_dot:
                    break
                has_dot = True
            result += self.current_char
            self.advance()

        return Token(TokenType.NUMBER, result, start_line, start_col)

    def read_string(self):
        start_line, start_col = self.line, self.column
        self.advance()  # skip opening quote
        result = ""

        # verbatim: no escape sequences
        while self.current_char is not None and self.current_char != '"':
            if self.current_char == "\n":
                raise EBPLUnterminatedStringError(start_line, start_col)
            result += self.current_char
            self.advance()

        if self.current_char != '"':
            raise EBPLUnterminatedStringError(start_line, start_col)

        self.advance()  # skip closing quote
        return Token(TokenType.STRING, result, start_line, start_col)

    def get_next_token(self):
        while self.current_char:

            # NEWLINE is a real token (it terminates statements)
            if self.current_char == "\n":
                start_line, start_col = self.line, self.column
                self.advance()
                return Token(TokenType.NEWLINE, "\n", start_line, start_col)

            if self.current_char in " \t":
                self.skip_whitespace()
                continue

            # CRLF: the CR is dropped and the LF becomes the NEWLINE token
            if self.current_char == "\r" and self.char_at(self.pos + 1) == "\n":
                self.advance()
                continue

            if is_digit(self.current_char):
                return self.read_number()

            if self.current_char == '"':
                return self.read_string()

            if is_word_start(self.current_char):
                return self.read_word()

            if self.current_char in SINGLE_CHAR_TOKENS:
                start_line, start_col = self.line, self.column
                ch = self.current_char
                self.advance()
                return Token(SINGLE_CHAR_TOKENS[ch], ch, start_line, start_col)

            raise EBPLLexError(self.current_char, self.line, self.column)

        return Token(TokenType.EOF, "", self.line, self.column)

    def tokenize(self):
        tokens = []
        while True:
            tok = self.get_next_token()
            tokens.append(tok)
            if tok.type == TokenType.EOF:
                return tokens


def tokenize(source):
    return Lexer(source).tokenize()
