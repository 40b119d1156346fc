class EBPLError(Exception):
    def __init__(self, message: str, line: int | None = None, column: int | None = None):
        super().__init__(message)
        self.message = message
        self.line = line
        self.column = column

    def format(self) -> str:
        if self.line is None:
            return self.message
        if self.column is None:
            return f"{self.message} at line {self.line}"
        return f"{self.message} at line {self.line}, col {self.column}"

    def __str__(self) -> str:
        return self.format()


class EBPLLexError(EBPLError):
    def __init__(self, char: str | None, line: int, column: int, message: str | None = None):
        super().__init__(message or f"Unexpected character '{char}'", line, column)
        self.char = char


class EBPLUnterminatedStringError(EBPLLexError):
    def __init__(self, line: int, column: int):
        # position is the opening quote
        super().__init__('"', line, column, message="Unterminated string literal")


class EBPLSyntaxError(EBPLError):
    def __init__(self, expected: str | None, actual: str, line: int, column: int, message: str | None = None):
        if message is None:
            message = f"Expected {expected}, got {actual}"
        super().__init__(message, line, column)
        self.expected = expected
        self.actual = actual
