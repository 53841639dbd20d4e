class MiniError(Exception):
    """Base class for every error the lexer, parser or interpreter raises."""

    def __init__(self, message: str, line: int | None = None):
        super().__init__(message)
        self.message = message
        self.line = line  # 1-based source line, None when unknown

    def __str__(self) -> str:
        if self.line is None:
            return self.message
        return f"{self.message} at line {self.line}"


class MiniLexError(MiniError):
    pass


class MiniParseError(MiniError):
    pass


class MiniRuntimeError(MiniError):
    pass
