from errors import MiniLexError


KEYWORDS = {
    "if": "IF",
    "else": "ELSE",
    "while": "WHILE",
    "print": "PRINT",
}

# single-character tokens that never need a lookahead
SINGLE_CHAR_TOKENS = {
    "+": "PLUS",
    "-": "MINUS",
    "*": "STAR",
    "/": "SLASH",
    "%": "PERCENT",
    ";": "SEMI",
    "(": "LPAREN",
    ")": "RPAREN",
    "{": "LBRACE",
    "}": "RBRACE",
}

# first char -> (type alone, type when followed by '=')
EQ_SUFFIX_TOKENS = {
    "=": ("ASSIGN", "EQEQ"),
    "!": ("NOT", "NOTEQ"),
    "<": ("LT", "LTE"),
    ">": ("GT", "GTE"),
}


def is_letter(ch):
    return ch is not None and ch.isascii() and ch.isalpha()


def is_digit(ch):
    return ch is not None and ch.isascii() and ch.isdigit()


class Token:
    __slots__ = ("type", "value", "line", "column")

    def __init__(self, type, value=None, line=1, column=1):
        self.type = type
        self.value = value    # exact source text
        self.line = line
        self.column = column

    def __repr__(self):
        if self.type in ("IDENT", "NUMBER"):
            return f"{self.type}({self.value})"
        return f"{self.type}"


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

    def peek(self):
        nxt = self.pos + 1
        if nxt >= len(self.text):
            return None
        return self.text[nxt]

    # newlines are plain whitespace here; advance() does the line counting
    def skip_whitespace(self):
        while self.current_char and self.current_char in " \t\r\n\f\v":
            self.advance()

    def read_identifier(self):
        start_line, start_col = self.line, self.column
        result = ""
        while is_letter(self.current_char) or is_digit(self.current_char) or self.current_char == "_":
            result += self.current_char
            self.advance()

        token_type = KEYWORDS.get(result, "IDENT")
        return Token(token_type, result, line=start_line, column=start_col)

    def read_number(self):
        # Only the digits are collected; the parser converts and range-checks them.
        start_line, start_col = self.line, self.column
        result = ""
        while is_digit(self.current_char):
            result += self.current_char
            self.advance()
        return Token("NUMBER", result, line=start_line, column=start_col)

    def get_next_token(self):
        while self.current_char:

            if self.current_char in " \t\r\n\f\v":
                self.skip_whitespace()
                continue

            # identifiers / keywords
            if is_letter(self.current_char):
                return self.read_identifier()

            # numbers
            if is_digit(self.current_char):
                return self.read_number()

            start_line, start_col = self.line, self.column

            # = == ! != < <= > >=
            if self.current_char in EQ_SUFFIX_TOKENS:
                alone, with_eq = EQ_SUFFIX_TOKENS[self.current_char]
                first = self.current_char
                if self.peek() == "=":
                    self.advance()
                    self.advance()
                    return Token(with_eq, first + "=", line=start_line, column=start_col)
                self.advance()
                return Token(alone, first, line=start_line, column=start_col)

            # math and punctuation
            if self.current_char in SINGLE_CHAR_TOKENS:
                ch = self.current_char
                self.advance()
                return Token(SINGLE_CHAR_TOKENS[ch], ch, line=start_line, column=start_col)

            raise MiniLexError(f"Unknown character '{self.current_char}'", self.line)

        return Token("EOF", "", line=self.line, column=self.column)

    def tokenize(self):
        tokens = []
        while True:
            tok = self.get_next_token()
            tokens.append(tok)
            if tok.type == "EOF":
                return tokens


def tokenize(source):
    return Lexer(source).tokenize()
