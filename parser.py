from ast_nodes import INT_MAX, Assign, Binary, Block, If, Number, Print, Var, While, ensure_recursion_limit
from errors import MiniParseError
from lexer import Token


TOKEN_NAMES = {
    "IDENT": "identifier",
    "NUMBER": "number",
    "ASSIGN": "'='",
    "SEMI": "';'",
    "LPAREN": "'('",
    "RPAREN": "')'",
    "LBRACE": "'{'",
    "RBRACE": "'}'",
    "EOF": "end of input",
}

EQUALITY_OPS = ("EQEQ", "NOTEQ")
COMPARISON_OPS = ("LT", "LTE", "GT", "GTE")
TERM_OPS = ("PLUS", "MINUS")
FACTOR_OPS = ("STAR", "SLASH", "PERCENT")
UNARY_OPS = ("PLUS", "MINUS", "NOT")


def describe(tok):
    if tok.type == "EOF":
        return "end of input"
    if tok.type in ("IDENT", "NUMBER"):
        return f"{TOKEN_NAMES[tok.type]} '{tok.value}'"
    return f"'{tok.value}'"


class Parser:
    def __init__(self, tokens):
        self.tokens = list(tokens)
        if not self.tokens or self.tokens[-1].type != "EOF":
            line = self.tokens[-1].line if self.tokens else 1
            self.tokens.append(Token("EOF", "", line=line))
        self.pos = 0
        self.current_token = self.tokens[0]

    # move to next token, but only if it matches what we expect
    def eat(self, token_type):
        tok = self.current_token
        if tok.type != token_type:
            expected = TOKEN_NAMES.get(token_type, token_type.lower())
            raise MiniParseError(f"Expected {expected}, got {describe(tok)}", tok.line)
        if self.pos < len(self.tokens) - 1:
            self.pos += 1
            self.current_token = self.tokens[self.pos]
        return tok

    def error_here(self, message):
        tok = self.current_token
        raise MiniParseError(f"{message}: {describe(tok)}", tok.line)

    # ---------- TOP LEVEL ----------
    def parse(self):
        ensure_recursion_limit()
        root = Block([], line=self.current_token.line)
        try:
            while self.current_token.type != "EOF":
                root.statements.append(self.statement())
        except RecursionError:
            raise MiniParseError("Expression nested too deeply", self.current_token.line) from None
        self.eat("EOF")
        return root

    # ---------- STATEMENTS ----------
    def statement(self):
        token_type = self.current_token.type

        if token_type == "IDENT":
            return self.assignment()
        if token_type == "PRINT":
            return self.print_statement()
        if token_type == "IF":
            return self.if_statement()
        if token_type == "WHILE":
            return self.while_statement()
        if token_type == "LBRACE":
            return self.block()

        self.error_here("Unexpected token")

    def assignment(self):
        name_token = self.eat("IDENT")
        self.eat("ASSIGN")
        value_expr = self.expr()
        self.eat("SEMI")
        return Assign(name_token.value, value_expr, line=name_token.line)

    def print_statement(self):
        tok = self.eat("PRINT")
        self.eat("LPAREN")
        expr = self.expr()
        self.eat("RPAREN")
        self.eat("SEMI")
        return Print(expr, line=tok.line)

    def if_statement(self):
        # else binds to the nearest if: the inner statement() call takes it first
        tok = self.eat("IF")
        condition = self.condition()
        then_branch = self.statement()

        else_branch = None
        if self.current_token.type == "ELSE":
            self.eat("ELSE")
            else_branch = self.statement()

        return If(condition, then_branch, else_branch, line=tok.line)

    def while_statement(self):
        tok = self.eat("WHILE")
        condition = self.condition()
        body = self.statement()
        return While(condition, body, line=tok.line)

    def condition(self):
        self.eat("LPAREN")
        node = self.expr()
        self.eat("RPAREN")
        return node

    def block(self):
        tok = self.eat("LBRACE")
        statements = []
        while self.current_token.type not in ("RBRACE", "EOF"):
            statements.append(self.statement())
        self.eat("RBRACE")
        return Block(statements, line=tok.line)

    # ---------- EXPRESSIONS ----------
    # expr -> equality
    def expr(self):
        return self.equality()

    def binary_level(self, ops, operand):
        node = operand()
        while self.current_token.type in ops:
            op_token = self.eat(self.current_token.type)
            right = operand()
            node = Binary(node, op_token.value, right, line=op_token.line)
        return node

    # equality -> comparison ((==|!=) comparison)*
    def equality(self):
        return self.binary_level(EQUALITY_OPS, self.comparison)

    # comparison -> term ((<|<=|>|>=) term)*
    def comparison(self):
        return self.binary_level(COMPARISON_OPS, self.term)

    # term -> factor ((+|-) factor)*
    def term(self):
        return self.binary_level(TERM_OPS, self.factor)

    # factor -> unary ((*|/|%) unary)*
    def factor(self):
        return self.binary_level(FACTOR_OPS, self.unary)

    # unary -> (+|-|!) unary | primary
    def unary(self):
        if self.current_token.type in UNARY_OPS:
            tok = self.eat(self.current_token.type)
            # represent -x as (0 - x), !x as (0 ! x)
            return Binary(Number(0, line=tok.line), tok.value, self.unary(), line=tok.line)
        return self.primary()

    # primary -> NUMBER | IDENT | (expr)
    def primary(self):
        tok = self.current_token

        if tok.type == "NUMBER":
            self.eat("NUMBER")
            # length check first: int() refuses very long digit strings
            digits = tok.value.lstrip("0") or "0"
            if len(digits) > len(str(INT_MAX)) or int(digits) > INT_MAX:
                raise MiniParseError(f"Integer literal out of range: {tok.value}", tok.line)
            return Number(int(digits), line=tok.line)

        if tok.type == "IDENT":
            self.eat("IDENT")
            return Var(tok.value, line=tok.line)

        if tok.type == "LPAREN":
            self.eat("LPAREN")
            node = self.expr()
            self.eat("RPAREN")
            return node

        self.error_here("Unexpected token in expression")


def parse(tokens):
    return Parser(tokens).parse()
