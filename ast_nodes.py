import sys


# Every integer value in the language is a signed 64-bit number.
INT_MIN = -(2 ** 63)
INT_MAX = 2 ** 63 - 1

# Parser and interpreter recurse per nesting level; one parenthesis costs the
# parser about 11 frames, so the default limit of 1000 is too small.
RECURSION_LIMIT = 10000


def ensure_recursion_limit():
    if sys.getrecursionlimit() < RECURSION_LIMIT:
        sys.setrecursionlimit(RECURSION_LIMIT)


class ASTNode:
    # Source line (1-based). The parser always sets this.
    line: int | None = None


class Number(ASTNode):
    def __init__(self, value, line=None):
        self.value = value  # int
        self.line = line


class Var(ASTNode):
    def __init__(self, name, line=None):
        self.name = name
        self.line = line


class Binary(ASTNode):
    # Unary +x, -x and !x are stored as Binary(Number(0), op, x).
    def __init__(self, left, op, right, line=None):
        self.left = left
        self.op = op
        self.right = right
        self.line = line


class Assign(ASTNode):
    def __init__(self, name, value, line=None):
        self.name = name
        self.value = value  # expression
        self.line = line


class Print(ASTNode):
    def __init__(self, expr, line=None):
        self.expr = expr
        self.line = line


class If(ASTNode):
    def __init__(self, condition, then_branch, else_branch=None, line=None):
        self.condition = condition
        self.then_branch = then_branch  # single statement
        self.else_branch = else_branch  # statement | None
        self.line = line


class While(ASTNode):
    def __init__(self, condition, body, line=None):
        self.condition = condition
        self.body = body
        self.line = line


class Block(ASTNode):
    def __init__(self, statements, line=None):
        self.statements = statements  # list of statements, no scope of its own
        self.line = line
