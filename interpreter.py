import sys

from ast_nodes import INT_MAX, INT_MIN, Assign, Binary, Block, If, Number, Print, Var, While, ensure_recursion_limit
from errors import MiniRuntimeError


def trunc_div(a: int, b: int) -> int:
    # integer division rounding toward zero
    q = abs(a) // abs(b)
    return q if (a < 0) == (b < 0) else -q


def trunc_mod(a: int, b: int) -> int:
    # remainder takes the sign of the dividend: a == trunc_div(a, b) * b + trunc_mod(a, b)
    return a - trunc_div(a, b) * b


class Interpreter:
    def __init__(self, out=None, trace: bool = False):
        self.out = out if out is not None else sys.stdout
        self.trace_enabled = trace
        self.variables = {}  # flat environment: name -> int, shared by every block
        self.line = None     # line of the node being evaluated

    def run(self, root):
        ensure_recursion_limit()
        try:
            self.evaluate(root)
        except RecursionError:
            raise MiniRuntimeError("Expression nested too deeply", self.line) from None

    def trace(self, node):
        print(f"TRACE line={node.line or 0:04d} {type(node).__name__}", file=sys.stderr)

    def evaluate(self, node) -> int:
        self.line = getattr(node, "line", None)

        if isinstance(node, Number):
            return node.value

        if isinstance(node, Var):
            if node.name not in self.variables:
                raise MiniRuntimeError(f"Undefined variable '{node.name}'", node.line)
            return self.variables[node.name]

        if isinstance(node, Binary):
            return self.eval_binary(node)

        if self.trace_enabled:
            self.trace(node)

        if isinstance(node, Assign):
            value = self.evaluate(node.value)
            self.variables[node.name] = value
            return value

        if isinstance(node, Print):
            value = self.evaluate(node.expr)
            print(value, file=self.out)
            return value

        if isinstance(node, If):
            if self.evaluate(node.condition) != 0:
                self.evaluate(node.then_branch)
            elif node.else_branch is not None:
                self.evaluate(node.else_branch)
            return 0

        if isinstance(node, While):
            while self.evaluate(node.condition) != 0:
                self.evaluate(node.body)
            return 0

        if isinstance(node, Block):
            for stmt in node.statements:
                self.evaluate(stmt)
            return 0

        raise MiniRuntimeError(f"Unknown node type: {type(node).__name__}", getattr(node, "line", None))

    def eval_binary(self, node) -> int:
        # Walk the left spine so a long a + b + c ... chain does not recurse per term.
        # Both sides are always evaluated, left first.
        chain = [node]
        while isinstance(chain[-1].left, Binary):
            chain.append(chain[-1].left)

        a = self.evaluate(chain[-1].left)
        for binary in reversed(chain):
            b = self.evaluate(binary.right)
            a = self.apply(binary, a, b)
        return a

    def apply(self, node, a: int, b: int) -> int:
        op = node.op

        if op == "+":
            return self.check_range(a + b, node)
        if op == "-":
            return self.check_range(a - b, node)
        if op == "*":
            return self.check_range(a * b, node)
        if op == "/":
            if b == 0:
                raise MiniRuntimeError("Division by zero", node.line)
            return self.check_range(trunc_div(a, b), node)
        if op == "%":
            if b == 0:
                raise MiniRuntimeError("Modulo by zero", node.line)
            return trunc_mod(a, b)

        if op == "==":
            return int(a == b)
        if op == "!=":
            return int(a != b)
        if op == "<":
            return int(a < b)
        if op == "<=":
            return int(a <= b)
        if op == ">":
            return int(a > b)
        if op == ">=":
            return int(a >= b)

        # the left operand of ! is the synthetic 0 and is ignored
        if op == "!":
            return int(b == 0)

        raise MiniRuntimeError(f"Unknown operator '{op}'", node.line)

    def check_range(self, value: int, node) -> int:
        if value < INT_MIN or value > INT_MAX:
            raise MiniRuntimeError("Integer overflow", node.line)
        return value


def run(root, out=None, trace=False):
    interpreter = Interpreter(out=out, trace=trace)
    interpreter.run(root)
    return interpreter
