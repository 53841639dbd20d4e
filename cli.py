import sys
import traceback

from colorama import Fore, Style, just_fix_windows_console

from ast_nodes import Block, Print
from errors import MiniError
from interpreter import Interpreter
from lexer import Lexer
from parser import Parser


USAGE = """Usage:
  mini <file.mini>
  mini run <file.mini>
  mini tokens <file.mini>
  mini parse <file.mini>
  mini repl
  (optional) --debug to show Python traceback
  (optional) --trace to log each executed statement to stderr"""


# Simple AST printer (so you can SEE what the parser built)
def ast_to_dict(node):
    if node is None:
        return None

    t = node.__class__.__name__
    d = {"type": t, "line": node.line}

    if t == "Block":
        d["statements"] = [ast_to_dict(s) for s in node.statements]
    elif t == "Assign":
        d["name"] = node.name
        d["value"] = ast_to_dict(node.value)
    elif t == "Print":
        d["expr"] = ast_to_dict(node.expr)
    elif t == "If":
        d["condition"] = ast_to_dict(node.condition)
        d["then_branch"] = ast_to_dict(node.then_branch)
        d["else_branch"] = ast_to_dict(node.else_branch)
    elif t == "While":
        d["condition"] = ast_to_dict(node.condition)
        d["body"] = ast_to_dict(node.body)
    elif t == "Binary":
        d["op"] = node.op
        d["left"] = ast_to_dict(node.left)
        d["right"] = ast_to_dict(node.right)
    elif t == "Var":
        d["name"] = node.name
    elif t == "Number":
        d["value"] = node.value
    else:
        d["raw"] = str(node)

    return d


def pretty(obj, indent=0):
    sp = "  " * indent
    if isinstance(obj, dict):
        lines = []
        for k, v in obj.items():
            if isinstance(v, (dict, list)):
                lines.append(f"{sp}{k}:")
                lines.append(pretty(v, indent + 1))
            else:
                lines.append(f"{sp}{k}: {v}")
        return "\n".join(lines)
    if isinstance(obj, list):
        lines = []
        for item in obj:
            lines.append(f"{sp}-")
            lines.append(pretty(item, indent + 1))
        return "\n".join(lines)
    return f"{sp}{obj}"


def report(message):
    # colour only the prefix, and only on a terminal
    prefix = "Error:"
    if sys.stderr.isatty():
        prefix = f"{Fore.RED}{Style.BRIGHT}{prefix}{Style.RESET_ALL}"
    print(f"{prefix} {message}", file=sys.stderr)


def fail(e, debug=False):
    if debug:
        traceback.print_exc()
    elif isinstance(e, MiniError):
        report(str(e))
    else:
        report(f"Internal error: {type(e).__name__}: {e}")


def read_source(path):
    try:
        with open(path, "r", encoding="utf-8") as f:
            return f.read()
    except OSError as e:
        report(f"Could not open file: {path} ({e.strerror})")
        sys.exit(1)


def cmd_tokens(path, debug=False):
    code = read_source(path)
    try:
        tokens = Lexer(code).tokenize()
    except Exception as e:
        fail(e, debug)
        sys.exit(1)

    for tok in tokens:
        print(f"{tok.line:4d}:{tok.column:<3d} {tok.type:<8} {tok.value}".rstrip())


def cmd_parse(path, debug=False):
    code = read_source(path)
    try:
        program = Parser(Lexer(code).tokenize()).parse()
    except Exception as e:
        fail(e, debug)
        sys.exit(1)

    print(pretty(ast_to_dict(program)))


def cmd_run(path, debug=False, trace=False):
    code = read_source(path)
    try:
        tokens = Lexer(code).tokenize()
        program = Parser(tokens).parse()
        Interpreter(trace=trace).run(program)
    except Exception as e:
        sys.stdout.flush()
        fail(e, debug)
        sys.exit(1)


def _count_braces_delta(line: str) -> int:
    # Minimal brace balancer for REPL multiline input.
    return line.count("{") - line.count("}")


def parse_snippet(source):
    # First, try parsing as a normal program (statements).
    tokens = Lexer(source).tokenize()
    try:
        return Parser(tokens).parse()
    except MiniError as parse_err:
        # If that fails, try parsing as a single expression and auto-print it.
        try:
            parser = Parser(tokens)
            expr = parser.expr()
            parser.eat("EOF")
        except (MiniError, RecursionError):
            raise parse_err
        return Block([Print(expr, line=expr.line)], line=expr.line)


def cmd_repl(debug=False, trace=False):
    # One interpreter for the whole session so variables persist between snippets.
    interpreter = Interpreter(trace=trace)

    print("Mini REPL. Type :q to quit.")

    buffer_lines = []
    brace_depth = 0
    while True:
        prompt = "mini> " if not buffer_lines else "...> "
        try:
            line = input(prompt)
        except (EOFError, KeyboardInterrupt):
            print()
            break

        stripped = line.strip()
        if not buffer_lines and stripped in (":q", ":quit", "quit", "exit"):
            break

        if not stripped and not buffer_lines:
            continue

        buffer_lines.append(line)
        brace_depth += _count_braces_delta(line)

        # Wait for block completion if braces aren't balanced yet.
        if brace_depth > 0:
            continue

        source = "\n".join(buffer_lines) + "\n"
        buffer_lines = []
        brace_depth = 0

        try:
            interpreter.run(parse_snippet(source))
        except Exception as e:
            fail(e, debug)


def main(argv=None):
    just_fix_windows_console()

    args = list(sys.argv[1:] if argv is None else argv)
    debug = "--debug" in args
    trace = "--trace" in args
    args = [a for a in args if a not in ("--debug", "--trace")]

    if not args:
        print(USAGE, file=sys.stderr)
        sys.exit(1)

    cmd = args[0]

    if cmd == "repl":
        if len(args) != 1:
            print(USAGE, file=sys.stderr)
            sys.exit(1)
        cmd_repl(debug=debug, trace=trace)
        return

    if cmd not in ("run", "tokens", "parse"):
        # bare file path: same as `run <file>`
        if len(args) != 1:
            print(USAGE, file=sys.stderr)
            sys.exit(1)
        cmd_run(cmd, debug=debug, trace=trace)
        return

    if len(args) != 2:
        print(USAGE, file=sys.stderr)
        sys.exit(1)

    path = args[1]
    if cmd == "run":
        cmd_run(path, debug=debug, trace=trace)
    elif cmd == "tokens":
        cmd_tokens(path, debug=debug)
    else:
        cmd_parse(path, debug=debug)


if __name__ == "__main__":
    main()
