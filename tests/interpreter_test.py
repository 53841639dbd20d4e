import io

import pytest

from ast_nodes import ASTNode, Binary, Block, Number, Print, Var
from errors import MiniRuntimeError
from interpreter import Interpreter, run, trunc_div, trunc_mod
from lexer import tokenize
from parser import parse


def run_source(source, interpreter=None):
    out = io.StringIO()
    if interpreter is None:
        interpreter = Interpreter(out=out)
    else:
        interpreter.out = out
    interpreter.run(parse(tokenize(source)))
    return out.getvalue()


def test_precedence_output():
    assert run_source("print(2 + 3 * 4);") == "14\n"
    assert run_source("print((2 + 3) * 4);") == "20\n"


def test_while_loop():
    assert run_source("x = 0; while (x < 5) { x = x + 1; } print(x);") == "5\n"


def test_unary_operators():
    assert run_source("print(-5 + 3);") == "-2\n"
    assert run_source("print(!0);") == "1\n"
    assert run_source("print(!5);") == "0\n"
    assert run_source("print(+7);") == "7\n"
    assert run_source("print(!!9);") == "1\n"
    assert run_source("print(- -4);") == "4\n"


def test_comparisons_yield_one_or_zero():
    src = "print(1 < 2); print(2 < 1); print(2 <= 2); print(3 > 4); print(4 >= 4); print(5 == 5); print(5 != 5);"
    assert run_source(src) == "1\n0\n1\n0\n1\n1\n0\n"


def test_truncating_division_and_modulo():
    assert run_source("print(7 / 2); print(-7 / 2); print(7 / -2); print(-7 / -2);") == "3\n-3\n-3\n3\n"
    assert run_source("print(7 % 3); print(-7 % 3); print(7 % -3); print(-7 % -3);") == "1\n-1\n1\n-1\n"


@pytest.mark.parametrize("a, b", [(7, 2), (-7, 2), (7, -2), (-7, -2), (0, 5), (6, 3), (-6, 3)])
def test_div_mod_identity(a, b):
    assert trunc_div(a, b) * b + trunc_mod(a, b) == a
    assert abs(trunc_mod(a, b)) < abs(b)


def test_no_short_circuit():
    assert run_source("print(1 / 1 == 1);") == "1\n"
    with pytest.raises(MiniRuntimeError) as exc:
        run_source("print(0 == 0 / 0);")
    assert exc.value.message == "Division by zero"


def test_not_still_evaluates_operand():
    with pytest.raises(MiniRuntimeError) as exc:
        run_source("print(!(1 % 0));")
    assert exc.value.message == "Modulo by zero"


def test_undefined_variable_cites_print_line():
    with pytest.raises(MiniRuntimeError) as exc:
        run_source("x = 1;\n\nprint(y);\n")
    assert exc.value.message == "Undefined variable 'y'"
    assert exc.value.line == 3
    assert str(exc.value) == "Undefined variable 'y' at line 3"


def test_division_by_zero_line():
    with pytest.raises(MiniRuntimeError) as exc:
        run_source("a = 0;\nb = 4\n/ a;")
    assert exc.value.line == 3


def test_if_else():
    src = "x = 3; if (x > 2) print(1); else print(0); if (x - 3) print(2); else print(3); if (0) print(4);"
    assert run_source(src) == "1\n3\n"


def test_blocks_share_one_environment():
    src = "{ a = 1; { b = a + 1; } } if (1) { c = b * 10; } print(a + b + c);"
    assert run_source(src) == "23\n"


def test_assignment_overwrites():
    assert run_source("x = 1; x = x + 41; print(x);") == "42\n"


def test_output_order_before_failure():
    out = io.StringIO()
    interpreter = Interpreter(out=out)
    with pytest.raises(MiniRuntimeError):
        interpreter.run(parse(tokenize("print(1); print(2); print(3 / 0); print(4);")))
    assert out.getvalue() == "1\n2\n"


def test_deterministic_reruns():
    src = "n = 10; a = 0; b = 1; while (n > 0) { print(a); t = a + b; a = b; b = t; n = n - 1; }"
    first = run_source(src)
    assert first.splitlines()[-1] == "34"
    assert run_source(src) == first


def test_environment_persists_on_same_instance():
    interpreter = Interpreter()
    run_source("x = 5;", interpreter)
    assert run_source("print(x * 2);", interpreter) == "10\n"
    assert interpreter.variables == {"x": 5}


def test_separate_instances_are_isolated():
    interpreter = Interpreter()
    run_source("x = 5;", interpreter)
    with pytest.raises(MiniRuntimeError):
        run_source("print(x);")


def test_largest_values_and_overflow():
    assert run_source("print(9223372036854775807);") == "9223372036854775807\n"
    assert run_source("print(-9223372036854775807 - 1);") == "-9223372036854775808\n"
    with pytest.raises(MiniRuntimeError) as exc:
        run_source("print(9223372036854775807 + 1);")
    assert exc.value.message == "Integer overflow"


def test_negating_min_value_overflows():
    # -x is 0 - x, which cannot represent -(-2**63)
    with pytest.raises(MiniRuntimeError) as exc:
        run_source("m = -9223372036854775807 - 1;\nprint(-m);")
    assert exc.value.message == "Integer overflow"
    assert exc.value.line == 2
    with pytest.raises(MiniRuntimeError):
        run_source("m = -9223372036854775807 - 1; print(m / -1);")


def test_statements_yield_values():
    interpreter = Interpreter(out=io.StringIO())
    root = parse(tokenize("x = 7; print(x + 1); if (1) x = 2;"))
    assign, prnt, if_stmt = root.statements
    assert interpreter.evaluate(assign) == 7
    assert interpreter.evaluate(prnt) == 8
    assert interpreter.evaluate(if_stmt) == 0


def test_unknown_node_type():
    class Mystery(ASTNode):
        line = 9

    with pytest.raises(MiniRuntimeError) as exc:
        Interpreter().evaluate(Block([Mystery()], line=1))
    assert "Unknown node type" in exc.value.message
    assert exc.value.line == 9


def test_unknown_operator():
    node = Binary(Number(1, line=4), "**", Number(2, line=4), line=4)
    with pytest.raises(MiniRuntimeError) as exc:
        Interpreter().evaluate(node)
    assert exc.value.message == "Unknown operator '**'"
    assert exc.value.line == 4


def test_module_run_helper_defaults_to_stdout(capsys):
    interpreter = run(parse(tokenize("print(12);")))
    assert capsys.readouterr().out == "12\n"
    assert interpreter.variables == {}


def test_trace_writes_to_stderr(capsys):
    out = io.StringIO()
    Interpreter(out=out, trace=True).run(parse(tokenize("x = 1;\nprint(x);")))
    err = capsys.readouterr().err
    assert "TRACE line=0002 Print" in err
    assert out.getvalue() == "1\n"


def test_multiplication_overflow():
    with pytest.raises(MiniRuntimeError) as exc:
        run_source("print(4611686018427387904 * 2);")
    assert exc.value.message == "Integer overflow"
    assert run_source("print(4611686018427387904 * -2);") == "-9223372036854775808\n"


def test_min_value_modulo_minus_one_is_zero():
    assert run_source("m = -9223372036854775807 - 1; print(m % -1); print(m % 10);") == "0\n-8\n"


def test_long_left_associative_chain():
    terms = " + ".join(["1"] * 1000)
    assert run_source(f"print({terms});") == "1000\n"
    assert run_source(f"x = 5000 - ({terms}) * 2;\nprint(x);") == "3000\n"


def test_deeply_nested_parentheses():
    assert run_source("print(" + "(" * 200 + "7" + ")" * 200 + ");") == "7\n"
    nested = "(1 + " * 200 + "1" + ")" * 200
    assert run_source(f"print({nested});") == "201\n"


def test_nesting_beyond_limit_reports_line():
    node = Var("x", line=7)
    for _ in range(30000):
        node = Binary(Number(0, line=7), "-", node, line=7)
    root = Block([Print(node, line=7)], line=1)

    interpreter = Interpreter(out=io.StringIO())
    interpreter.variables["x"] = 1
    with pytest.raises(MiniRuntimeError) as exc:
        interpreter.run(root)
    assert exc.value.message == "Expression nested too deeply"
    assert exc.value.line == 7
