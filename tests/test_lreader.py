from concurrent.futures import ThreadPoolExecutor

import pytest
from pyrsistent import InvariantException, PTypeError

from lpair import AST, Cons, Integer, NIL, Nil, Reader, ReaderError, SrcPos, Symbol, read


def sym(name):
    return Symbol(name=name)


def num(value):
    return Integer(value=value)


def cons(car, cdr):
    return Cons(car=car, cdr=cdr)


@pytest.mark.parametrize("n", [0, 1, 7, 42, 123, 10 ** 30])
def test_integers(n):
    assert read(str(n)) == num(n)
    assert read("-" + str(n)) == num(-n)


def test_negative_zero_is_zero():
    assert read("-0") == read("0") == num(0)
    assert read("-0").value == 0


def test_leading_zeros():
    assert read("007") == num(7)


def test_nil():
    assert read("()") == NIL
    assert isinstance(read("()"), Nil)


def test_cons():
    assert read("(123 . 234)") == cons(num(123), num(234))
    assert read("(1 . ())") == cons(num(1), NIL)
    assert read("(() . ())") == cons(NIL, NIL)


def test_nested_cons():
    assert read("(1 . (2 . 42))") == cons(num(1), cons(num(2), num(42)))
    assert read("((a . b) . c)") == cons(cons(sym("a"), sym("b")), sym("c"))
    assert read("(1 . (2 . (3 . ())))") == cons(num(1), cons(num(2), cons(num(3), NIL)))


@pytest.mark.parametrize("text", [
    "(1 . x)",
    "(1. x)",
    "(1 .x)",
    "(1.x)",
    "( 1 . x )",
    "(\n1\n.\nx\n)",
    "(\t1\t.\tx\t)",
    "(  \n\t 1 \t\n . \n\t  x \t \n)",
])
def test_cons_whitespace(text):
    assert read(text) == cons(num(1), sym("x"))


@pytest.mark.parametrize("name", [
    "nil", "x", "X", "make-something", "cdr4-3-", "a1", "Zz-9-",
])
def test_symbols(name):
    assert read(name) == sym(name)


def test_symbol_in_cons():
    assert read("(cdr4-43- . ())") == cons(sym("cdr4-43-"), NIL)


@pytest.mark.parametrize("text", [
    "",
    " ",
    "(",
    ")",
    "( )",
    "(1 . 2",
    "(1 2)",
    "(1 . 2 . 3)",
    "(1 . 2))",
    "(. 2)",
    "(1 .)",
    "-",
    "-x",
    "- 1",
    "--1",
    "+1",
    "1a",
    "1 2",
    " 1",
    "1 ",
    "a_b",
    "x.y",
    "(1\r. 2)",
    "1.5",
    "٣",
    "été",
    "\"str\"",
    "'x",
])
def test_rejects(text):
    with pytest.raises(ReaderError):
        read(text)


def test_error_position_missing_dot():
    with pytest.raises(ReaderError) as exc:
        read("(1 2)")
    err = exc.value
    assert err.pos == SrcPos("<stdin>", 3, 1, 3)
    assert err.expected == ("'.'",)
    assert str(err) == "<stdin>:1:3: unexpected '2', expected '.'"


def test_error_position_missing_paren():
    with pytest.raises(ReaderError) as exc:
        read("(1 . 2")
    assert exc.value.pos.offset == 6
    assert exc.value.expected == ("')'",)
    assert "unexpected end of input" in str(exc.value)


def test_error_position_multiline():
    with pytest.raises(ReaderError) as exc:
        read("(1 .\n  2\n  3)", file="pair.lp")
    assert exc.value.pos == SrcPos("pair.lp", 11, 3, 2)
    assert str(exc.value).startswith("pair.lp:3:2: ")


def test_error_trailing_input():
    with pytest.raises(ReaderError) as exc:
        read("1 2")
    assert exc.value.pos.offset == 1
    assert exc.value.expected == ("end of input",)


def test_error_lists_alternatives():
    with pytest.raises(ReaderError) as exc:
        read("(")
    assert exc.value.pos.offset == 1
    assert set(exc.value.expected) == {"'('", "'()'", "integer", "symbol"}


def test_error_is_deterministic():
    errors = []
    for _ in range(2):
        with pytest.raises(ReaderError) as exc:
            read("(a . (b . c)")
        errors.append((exc.value.pos, exc.value.expected, str(exc.value)))
    assert errors[0] == errors[1]


def test_read_is_deterministic():
    text = "(define . ((x . -4) . (y . ())))"
    first, second = read(text), read(text)
    assert first == second
    assert first is not second
    assert hash(first) == hash(second)


def test_deep_nesting():
    depth = 100
    text = "(1 . " * depth + "()" + ")" * depth
    expected = NIL
    for _ in range(depth):
        expected = cons(num(1), expected)
    assert read(text) == expected


def test_too_deep_nesting_fails_cleanly():
    with pytest.raises(ReaderError, match="nesting too deep"):
        read("(" * 100000)


@pytest.mark.parametrize("length", [999, 1000, 1001, 5000, 12345])
def test_long_integer_literals(length):
    assert read("9" * length) == num(10 ** length - 1)
    assert read("-" + "9" * length) == num(1 - 10 ** length)


def test_long_integer_keeps_inner_zeros():
    digits = "1" + "0" * 4999 + "7"
    assert read(digits) == num(10 ** 5000 + 7)
    assert read("-" + digits) == num(-(10 ** 5000 + 7))


def test_reader_object_entry():
    r = Reader("(a . 1)", file="f")
    assert r.read() == cons(sym("a"), num(1))
    assert r.eof()


def test_nodes_are_immutable():
    node = read("(1 . x)")
    with pytest.raises(AttributeError):
        node.car = num(2)
    with pytest.raises(AttributeError):
        node.car.value = 3


def test_node_payload_checked():
    with pytest.raises(InvariantException):
        Symbol(name="1x")
    with pytest.raises(InvariantException):
        Symbol(name="")
    with pytest.raises(PTypeError):
        Cons(car=1, cdr=NIL)
    with pytest.raises(PTypeError):
        Integer(value="1")


def test_variants_are_distinct():
    assert num(0) != NIL
    assert sym("nil") != NIL
    assert all(isinstance(read(t), AST) for t in ("1", "a", "()", "(1 . 2)"))


def test_nodes_hashable():
    assert len({read("(a . b)"), read("(a . b)"), read("(b . a)")}) == 2


def test_concurrent_reads():
    texts = [f"({i} . (x{i} . ()))" for i in range(200)]
    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(read, texts))
    for i, node in enumerate(results):
        assert node == cons(num(i), cons(sym(f"x{i}"), NIL))
