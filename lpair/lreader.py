from __future__ import annotations
import logging
import re
import string
from dataclasses import dataclass, field as dc_field
from typing import Callable, Optional, Sequence, Set

from pyrsistent import PClass, field

__all__ = [
    "AST", "Integer", "Symbol", "Nil", "Cons", "NIL",
    "SrcPos", "Reader", "ReaderError", "read",
]

logger = logging.getLogger(__name__)

SYMBOL_RE = re.compile(r"[A-Za-z][A-Za-z0-9-]*")

# ----------------------------
# Syntax tree
# ----------------------------
class AST(PClass):
    """Base of the four node variants. Nodes are immutable and compare by structure."""

class Integer(AST):
    value = field(type=int, mandatory=True)

def _valid_symbol_name(name: str):
    return (SYMBOL_RE.fullmatch(name) is not None,
            f"bad symbol name: {name!r}")

class Symbol(AST):
    name = field(type=str, mandatory=True, invariant=_valid_symbol_name)

class Nil(AST):
    """The empty list, written ``()``."""

class Cons(AST):
    car = field(type=AST, mandatory=True)
    cdr = field(type=AST, mandatory=True)

NIL = Nil()

# ----------------------------
# Reader
# ----------------------------
@dataclass(frozen=True)
class SrcPos:
    file: str
    offset: int
    line: int
    col: int

    @classmethod
    def at(cls, src: str, offset: int, file: str = "<stdin>") -> "SrcPos":
        line = src.count("\n", 0, offset) + 1
        col = offset - (src.rfind("\n", 0, offset) + 1)
        return cls(file, offset, line, col)

    def __str__(self) -> str:
        return f"{self.file}:{self.line}:{self.col}"

class ReaderError(Exception):
    def __init__(self, message: str, pos: Optional[SrcPos] = None,
                 expected: Sequence[str] = ()):
        super().__init__(message)
        self.message = message
        self.pos = pos
        self.expected = tuple(expected)

    def __str__(self) -> str:
        if self.pos is None:
            return self.message
        return f"{self.pos}: {self.message}"

WHITESPACE = frozenset(" \n\t")
LETTERS = frozenset(string.ascii_letters)
DIGITS = frozenset(string.digits)
SYMBOL_CHARS = LETTERS | DIGITS | {"-"}

INT_CHUNK = 1000

def digits_value(digits: str) -> int:
    """Value of an ASCII digit run of any length"""
    # int() refuses single strings beyond sys.get_int_max_str_digits()
    value = 0
    for k in range(0, len(digits), INT_CHUNK):
        chunk = digits[k:k + INT_CHUNK]
        value = value * 10 ** len(chunk) + int(chunk)
    return value

@dataclass
class Reader:
    """Recursive-descent reader for dotted-pair S-expressions.

    Each production either returns a node or returns None, leaving the cursor
    wherever it stopped; ``read_form`` restores the cursor before trying the
    next alternative. The furthest position any production failed at, and what
    was expected there, are kept for the error report.
    """
    src: str
    file: str = "<stdin>"
    i: int = 0
    fail_at: int = 0
    expected: Set[str] = dc_field(default_factory=set)

    def eof(self) -> bool:
        return self.i >= len(self.src)

    def peek(self) -> str:
        return "" if self.eof() else self.src[self.i]

    def expect(self, what: str) -> None:
        if self.i > self.fail_at:
            self.fail_at = self.i
            self.expected = {what}
        elif self.i == self.fail_at:
            self.expected.add(what)

    def literal(self, text: str) -> bool:
        if self.src.startswith(text, self.i):
            self.i += len(text)
            return True
        self.expect(repr(text))
        return False

    def skip_space(self) -> None:
        while self.peek() in WHITESPACE:
            self.i += 1

    def read(self) -> AST:
        """Read exactly one expression spanning the whole source."""
        try:
            node = self.read_form()
        except RecursionError:
            raise self.error("nesting too deep", self.i) from None
        if node is not None:
            if self.eof():
                return node
            self.expect("end of input")
        raise self.error()

    def read_form(self) -> Optional[AST]:
        start = self.i
        alternatives: Sequence[Callable[[], Optional[AST]]] = (
            self.read_cons, self.read_integer, self.read_nil, self.read_symbol)
        for production in alternatives:
            node = production()
            if node is not None:
                return node
            self.i = start
        return None

    def read_cons(self) -> Optional[Cons]:
        if not self.literal("("):
            return None
        self.skip_space()
        car = self.read_form()
        if car is None:
            return None
        self.skip_space()
        if not self.literal("."):
            return None
        self.skip_space()
        cdr = self.read_form()
        if cdr is None:
            return None
        self.skip_space()
        if not self.literal(")"):
            return None
        return Cons(car=car, cdr=cdr)

    def read_nil(self) -> Optional[Nil]:
        return NIL if self.literal("()") else None

    def read_integer(self) -> Optional[Integer]:
        start = self.i
        if self.peek() == "-":
            self.i += 1
        digits = self.i
        while self.peek() in DIGITS:
            self.i += 1
        if self.i == digits:
            self.expect("digit" if digits > start else "integer")
            return None
        value = digits_value(self.src[digits:self.i])
        return Integer(value=-value if digits > start else value)

    def read_symbol(self) -> Optional[Symbol]:
        if self.peek() not in LETTERS:
            self.expect("symbol")
            return None
        start = self.i
        self.i += 1
        while self.peek() in SYMBOL_CHARS:
            self.i += 1
        return Symbol(name=self.src[start:self.i])

    def error(self, message: Optional[str] = None,
              offset: Optional[int] = None) -> ReaderError:
        if offset is None:
            offset = self.fail_at
        expected = sorted(self.expected) if offset == self.fail_at else []
        if message is None:
            found = ("end of input" if offset >= len(self.src)
                     else repr(self.src[offset]))
            message = f"unexpected {found}"
            if expected:
                message += ", expected " + " or ".join(expected)
        pos = SrcPos.at(self.src, offset, self.file)
        logger.debug("read failed at %s: %s", pos, message)
        return ReaderError(message, pos, expected)

def read(text: str, file: str = "<stdin>") -> AST:
    """Parse ``text`` as one S-expression, raising ReaderError on any mismatch."""
    return Reader(text, file).read()
