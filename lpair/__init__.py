from __future__ import annotations
from .lreader import AST, Integer, Symbol, Nil, Cons, NIL, SrcPos, Reader, ReaderError, read

__all__ = [
    "AST", "Integer", "Symbol", "Nil", "Cons", "NIL",
    "SrcPos", "Reader", "ReaderError", "read",
]
