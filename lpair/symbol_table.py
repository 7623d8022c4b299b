from __future__ import annotations
from typing import List, Set
import threading

from .lreader import AST, Cons, Symbol

class SymbolTable:
    """Names of the symbols read so far in a session, used for completion"""

    def __init__(self):
        self._names: Set[str] = set()
        self._lock = threading.Lock()

    def add_symbol(self, name: str) -> None:
        with self._lock:
            self._names.add(name)

    def has_symbol(self, name: str) -> bool:
        with self._lock:
            return name in self._names

    def list_symbols(self) -> List[str]:
        """All known names, sorted"""
        with self._lock:
            return sorted(self._names)

    def complete(self, prefix: str) -> List[str]:
        """Known names starting with prefix, sorted"""
        with self._lock:
            return sorted(n for n in self._names if n.startswith(prefix))

    def clear(self) -> None:
        with self._lock:
            self._names.clear()

    def collect_symbols(self, node: AST) -> None:
        """Register every Symbol name in the tree rooted at node"""
        stack = [node]
        while stack:
            node = stack.pop()
            if isinstance(node, Cons):
                stack.append(node.cdr)
                stack.append(node.car)
            elif isinstance(node, Symbol):
                self.add_symbol(node.name)

# Global symbol table instance
_symbol_table = SymbolTable()

def add_symbol(name: str) -> None:
    _symbol_table.add_symbol(name)

def has_symbol(name: str) -> bool:
    return _symbol_table.has_symbol(name)

def list_symbols() -> List[str]:
    return _symbol_table.list_symbols()

def complete(prefix: str) -> List[str]:
    return _symbol_table.complete(prefix)

def clear_symbols() -> None:
    _symbol_table.clear()

def collect_symbols(node: AST) -> None:
    """Register every Symbol name in the tree with the global table"""
    _symbol_table.collect_symbols(node)
