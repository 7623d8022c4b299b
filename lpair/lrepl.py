from __future__ import annotations
import logging
import os
import sys
from typing import List, Optional

from .lreader import AST, Cons, Integer, Nil, ReaderError, Symbol, read
from .symbol_table import collect_symbols, complete

logger = logging.getLogger(__name__)

HISTORY_LENGTH = 1000

def history_file() -> str:
    return os.environ.get("LPAIR_HISTORY",
                          os.path.join(os.path.expanduser("~"), ".lpair_history"))

# Set up readline for line editing
try:
    import readline

    def load_history():
        try:
            readline.read_history_file(history_file())
        except OSError:
            pass
        readline.set_history_length(HISTORY_LENGTH)

    def save_history():
        try:
            readline.write_history_file(history_file())
        except (PermissionError, OSError):
            pass

    class SymbolCompleter:
        def __init__(self):
            self.matches: List[str] = []

        def complete(self, text, state):
            if state == 0:
                self.matches = complete(text)
            if state < len(self.matches):
                return self.matches[state]
            return None

    def setup_completer():
        readline.parse_and_bind("tab: complete")
        readline.set_completer(SymbolCompleter().complete)

except ImportError:
    # readline not available (e.g., on Windows)
    def load_history():
        pass

    def save_history():
        pass

    def setup_completer():
        pass

BANNER = """Dotted-pair S-expression reader. Forms: integers, symbols, (), (car . cdr).
Each input is read into a syntax tree and printed. Ctrl-D to exit.
"""

def paren_depth(text: str) -> int:
    return text.count("(") - text.count(")")

def log_level() -> int:
    """Level named by LPAIR_LOG_LEVEL, WARNING when unset or unknown"""
    name = os.environ.get("LPAIR_LOG_LEVEL", "WARNING").upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.WARNING

INT_CHUNK = 1000

def int_text(value: int) -> str:
    try:
        return str(value)
    except ValueError:
        # str() refuses ints beyond sys.get_int_max_str_digits()
        sign = "-" if value < 0 else ""
        value = abs(value)
        chunks: List[str] = []
        while value:
            value, rem = divmod(value, 10 ** INT_CHUNK)
            chunks.append(str(rem).zfill(INT_CHUNK))
        return sign + "".join(reversed(chunks)).lstrip("0")

def render(node: AST) -> str:
    """Debug view of a tree, in the nodes' repr form, without recursion"""
    out: List[str] = []
    stack: List[object] = [node]
    while stack:
        item = stack.pop()
        if isinstance(item, str):
            out.append(item)
        elif isinstance(item, Cons):
            stack.extend([")", item.cdr, ", cdr=", item.car, "Cons(car="])
        elif isinstance(item, Integer):
            out.append(f"Integer(value={int_text(item.value)})")
        elif isinstance(item, Symbol):
            out.append(f"Symbol(name={item.name!r})")
        elif isinstance(item, Nil):
            out.append("Nil()")
        else:
            raise TypeError(f"not a syntax tree node: {item!r}")
    return "".join(out)

def read_file(path: str) -> AST:
    """Read the single expression stored in a UTF-8 file"""
    with open(path, "r", encoding="utf-8") as fh:
        src = fh.read()
    return read(src.strip(), file=path)

def run_repl():
    print(BANNER)
    load_history()
    setup_completer()

    buf = ""; prompt = "> "
    try:
        while True:
            try:
                line = input(prompt)
            except EOFError:
                print(); break
            buf += line + "\n"
            if paren_depth(buf) > 0:
                prompt = "… "; continue
            prompt = "> "
            src = buf.strip(); buf = ""
            if not src:
                continue
            try:
                node = read(src)
            except ReaderError as ex:
                print(f"! Parse error: {ex}")
                continue
            collect_symbols(node)
            print(render(node))
    finally:
        save_history()

def main(argv: Optional[List[str]] = None) -> int:
    if argv is None:
        argv = sys.argv[1:]
    logging.basicConfig(level=log_level())
    if not argv:
        run_repl()
        return 0
    path = argv[0]
    try:
        node = read_file(path)
    except ReaderError as ex:
        print(f"! Parse error: {ex}", file=sys.stderr)
        return 1
    except (OSError, UnicodeDecodeError) as ex:
        print(f"! Error: {ex}", file=sys.stderr)
        return 1
    logger.info("read %s", path)
    print(render(node))
    return 0

if __name__ == "__main__":
    sys.exit(main())
