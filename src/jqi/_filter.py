"""A small jq-style filter language.

Supported syntax:
  .            identity
  .foo ."foo"  object field (missing key yields null)
  .[n] .[-n]   array index (out of range yields null)
  .["foo"]     object field, bracket form
  .[a:b]       array or string slice
  .[]          iterate array elements or object values
  ..           recursive descent
  f?           suppress evaluation errors raised by f
  f | g        pipe
  f, g         concatenate outputs
  (f)          grouping
  literals     numbers, strings, true, false, null
  builtins     keys length type values not empty
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Callable

from jqi.errors import QueryCompileError, QueryExecutionError

Node = Callable[[object], list]

_PUNCT = "[]:|,()?"
_BUILTIN_NAMES = ("keys", "length", "type", "values", "not", "empty")
_LITERAL_NAMES = {"true": True, "false": False, "null": None}


@dataclass
class _Token:
    kind: str  # DOT DOTDOT FIELD IDENT STRING NUMBER PUNCT EOF
    text: str
    pos: int
    value: object = None


@dataclass
class Filter:
    """A compiled filter. Calling it runs the filter against one value."""

    source: str
    node: Node

    def __call__(self, value: object) -> list:
        return self.node(value)


def compile_filter(source: str) -> Filter:
    """Compile filter text. Raises QueryCompileError on empty or bad input."""
    if not source.strip():
        raise QueryCompileError("Empty query")
    parser = _Parser(_tokenize(source))
    node = parser.parse_pipe()
    parser.expect_end()
    return Filter(source, node)


def run_filter(source: str, value: object) -> list:
    """Compile and run filter text against value, returning all outputs."""
    return compile_filter(source)(value)


# =====================================================================
# Tokenizer
# =====================================================================


def _is_ident_start(ch: str) -> bool:
    return ch.isalpha() or ch == "_"


def _is_ident_char(ch: str) -> bool:
    return ch.isalnum() or ch == "_"


def _scan_string(src: str, start: int) -> tuple[str, int]:
    """Scan a double-quoted string starting at src[start]. Returns (value, end)."""
    i = start + 1
    while i < len(src):
        ch = src[i]
        if ch == "\\":
            i += 2
            continue
        if ch == '"':
            raw = src[start : i + 1]
            try:
                return json.loads(raw), i + 1
            except json.JSONDecodeError as e:
                raise QueryCompileError(f"invalid string literal {raw}: {e.msg}") from e
        i += 1
    raise QueryCompileError(f"unterminated string at position {start}")


def _scan_number(src: str, start: int) -> tuple[object, int]:
    i = start
    if src[i] == "-":
        i += 1
    while i < len(src) and (src[i].isdigit() or src[i] in ".eE"):
        i += 1
    text = src[start:i]
    try:
        return json.loads(text), i
    except json.JSONDecodeError as e:
        raise QueryCompileError(f"invalid number {text!r}") from e


def _tokenize(src: str) -> list[_Token]:
    tokens: list[_Token] = []
    i = 0
    n = len(src)
    while i < n:
        ch = src[i]
        if ch.isspace():
            i += 1
            continue

        if ch == ".":
            nxt = src[i + 1] if i + 1 < n else ""
            if nxt == ".":
                tokens.append(_Token("DOTDOT", "..", i))
                i += 2
            elif _is_ident_start(nxt):
                j = i + 1
                while j < n and _is_ident_char(src[j]):
                    j += 1
                name = src[i + 1 : j]
                tokens.append(_Token("FIELD", src[i:j], i, name))
                i = j
            elif nxt == '"':
                name, j = _scan_string(src, i + 1)
                tokens.append(_Token("FIELD", src[i:j], i, name))
                i = j
            else:
                tokens.append(_Token("DOT", ".", i))
                i += 1
            continue

        if ch == '"':
            value, j = _scan_string(src, i)
            tokens.append(_Token("STRING", src[i:j], i, value))
            i = j
            continue

        if ch.isdigit() or (ch == "-" and i + 1 < n and src[i + 1].isdigit()):
            value, j = _scan_number(src, i)
            tokens.append(_Token("NUMBER", src[i:j], i, value))
            i = j
            continue

        if _is_ident_start(ch):
            j = i
            while j < n and _is_ident_char(src[j]):
                j += 1
            tokens.append(_Token("IDENT", src[i:j], i))
            i = j
            continue

        if ch in _PUNCT:
            tokens.append(_Token("PUNCT", ch, i))
            i += 1
            continue

        raise QueryCompileError(f"unexpected character {ch!r} at position {i}")

    tokens.append(_Token("EOF", "", n))
    return tokens


# =====================================================================
# Parser
# =====================================================================


class _Parser:
    def __init__(self, tokens: list[_Token]) -> None:
        self.tokens = tokens
        self.pos = 0

    def peek(self) -> _Token:
        return self.tokens[self.pos]

    def advance(self) -> _Token:
        tok = self.tokens[self.pos]
        if tok.kind != "EOF":
            self.pos += 1
        return tok

    def at_punct(self, ch: str) -> bool:
        tok = self.peek()
        return tok.kind == "PUNCT" and tok.text == ch

    def expect_punct(self, ch: str) -> None:
        if not self.at_punct(ch):
            raise self._unexpected(f"expected {ch!r}")
        self.advance()

    def expect_end(self) -> None:
        if self.peek().kind != "EOF":
            raise self._unexpected()

    def _unexpected(self, hint: str = "") -> QueryCompileError:
        tok = self.peek()
        what = "end of input" if tok.kind == "EOF" else repr(tok.text)
        msg = f"syntax error: unexpected {what} at position {tok.pos}"
        if hint:
            msg += f" ({hint})"
        return QueryCompileError(msg)

    # -- grammar -----------------------------------------------------------

    def parse_pipe(self) -> Node:
        left = self.parse_comma()
        while self.at_punct("|"):
            self.advance()
            right = self.parse_comma()
            left = _pipe(left, right)
        return left

    def parse_comma(self) -> Node:
        left = self.parse_postfix()
        while self.at_punct(","):
            self.advance()
            right = self.parse_postfix()
            left = _concat(left, right)
        return left

    def parse_postfix(self) -> Node:
        node = self.parse_primary()
        while True:
            tok = self.peek()
            if tok.kind == "FIELD":
                self.advance()
                node = _pipe(node, _field(tok.value))
            elif tok.kind == "DOT" and self.tokens[self.pos + 1].text == "[":
                self.advance()
            elif self.at_punct("["):
                node = _pipe(node, self.parse_bracket())
            elif self.at_punct("?"):
                self.advance()
                node = _optional(node)
            else:
                return node

    def parse_primary(self) -> Node:
        tok = self.peek()
        if tok.kind == "DOT":
            self.advance()
            return _identity
        if tok.kind == "FIELD":
            self.advance()
            return _field(tok.value)
        if tok.kind == "DOTDOT":
            self.advance()
            return _recurse
        if tok.kind in ("STRING", "NUMBER"):
            self.advance()
            return _literal(tok.value)
        if tok.kind == "IDENT":
            self.advance()
            if tok.text in _LITERAL_NAMES:
                return _literal(_LITERAL_NAMES[tok.text])
            if tok.text in _BUILTIN_NAMES:
                return _BUILTINS[tok.text]
            raise QueryCompileError(f"{tok.text}/0 is not defined")
        if self.at_punct("("):
            self.advance()
            node = self.parse_pipe()
            self.expect_punct(")")
            return node
        raise self._unexpected()

    def parse_bracket(self) -> Node:
        """Parse [...] after a term: iterate, index, key or slice."""
        self.expect_punct("[")
        if self.at_punct("]"):
            self.advance()
            return _iterate

        start = self._bracket_operand()
        if self.at_punct(":"):
            self.advance()
            end = None if self.at_punct("]") else self._bracket_operand()
            self.expect_punct("]")
            return _slice(start, end)
        self.expect_punct("]")
        if isinstance(start, str):
            return _field(start)
        return _index(start)

    def _bracket_operand(self) -> object:
        tok = self.peek()
        if tok.kind == "NUMBER":
            self.advance()
            if not isinstance(tok.value, int):
                raise QueryCompileError(f"index must be an integer, got {tok.text}")
            return tok.value
        if tok.kind == "STRING":
            self.advance()
            return tok.value
        if self.at_punct(":"):
            return None
        raise self._unexpected("expected index, key or slice")


# =====================================================================
# Evaluation
# =====================================================================


def _type_name(value: object) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    return "object"


def _describe(value: object) -> str:
    text = json.dumps(value, ensure_ascii=False)
    if len(text) > 11:
        text = text[:10] + "..."
    return f"{_type_name(value)} ({text})"


def _identity(value: object) -> list:
    return [value]


def _literal(constant: object) -> Node:
    return lambda _value: [constant]


def _pipe(left: Node, right: Node) -> Node:
    def run(value: object) -> list:
        out: list = []
        for item in left(value):
            out.extend(right(item))
        return out

    return run


def _concat(left: Node, right: Node) -> Node:
    return lambda value: left(value) + right(value)


def _optional(inner: Node) -> Node:
    def run(value: object) -> list:
        try:
            return inner(value)
        except QueryExecutionError:
            return []

    return run


def _field(key: str) -> Node:
    def run(value: object) -> list:
        if value is None:
            return [None]
        if isinstance(value, dict):
            return [value.get(key)]
        raise QueryExecutionError(
            f"Cannot index {_type_name(value)} with {json.dumps(key)}"
        )

    return run


def _index(idx: int) -> Node:
    def run(value: object) -> list:
        if value is None:
            return [None]
        if isinstance(value, list):
            if -len(value) <= idx < len(value):
                return [value[idx]]
            return [None]
        raise QueryExecutionError(f"Cannot index {_type_name(value)} with number")

    return run


def _slice(start: object, end: object) -> Node:
    if isinstance(start, str) or isinstance(end, str):
        raise QueryCompileError("slice bounds must be integers")

    def run(value: object) -> list:
        if value is None:
            return [None]
        if isinstance(value, (list, str)):
            return [value[start:end]]
        raise QueryExecutionError(f"Cannot index {_type_name(value)} with object")

    return run


def _iterate(value: object) -> list:
    if isinstance(value, list):
        return list(value)
    if isinstance(value, dict):
        return list(value.values())
    raise QueryExecutionError(f"Cannot iterate over {_describe(value)}")


def _recurse(value: object) -> list:
    out: list = [value]
    if isinstance(value, list):
        for item in value:
            out.extend(_recurse(item))
    elif isinstance(value, dict):
        for item in value.values():
            out.extend(_recurse(item))
    return out


def _keys(value: object) -> list:
    if isinstance(value, dict):
        return [sorted(value.keys())]
    if isinstance(value, list):
        return [list(range(len(value)))]
    raise QueryExecutionError(f"{_describe(value)} has no keys")


def _length(value: object) -> list:
    if value is None:
        return [0]
    if isinstance(value, bool):
        raise QueryExecutionError(f"{_describe(value)} has no length")
    if isinstance(value, (int, float)):
        return [abs(value)]
    return [len(value)]


def _truthy(value: object) -> bool:
    return value is not None and value is not False


_BUILTINS: dict[str, Node] = {
    "keys": _keys,
    "length": _length,
    "type": lambda value: [_type_name(value)],
    "values": lambda value: [value] if value is not None else [],
    "not": lambda value: [not _truthy(value)],
    "empty": lambda _value: [],
}
