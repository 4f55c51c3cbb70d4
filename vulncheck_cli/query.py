"""A small jq-style filter language used to select index records."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from itertools import chain
from typing import Any, Callable, Iterator

Node = Callable[[Any], Iterator[Any]]


class QueryError(ValueError):
    """Raised when a query cannot be parsed or evaluated."""


_LEXEME_PATTERN = re.compile(
    r"""
     (?P<ws>\s+)
    |(?P<str>"(?:[^"\\]|\\.)*")
    |(?P<num>\d+(?:\.\d+)?(?:[eE][+-]?\d+)?)
    |(?P<field>\.[A-Za-z_][A-Za-z0-9_]*)
    |(?P<ident>[A-Za-z_][A-Za-z0-9_]*)
    |(?P<op>==|!=|<=|>=|\.|\[|\]|\(|\)|\||,|;|<|>|\+|-|\*|/|\?)
    """,
    re.VERBOSE,
)


def _lex(text: str) -> list[tuple[str, str]]:
    lexemes = []
    pos = 0
    while pos < len(text):
        match = _LEXEME_PATTERN.match(text, pos)
        if not match:
            raise QueryError(f"unexpected character {text[pos]!r} at {pos}")
        pos = match.end()
        if match.lastgroup != "ws":
            lexemes.append((match.lastgroup, match.group()))
    return lexemes


def _truthy(value: Any) -> bool:
    return value is not None and value is not False


def _type_name(value: Any) -> str:
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


_RANK = {"null": 0, "boolean": 1, "number": 2, "string": 3, "array": 4, "object": 5}


def _order_key(value: Any) -> tuple:
    kind = _type_name(value)
    if kind == "array":
        return (_RANK[kind], [_order_key(v) for v in value])
    if kind == "object":
        keys = sorted(value)
        return (_RANK[kind], keys, [_order_key(value[k]) for k in keys])
    if kind == "null":
        return (0,)
    return (_RANK[kind], value)


def _equal(a: Any, b: Any) -> bool:
    return _order_key(a) == _order_key(b)


def _index(value: Any, key: Any) -> Any:
    if value is None:
        return None
    if isinstance(value, dict) and isinstance(key, str):
        return value.get(key)
    if isinstance(value, list) and isinstance(key, int) and not isinstance(key, bool):
        if -len(value) <= key < len(value):
            return value[key]
        return None
    raise QueryError(f"cannot index {_type_name(value)} with {json.dumps(key)}")


def _iterate(value: Any) -> Iterator[Any]:
    if isinstance(value, list):
        return iter(value)
    if isinstance(value, dict):
        return iter(value.values())
    raise QueryError(f"cannot iterate over {_type_name(value)}")


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _add(a: Any, b: Any) -> Any:
    if a is None:
        return b
    if b is None:
        return a
    if _is_number(a) and _is_number(b):
        return a + b
    if isinstance(a, str) and isinstance(b, str):
        return a + b
    if isinstance(a, list) and isinstance(b, list):
        return a + b
    if isinstance(a, dict) and isinstance(b, dict):
        return {**a, **b}
    raise QueryError(f"{_type_name(a)} and {_type_name(b)} cannot be added")


def _subtract(a: Any, b: Any) -> Any:
    if _is_number(a) and _is_number(b):
        return a - b
    if isinstance(a, list) and isinstance(b, list):
        return [x for x in a if not any(_equal(x, y) for y in b)]
    raise QueryError(f"{_type_name(a)} and {_type_name(b)} cannot be subtracted")


def _multiply(a: Any, b: Any) -> Any:
    if _is_number(a) and _is_number(b):
        return a * b
    raise QueryError(f"{_type_name(a)} and {_type_name(b)} cannot be multiplied")


def _divide(a: Any, b: Any) -> Any:
    if _is_number(a) and _is_number(b):
        if b == 0:
            raise QueryError("division by zero")
        result = a / b
        return int(result) if result == int(result) else result
    raise QueryError(f"{_type_name(a)} and {_type_name(b)} cannot be divided")


_BINARY: dict[str, Callable[[Any, Any], Any]] = {
    "==": _equal,
    "!=": lambda a, b: not _equal(a, b),
    "<": lambda a, b: _order_key(a) < _order_key(b),
    "<=": lambda a, b: _order_key(a) <= _order_key(b),
    ">": lambda a, b: _order_key(a) > _order_key(b),
    ">=": lambda a, b: _order_key(a) >= _order_key(b),
    "+": _add,
    "-": _subtract,
    "*": _multiply,
    "/": _divide,
}


def _binary(op: str, left: Node, right: Node) -> Node:
    func = _BINARY[op]

    def run(value: Any) -> Iterator[Any]:
        for r in right(value):
            for l in left(value):
                yield func(l, r)

    return run


def _length(value: Any) -> int | float:
    if value is None:
        return 0
    if isinstance(value, bool):
        raise QueryError("boolean has no length")
    if _is_number(value):
        return abs(value)
    return len(value)


def _string_search(name: str, finder: Callable[[str, str], int]) -> Callable[[Node], Node]:
    def build(arg: Node) -> Node:
        def run(value: Any) -> Iterator[Any]:
            for needle in arg(value):
                if value is None:
                    yield None
                    continue
                if not isinstance(value, str) or not isinstance(needle, str):
                    raise QueryError(f"{name} cannot be applied to {_type_name(value)}")
                pos = finder(value, needle) if needle else -1
                yield None if pos < 0 else pos

        return run

    return build


def _string_test(name: str, test: Callable[[str, str], bool]) -> Callable[[Node], Node]:
    def build(arg: Node) -> Node:
        def run(value: Any) -> Iterator[Any]:
            for other in arg(value):
                if not isinstance(value, str) or not isinstance(other, str):
                    raise QueryError(f"{name}() requires string inputs")
                yield test(value, other)

        return run

    return build


def _contains(a: Any, b: Any) -> bool:
    if isinstance(a, dict) and isinstance(b, dict):
        return all(k in a and _contains(a[k], v) for k, v in b.items())
    if isinstance(a, list) and isinstance(b, list):
        return all(any(_contains(x, y) for x in a) for y in b)
    if isinstance(a, str) and isinstance(b, str):
        return b in a
    if _type_name(a) == _type_name(b):
        return _equal(a, b)
    raise QueryError(f"{_type_name(a)} and {_type_name(b)} cannot have their containment checked")


def _build_contains(arg: Node) -> Node:
    def run(value: Any) -> Iterator[Any]:
        for other in arg(value):
            yield _contains(value, other)

    return run


def _build_any(arg: Node) -> Node:
    def run(value: Any) -> Iterator[Any]:
        yield any(_truthy(o) for item in _iterate(value) for o in arg(item))

    return run


def _build_all(arg: Node) -> Node:
    def run(value: Any) -> Iterator[Any]:
        yield all(_truthy(o) for item in _iterate(value) for o in arg(item))

    return run


def _build_select(arg: Node) -> Node:
    def run(value: Any) -> Iterator[Any]:
        for o in arg(value):
            if _truthy(o):
                yield value

    return run


def _tostring(value: Any) -> str:
    return value if isinstance(value, str) else json.dumps(value, separators=(",", ":"))


def _downcase(value: Any) -> str:
    if not isinstance(value, str):
        raise QueryError("ascii_downcase input must be a string")
    return "".join(c.lower() if "A" <= c <= "Z" else c for c in value)


def _keys(value: Any) -> list:
    if isinstance(value, dict):
        return sorted(value)
    if isinstance(value, list):
        return list(range(len(value)))
    raise QueryError(f"{_type_name(value)} has no keys")


_NULLARY: dict[str, Callable[[Any], Any]] = {
    "length": _length,
    "not": lambda v: not _truthy(v),
    "tostring": _tostring,
    "ascii_downcase": _downcase,
    "keys": _keys,
}

_UNARY: dict[str, Callable[[Node], Node]] = {
    "any": _build_any,
    "all": _build_all,
    "select": _build_select,
    "index": _string_search("index", str.find),
    "rindex": _string_search("rindex", str.rfind),
    "startswith": _string_test("startswith", str.startswith),
    "endswith": _string_test("endswith", str.endswith),
    "contains": _build_contains,
}


class _Parser:
    def __init__(self, text: str) -> None:
        self.lexemes = _lex(text)
        self.pos = 0

    def peek(self) -> tuple[str, str] | None:
        return self.lexemes[self.pos] if self.pos < len(self.lexemes) else None

    def accept(self, kind: str, text: str | None = None) -> bool:
        lexeme = self.peek()
        if lexeme and lexeme[0] == kind and (text is None or lexeme[1] == text):
            self.pos += 1
            return True
        return False

    def expect(self, kind: str, text: str) -> None:
        if not self.accept(kind, text):
            found = self.peek()
            raise QueryError(f"expected {text!r}, found {found[1] if found else 'end of query'!r}")

    def parse(self) -> Node:
        node = self.pipe()
        if self.peek() is not None:
            raise QueryError(f"unexpected token {self.peek()[1]!r}")
        return node

    def pipe(self) -> Node:
        left = self.comma()
        if self.accept("op", "|"):
            right = self.pipe()
            return lambda v: (o for l in left(v) for o in right(l))
        return left

    def comma(self) -> Node:
        parts = [self.or_()]
        while self.accept("op", ","):
            parts.append(self.or_())
        if len(parts) == 1:
            return parts[0]
        return lambda v: chain.from_iterable(p(v) for p in parts)

    def or_(self) -> Node:
        node = self.and_()
        while self.accept("ident", "or"):
            node = self._logical(node, self.and_(), short=True)
        return node

    def and_(self) -> Node:
        node = self.compare()
        while self.accept("ident", "and"):
            node = self._logical(node, self.compare(), short=False)
        return node

    @staticmethod
    def _logical(left: Node, right: Node, short: bool) -> Node:
        def run(value: Any) -> Iterator[Any]:
            for l in left(value):
                if _truthy(l) == short:
                    yield short
                else:
                    for r in right(value):
                        yield _truthy(r)

        return run

    def compare(self) -> Node:
        left = self.additive()
        lexeme = self.peek()
        if lexeme and lexeme[0] == "op" and lexeme[1] in ("==", "!=", "<", "<=", ">", ">="):
            self.pos += 1
            return _binary(lexeme[1], left, self.additive())
        return left

    def additive(self) -> Node:
        node = self.multiplicative()
        while True:
            lexeme = self.peek()
            if lexeme and lexeme[0] == "op" and lexeme[1] in ("+", "-"):
                self.pos += 1
                node = _binary(lexeme[1], node, self.multiplicative())
            else:
                return node

    def multiplicative(self) -> Node:
        node = self.postfix()
        while True:
            lexeme = self.peek()
            if lexeme and lexeme[0] == "op" and lexeme[1] in ("*", "/"):
                self.pos += 1
                node = _binary(lexeme[1], node, self.postfix())
            else:
                return node

    def postfix(self) -> Node:
        node = self.primary()
        while True:
            lexeme = self.peek()
            if lexeme and lexeme[0] == "field":
                self.pos += 1
                node = self._field(node, lexeme[1][1:])
            elif self.accept("op", "["):
                if self.accept("op", "]"):
                    node = self._iterate(node)
                else:
                    key = self.pipe()
                    self.expect("op", "]")
                    node = self._subscript(node, key)
            elif self.accept("op", "?"):
                node = self._try(node)
            else:
                return node

    @staticmethod
    def _field(node: Node, name: str) -> Node:
        return lambda v: (_index(o, name) for o in node(v))

    @staticmethod
    def _iterate(node: Node) -> Node:
        return lambda v: (item for o in node(v) for item in _iterate(o))

    @staticmethod
    def _subscript(node: Node, key: Node) -> Node:
        return lambda v: (_index(o, k) for k in key(v) for o in node(v))

    @staticmethod
    def _try(node: Node) -> Node:
        def run(value: Any) -> Iterator[Any]:
            try:
                yield from node(value)
            except QueryError:
                return

        return run

    def primary(self) -> Node:
        lexeme = self.peek()
        if lexeme is None:
            raise QueryError("unexpected end of query")
        kind, text = lexeme
        self.pos += 1
        if kind == "op" and text == ".":
            return lambda v: iter((v,))
        if kind == "field":
            name = text[1:]
            return lambda v: iter((_index(v, name),))
        if kind == "str":
            try:
                literal = json.loads(text)
            except json.JSONDecodeError as exc:
                raise QueryError(f"invalid string literal {text}") from exc
            return lambda v: iter((literal,))
        if kind == "num":
            number = float(text)
            literal = int(number) if number.is_integer() and "e" not in text.lower() else number
            return lambda v: iter((literal,))
        if kind == "op" and text == "(":
            node = self.pipe()
            self.expect("op", ")")
            return node
        if kind == "ident":
            return self._call(text)
        raise QueryError(f"unexpected token {text!r}")

    def _call(self, name: str) -> Node:
        constants = {"true": True, "false": False, "null": None}
        if name in constants:
            value = constants[name]
            return lambda v: iter((value,))
        if name == "empty":
            return lambda v: iter(())
        args: list[Node] = []
        if self.accept("op", "("):
            args.append(self.pipe())
            while self.accept("op", ";"):
                args.append(self.pipe())
            self.expect("op", ")")
        if not args and name in _NULLARY:
            func = _NULLARY[name]
            return lambda v: iter((func(v),))
        if len(args) == 1 and name in _UNARY:
            return _UNARY[name](args[0])
        raise QueryError(f"{name}/{len(args)} is not defined")


@dataclass
class Query:
    """A compiled filter; a record matches when the filter yields a true value."""

    text: str
    _node: Node = field(repr=False, compare=False)

    def matches(self, record: Any) -> bool:
        """Return whether ``select(filter)`` keeps the record."""
        return any(_truthy(o) for o in self._node(record))


def compile_query(text: str) -> Query:
    """Parse a filter expression; raises QueryError when it is malformed."""
    return Query(text, _Parser(text).parse())