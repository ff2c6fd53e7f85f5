"""
Human-readable function signature parser.

Accepts the forms people type on a command line::

    number()
    setNumber(uint)
    function transfer(address to, uint256 amount) external returns (bool)
    submit((uint256,bytes32)[] calldata orders)

Parameter names, data locations, visibility / mutability keywords and the
``returns`` clause are accepted and discarded where they do not affect the
selector. Types are kept as written (``uint`` stays ``uint``); resolution
to canonical ABI types happens in ``calldata``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from ..errors import SignatureParseError

_NAME_RE = re.compile(r"[A-Za-z_$][A-Za-z0-9_$]*")
_ELEMENTARY_RE = re.compile(r"[A-Za-z][A-Za-z0-9]*")
_ARRAY_SUFFIX_RE = re.compile(r"(?:\s*\[\s*\d*\s*\])*")
_PAYABLE_RE = re.compile(r"\s+payable\b")

_DATA_LOCATIONS = {"memory", "calldata", "storage"}
_MODIFIERS = {
    "external",
    "public",
    "internal",
    "private",
    "view",
    "pure",
    "payable",
    "nonpayable",
    "virtual",
    "override",
}


@dataclass(frozen=True)
class Param:
    type: str
    name: str = ""

    def __str__(self) -> str:
        return f"{self.type} {self.name}" if self.name else self.type


@dataclass(frozen=True)
class FunctionSignature:
    name: str
    inputs: tuple[Param, ...]
    outputs: tuple[Param, ...] = ()

    def __str__(self) -> str:
        return f"{self.name}({','.join(p.type for p in self.inputs)})"


def split_top_level(text: str, sep: str = ",") -> list[str]:
    """
    Split ``text`` on ``sep`` outside of brackets, parentheses and
    double-quoted strings. Backslash escapes the next character inside
    quotes.

    Raises:
        ValueError: On unbalanced brackets or an unterminated string
    """
    parts: list[str] = []
    depth = 0
    in_quotes = False
    escaped = False
    start = 0
    for i, ch in enumerate(text):
        if in_quotes:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_quotes = False
            continue
        if ch == '"':
            in_quotes = True
        elif ch in "([":
            depth += 1
        elif ch in ")]":
            depth -= 1
            if depth < 0:
                raise ValueError(f"unbalanced {ch!r} at offset {i}")
        elif ch == sep and depth == 0:
            parts.append(text[start:i])
            start = i + 1
    if in_quotes:
        raise ValueError("unterminated string")
    if depth != 0:
        raise ValueError("unbalanced brackets")
    parts.append(text[start:])
    return parts


def _closing_paren(text: str, open_idx: int) -> int:
    depth = 0
    for i in range(open_idx, len(text)):
        if text[i] == "(":
            depth += 1
        elif text[i] == ")":
            depth -= 1
            if depth == 0:
                return i
    raise ValueError("missing closing parenthesis")


def _parse_type(text: str) -> tuple[str, str]:
    """Consume one type from the start of ``text``; return (type, remainder)."""
    text = text.lstrip()
    if text.startswith("tuple("):
        text = text[len("tuple"):]

    if text.startswith("("):
        close = _closing_paren(text, 0)
        inner = text[1:close]
        components = _parse_params(inner) if inner.strip() else []
        base = "(" + ",".join(p.type for p in components) + ")"
        rest = text[close + 1:]
    else:
        match = _ELEMENTARY_RE.match(text)
        if match is None:
            raise ValueError(f"expected a type at {text!r}")
        base = match.group(0)
        rest = text[match.end():]
        if base == "address":
            payable = _PAYABLE_RE.match(rest)
            if payable is not None:
                rest = rest[payable.end():]

    suffix = _ARRAY_SUFFIX_RE.match(rest)
    arrays = re.sub(r"\s+", "", suffix.group(0))
    return base + arrays, rest[suffix.end():]


def _parse_param(text: str) -> Param:
    if not text.strip():
        raise ValueError("empty parameter")
    type_str, rest = _parse_type(text)
    words = rest.split()
    if words and words[0] in _DATA_LOCATIONS:
        words = words[1:]
    if len(words) > 1:
        raise ValueError(f"unexpected tokens after parameter: {' '.join(words)!r}")
    name = ""
    if words:
        if not _NAME_RE.fullmatch(words[0]):
            raise ValueError(f"invalid parameter name {words[0]!r}")
        name = words[0]
    return Param(type=type_str, name=name)


def _parse_params(text: str) -> list[Param]:
    if not text.strip():
        return []
    return [_parse_param(part) for part in split_top_level(text)]


def _parse_trailer(text: str) -> tuple[Param, ...]:
    outputs: tuple[Param, ...] = ()
    rest = text.strip()
    while rest:
        if rest.startswith("returns"):
            rest = rest[len("returns"):].lstrip()
            if not rest.startswith("("):
                raise ValueError("expected '(' after returns")
            close = _closing_paren(rest, 0)
            outputs = tuple(_parse_params(rest[1:close]))
            rest = rest[close + 1:].lstrip()
            continue
        word = rest.split(None, 1)
        if word[0] not in _MODIFIERS:
            raise ValueError(f"unexpected {word[0]!r}")
        rest = word[1] if len(word) > 1 else ""
    return outputs


def parse_signature(signature: str) -> FunctionSignature:
    """
    Parse a function signature into its name, inputs and outputs.

    Raises:
        SignatureParseError: If the text is not a well-formed signature
    """
    text = signature.strip()
    if text.startswith("function") and text[len("function"):][:1].isspace():
        text = text[len("function"):].lstrip()

    match = _NAME_RE.match(text)
    if match is None:
        raise SignatureParseError(signature, "expected a function name")
    rest = text[match.end():].lstrip()
    if not rest.startswith("("):
        raise SignatureParseError(signature, "expected '(' after the function name")

    try:
        close = _closing_paren(rest, 0)
        inputs = _parse_params(rest[1:close])
        outputs = _parse_trailer(rest[close + 1:])
    except ValueError as exc:
        raise SignatureParseError(signature, str(exc)) from exc

    return FunctionSignature(name=match.group(0), inputs=tuple(inputs), outputs=outputs)
