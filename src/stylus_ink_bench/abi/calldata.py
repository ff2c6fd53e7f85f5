"""
Calldata generation from a textual signature and string arguments.

Types are resolved with the eth-abi type grammar and each argument string
is coerced into the Python value eth-abi expects for that type before the
whole argument list is encoded behind the 4-byte selector.
"""

from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation, localcontext
from typing import Any, Sequence

from eth_abi import encode
from eth_abi.exceptions import EncodingError, ParseError
from eth_abi.grammar import ABIType, BasicType, TupleType, normalize, parse
from eth_abi.registry import registry

from ..errors import (
    ArgumentCoercionError,
    ArgumentCountMismatch,
    CalldataEncodingError,
    TypeResolutionError,
)
from ..log import get_logger
from ..utils import hex_to_bytes, keccak256
from .signature import FunctionSignature, Param, parse_signature, split_top_level

logger = get_logger(__name__)

_UNITS = {"wei": 0, "gwei": 9, "ether": 18}
_NUMBER_RE = re.compile(
    r"([+-]?)\s*(0[xX][0-9a-fA-F]+|\d+(?:\.\d+)?)\s*(wei|gwei|ether)?",
)


def resolve_type(param: Param) -> ABIType:
    """
    Resolve a declared parameter type to a concrete eth-abi type.

    Raises:
        TypeResolutionError: If the type is malformed or has no encoder
    """
    try:
        abi_type = parse(normalize(param.type))
        abi_type.validate()
    except (ParseError, ValueError) as exc:
        raise TypeResolutionError(str(param), str(exc)) from exc

    if not registry.has_encoder(abi_type.to_type_str()):
        raise TypeResolutionError(str(param), "unsupported type")
    return abi_type


def selector(signature: FunctionSignature, types: Sequence[ABIType]) -> bytes:
    canonical = f"{signature.name}({','.join(t.to_type_str() for t in types)})"
    return keccak256(canonical.encode("utf-8"))[:4]


def _split_sequence(text: str, open_ch: str, close_ch: str) -> list[str]:
    if not (text.startswith(open_ch) and text.endswith(close_ch)):
        raise ValueError(f"expected {open_ch}...{close_ch}")
    inner = text[1:-1].strip()
    if not inner:
        return []
    return [part.strip() for part in split_top_level(inner)]


def _coerce_int(text: str, bits: int, signed: bool) -> int:
    match = _NUMBER_RE.fullmatch(text.replace("_", ""))
    if match is None:
        raise ValueError(f"not a number: {text!r}")
    sign, digits, unit = match.groups()
    exponent = _UNITS[unit or "wei"]

    if digits[:2].lower() == "0x":
        value = int(digits, 16) * 10 ** exponent
    elif "." in digits:
        with localcontext() as ctx:
            ctx.prec = 100
            scaled = Decimal(digits).scaleb(exponent)
            if scaled != scaled.to_integral_value():
                raise ValueError(f"fractional value: {text!r}")
            value = int(scaled)
    else:
        value = int(digits) * 10 ** exponent

    if sign == "-":
        value = -value

    if signed:
        low, high = -(2 ** (bits - 1)), 2 ** (bits - 1) - 1
    else:
        low, high = 0, 2 ** bits - 1
    if not low <= value <= high:
        raise ValueError(f"{value} out of range for {bits}-bit integer")
    return value


def _coerce_string(text: str) -> str:
    if len(text) >= 2 and text[0] == text[-1] == '"':
        return text[1:-1].replace('\\"', '"')
    return text


def coerce_value(abi_type: ABIType, text: str) -> Any:
    """
    Turn an argument string into the value eth-abi encodes for ``abi_type``.

    A string argument is taken verbatim, surrounding whitespace included.
    Array and tuple items are trimmed when split, so quote a string item to
    keep its padding.

    Raises:
        ValueError: If the text is not a valid literal of that type
    """
    if isinstance(abi_type, BasicType) and abi_type.base == "string" and not abi_type.is_array:
        return _coerce_string(text)

    text = text.strip()

    if abi_type.is_array:
        items = _split_sequence(text, "[", "]")
        dimension = abi_type.arrlist[-1]
        if dimension and len(items) != dimension[0]:
            raise ValueError(f"expected {dimension[0]} items, got {len(items)}")
        item_type = abi_type.item_type
        return [coerce_value(item_type, item) for item in items]

    if isinstance(abi_type, TupleType):
        items = _split_sequence(text, "(", ")")
        if len(items) != len(abi_type.components):
            raise ValueError(
                f"expected {len(abi_type.components)} components, got {len(items)}"
            )
        return tuple(
            coerce_value(component, item)
            for component, item in zip(abi_type.components, items)
        )

    base, sub = abi_type.base, abi_type.sub
    if base in ("uint", "int"):
        return _coerce_int(text, sub, signed=base == "int")
    if base == "bool":
        lowered = text.lower()
        if lowered not in ("true", "false"):
            raise ValueError(f"not a bool: {text!r}")
        return lowered == "true"
    if base == "address":
        data = hex_to_bytes(text)
        if len(data) != 20:
            raise ValueError(f"address must be 20 bytes, got {len(data)}")
        return data
    if base == "bytes":
        data = hex_to_bytes(text)
        if sub is not None and len(data) > sub:
            raise ValueError(f"bytes{sub} holds at most {sub} bytes, got {len(data)}")
        return data
    if base in ("fixed", "ufixed"):
        try:
            return Decimal(text)
        except InvalidOperation as exc:
            raise ValueError(f"not a decimal: {text!r}") from exc

    raise ValueError(f"unsupported type {abi_type.to_type_str()}")


def generate_calldata(signature: str, args: Sequence[str]) -> bytes:
    """
    Parse the method signature and arguments, returning the calldata.

    Args:
        signature: Function signature, e.g. ``"setNumber(uint)"``
        args: One string per parameter, e.g. ``["0xdeadbeef"]``

    Returns:
        4-byte selector followed by the ABI-encoded arguments

    Raises:
        SignatureParseError: Malformed signature
        ArgumentCountMismatch: ``len(args)`` differs from the parameter count
        TypeResolutionError: A parameter type cannot be resolved
        ArgumentCoercionError: An argument does not fit its parameter type
        CalldataEncodingError: eth-abi rejected the coerced values
    """
    func = parse_signature(signature)

    params = func.inputs
    if len(args) != len(params):
        raise ArgumentCountMismatch(expected=len(params), actual=len(args))

    types: list[ABIType] = []
    values: list[Any] = []
    for arg, param in zip(args, params):
        abi_type = resolve_type(param)
        try:
            value = coerce_value(abi_type, arg)
        except ValueError as exc:
            raise ArgumentCoercionError(str(param), arg) from exc
        types.append(abi_type)
        values.append(value)

    try:
        encoded = encode([t.to_type_str() for t in types], values)
    except (EncodingError, ValueError, TypeError) as exc:
        raise CalldataEncodingError("failed to encode input") from exc

    calldata = selector(func, types) + encoded
    logger.debug("calldata for %s: 0x%s", func, calldata.hex())
    return calldata
