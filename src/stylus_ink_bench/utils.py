from __future__ import annotations

from eth_hash.auto import keccak


def keccak256(data: bytes) -> bytes:
    # Keccak-256, not NIST SHA3-256; hashlib.sha3_256 gives different digests.
    return keccak(data)


def strip_0x(value: str) -> str:
    if value[:2] in ("0x", "0X"):
        return value[2:]
    return value


def hex_to_bytes(value: str) -> bytes:
    """Decode an optionally 0x-prefixed hex string. Raises ValueError."""
    digits = strip_0x(value.strip())
    if len(digits) % 2:
        raise ValueError(f"odd-length hex string: {value!r}")
    return bytes.fromhex(digits)


def to_hex(data: bytes) -> str:
    return "0x" + data.hex()


def parse_quantity(value: str) -> int:
    """Parse a JSON-RPC hex quantity such as ``"0x1a"``."""
    if not isinstance(value, str) or not value.startswith("0x"):
        raise ValueError(f"not a hex quantity: {value!r}")
    return int(value, 16)
