"""
Signer derivation from a raw secp256k1 private key.

The key only lives in memory for one invocation; it is never written to
disk or logged.
"""

from __future__ import annotations

from typing import Union

from eth_account import Account
from eth_account.signers.local import LocalAccount

from ..errors import InvalidKeyError
from ..utils import hex_to_bytes

KEY_SIZE = 32

PrivateKeyInput = Union[str, bytes]


def parse_private_key(private_key: PrivateKeyInput) -> bytes:
    """
    Decode a hex (optionally 0x-prefixed) or raw private key into 32 bytes.

    Raises:
        InvalidKeyError: If the key is not 32 bytes of valid hex
    """
    if isinstance(private_key, str):
        try:
            key = hex_to_bytes(private_key)
        except ValueError as exc:
            raise InvalidKeyError("private key is not valid hex") from exc
    else:
        key = bytes(private_key)

    if len(key) != KEY_SIZE:
        raise InvalidKeyError(
            f"private key must be {KEY_SIZE} bytes, got {len(key)}"
        )
    return key


def get_account(private_key: PrivateKeyInput) -> LocalAccount:
    """
    Get an eth-account LocalAccount from a private key.

    Raises:
        InvalidKeyError: If the bytes do not form a valid signing key
    """
    key = parse_private_key(private_key)
    try:
        return Account.from_key(key)
    except ValueError as exc:
        raise InvalidKeyError("failed to create signer") from exc
