"""
Transaction Submitter - Build, sign, send, and confirm a program call.

Uses eth-account for signing and the ``Endpoint`` capability for every
network interaction. Each call broadcasts a new transaction and consumes
one nonce, so calls from the same key must not overlap.
"""

from __future__ import annotations

from typing import Any

from eth_account.signers.local import LocalAccount
from eth_utils import to_checksum_address

from ..config import (
    GAS_LIMIT,
    MAX_FEE_PER_GAS,
    MAX_PRIORITY_FEE_PER_GAS,
    RECEIPT_POLL_INTERVAL,
    RECEIPT_TIMEOUT,
)
from ..errors import ConfirmationError, EndpointError, NetworkQueryError, SigningError
from ..log import get_logger
from ..utils import parse_quantity, to_hex
from .rpc import Endpoint
from .signer import PrivateKeyInput, get_account

logger = get_logger(__name__)


def build_tx(program: str, calldata: bytes, nonce: int, chain_id: int) -> dict[str, Any]:
    """
    Build an unsigned EIP-1559 transaction calling ``program``.

    Gas limit and fees are fixed; see ``config``.
    """
    return {
        "type": 2,
        "to": program,
        "data": to_hex(calldata),
        "value": 0,
        "nonce": nonce,
        "chainId": chain_id,
        "gas": GAS_LIMIT,
        "maxPriorityFeePerGas": MAX_PRIORITY_FEE_PER_GAS,
        "maxFeePerGas": MAX_FEE_PER_GAS,
    }


def sign_tx(account: LocalAccount, tx: dict[str, Any]) -> str:
    """Sign ``tx`` and return the 0x-prefixed raw envelope."""
    try:
        signed = account.sign_transaction(tx)
    except (TypeError, ValueError) as exc:
        raise SigningError("failed to create transaction") from exc
    return to_hex(bytes(signed.raw_transaction))


def send_tx(
    endpoint: Endpoint,
    private_key: PrivateKeyInput,
    program: str,
    calldata: bytes,
    receipt_timeout: float = RECEIPT_TIMEOUT,
    poll_interval: float = RECEIPT_POLL_INTERVAL,
) -> str:
    """
    Send a transaction calling the program with the given calldata, wait for
    it to be confirmed, and return the transaction hash.

    Args:
        endpoint: Node to query and submit to
        private_key: Sender's 32-byte key (hex or raw bytes)
        program: Address of the deployed program
        calldata: Transaction input
        receipt_timeout: Maximum seconds to wait for the receipt
        poll_interval: Seconds between receipt polls

    Returns:
        0x-prefixed transaction hash from the receipt

    Raises:
        InvalidKeyError: Key is not a valid signing key
        NetworkQueryError: Nonce or chain id query failed
        SigningError: Transaction could not be built or signed
        SubmissionError: Node rejected the transaction
        ConfirmationTimeoutError: No receipt before the deadline
        ConfirmationError: Receipt query failed or the transaction reverted
    """
    account = get_account(private_key)
    sender = account.address

    try:
        to = to_checksum_address(program)
    except (TypeError, ValueError) as exc:
        raise SigningError(f"invalid program address {program!r}") from exc

    try:
        nonce = endpoint.get_nonce(sender)
    except EndpointError as exc:
        raise NetworkQueryError(f"failed to get nonce for {sender}") from exc
    try:
        chain_id = endpoint.get_chain_id()
    except EndpointError as exc:
        raise NetworkQueryError("failed to get chain id") from exc
    logger.info("sender %s nonce %d chain %d", sender, nonce, chain_id)

    raw_tx = sign_tx(account, build_tx(to, calldata, nonce, chain_id))
    receipt = endpoint.submit_and_confirm(
        raw_tx, timeout=receipt_timeout, poll_interval=poll_interval
    )

    tx_hash = receipt.get("transactionHash")
    if not isinstance(tx_hash, str):
        raise ConfirmationError("receipt has no transaction hash")

    status = receipt.get("status")
    if status is not None:
        try:
            succeeded = parse_quantity(status) == 1
        except ValueError as exc:
            raise ConfirmationError(
                f"invalid receipt status {status!r}", tx_hash=tx_hash
            ) from exc
        if not succeeded:
            raise ConfirmationError(f"transaction {tx_hash} reverted", tx_hash=tx_hash)

    logger.info("confirmed %s in block %s", tx_hash, receipt.get("blockNumber"))
    return tx_hash
