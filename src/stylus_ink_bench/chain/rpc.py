"""
JSON-RPC endpoint access.

``Endpoint`` is the capability the pipeline needs from a node: nonce and
chain-id queries, submit-and-confirm, and a raw call whose body the caller
parses itself. ``RpcClient`` implements it over HTTP with httpx; tests
substitute an in-memory implementation.
"""

from __future__ import annotations

import json
import time
from dataclasses import dataclass
from typing import Any, Optional, Protocol, Union

import httpx

from ..config import RECEIPT_POLL_INTERVAL, RECEIPT_TIMEOUT, RPC_TIMEOUT
from ..errors import (
    ConfirmationError,
    ConfirmationTimeoutError,
    EndpointError,
    RpcError,
    RpcResponseError,
    RpcTransportError,
    SubmissionError,
)
from ..log import get_logger
from ..utils import parse_quantity

logger = get_logger(__name__)

RequestId = Union[int, str]


class Endpoint(Protocol):
    def get_nonce(self, address: str) -> int:
        ...

    def get_chain_id(self) -> int:
        ...

    def submit_and_confirm(
        self,
        raw_tx: str,
        timeout: float = RECEIPT_TIMEOUT,
        poll_interval: float = RECEIPT_POLL_INTERVAL,
    ) -> dict[str, Any]:
        ...

    def raw_call(self, method: str, params: list, request_id: RequestId = 1) -> str:
        ...


@dataclass
class RpcClient:
    url: str
    timeout: float = RPC_TIMEOUT
    transport: Optional[httpx.BaseTransport] = None

    def _post(self, method: str, params: list, request_id: RequestId) -> httpx.Response:
        payload = {
            "jsonrpc": "2.0",
            "method": method,
            "params": params,
            "id": request_id,
        }
        logger.debug("rpc -> %s %s", method, params)

        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                response = client.post(self.url, json=payload)
        except httpx.HTTPError as exc:
            raise RpcTransportError(f"{method} request to {self.url} failed: {exc}") from exc

        logger.debug("rpc <- %s %d %d bytes", method, response.status_code, len(response.content))
        if response.is_error and not response.content:
            raise RpcTransportError(
                f"{method} request to {self.url} failed: HTTP {response.status_code}"
            )
        return response

    def raw_call(self, method: str, params: list, request_id: RequestId = 1) -> str:
        """
        POST a JSON-RPC request and return the response body unparsed.

        An HTTP error status that carries a body still returns the body, so the
        caller sees the node's JSON-RPC error envelope.

        Raises:
            RpcTransportError: Connection failure, timeout, or an error status with no body
        """
        return self._post(method, params, request_id).text

    def call(self, method: str, params: list) -> Any:
        """
        Make a JSON-RPC call.

        Returns:
            Result field from the RPC response

        Raises:
            RpcTransportError: If the request cannot be completed
            RpcResponseError: If the body is not a JSON-RPC response
            RpcError: If the node returned an error object
        """
        response = self._post(method, params, 1)
        try:
            data = json.loads(response.text)
        except ValueError as exc:
            if response.is_error:
                raise RpcTransportError(
                    f"{method} request to {self.url} failed: HTTP {response.status_code}"
                ) from exc
            raise RpcResponseError(f"{method}: response is not JSON") from exc
        if not isinstance(data, dict):
            raise RpcResponseError(f"{method}: response is not a JSON object")

        error = data.get("error")
        if error is not None:
            if isinstance(error, dict):
                raise RpcError(method, error.get("code"), str(error.get("message", error)))
            raise RpcError(method, None, str(error))

        if "result" not in data:
            raise RpcResponseError(f"{method}: response has no result")
        return data["result"]

    def _quantity(self, method: str, params: list) -> int:
        result = self.call(method, params)
        try:
            return parse_quantity(result)
        except ValueError as exc:
            raise RpcResponseError(f"{method}: {exc}") from exc

    def get_nonce(self, address: str) -> int:
        return self._quantity("eth_getTransactionCount", [address, "latest"])

    def get_chain_id(self) -> int:
        return self._quantity("eth_chainId", [])

    def send_raw_transaction(self, raw_tx: str) -> str:
        tx_hash = self.call("eth_sendRawTransaction", [raw_tx])
        if not isinstance(tx_hash, str):
            raise RpcResponseError(f"eth_sendRawTransaction: unexpected result {tx_hash!r}")
        return tx_hash

    def wait_for_receipt(
        self,
        tx_hash: str,
        timeout: float = RECEIPT_TIMEOUT,
        poll_interval: float = RECEIPT_POLL_INTERVAL,
    ) -> dict[str, Any]:
        """
        Poll for a transaction receipt.

        The receipt is fetched at least once, even with a zero timeout.

        Raises:
            ConfirmationTimeoutError: No receipt before the deadline
            ConfirmationError: The receipt query itself failed
        """
        deadline = time.monotonic() + timeout
        while True:
            try:
                receipt = self.call("eth_getTransactionReceipt", [tx_hash])
            except EndpointError as exc:
                raise ConfirmationError(
                    "failed to wait for transaction", tx_hash=tx_hash
                ) from exc
            if receipt is not None:
                if not isinstance(receipt, dict):
                    raise ConfirmationError(
                        f"unexpected receipt for {tx_hash}: {receipt!r}", tx_hash=tx_hash
                    )
                return receipt
            if time.monotonic() >= deadline:
                raise ConfirmationTimeoutError(tx_hash, timeout)
            time.sleep(poll_interval)

    def submit_and_confirm(
        self,
        raw_tx: str,
        timeout: float = RECEIPT_TIMEOUT,
        poll_interval: float = RECEIPT_POLL_INTERVAL,
    ) -> dict[str, Any]:
        """
        Send a signed transaction and wait for its receipt.

        Raises:
            SubmissionError: The node rejected the transaction
            ConfirmationTimeoutError: No receipt before the deadline
            ConfirmationError: The receipt query failed
        """
        try:
            tx_hash = self.send_raw_transaction(raw_tx)
        except EndpointError as exc:
            raise SubmissionError("failed to send transaction") from exc

        logger.info("sent transaction %s", tx_hash)
        return self.wait_for_receipt(tx_hash, timeout=timeout, poll_interval=poll_interval)
