"""Shared fixtures: an in-memory Endpoint and sample stylusTracer output."""

from __future__ import annotations

import json
from typing import Any, Optional

import pytest

from stylus_ink_bench.utils import hex_to_bytes, keccak256, to_hex

# Nitro dev node prefunded key
DEV_KEY = "0xb6b15c8cb491557369f3c7d2c287b053eb229daa9c22138887752191c9520659"
PROGRAM = "0xe78b46ae59984d11a215b6f84c7de4cb111ef63c"
OTHER_PROGRAM = "0xc6464a3072270a3da814bb0ec2907df935ff839d"
CHAIN_ID = 412346

SAMPLE_TRACE: list[dict[str, Any]] = [
    {
        "name": "user_entrypoint",
        "args": "0x00000024",
        "outs": "0x",
        "startInk": 846790,
        "endInk": 846790,
    },
    {
        "name": "read_args",
        "args": "0x",
        "outs": "0x3fb5c1cb00000000000000000000000000000000000000000000000000000000deadbeef",
        "startInk": 846340,
        "endInk": 845000,
    },
    {
        "name": "storage_flush_cache",
        "args": "0x00",
        "outs": "0x",
        "startInk": 840000,
        "endInk": 830000,
        "address": "0xe78b46ae59984d11a215b6f84c7de4cb111ef63c",
        "steps": [
            {
                "name": "storage_cache_bytes32",
                "args": "0x" + "00" * 64,
                "outs": "0x",
                "startInk": 839000,
                "endInk": 835000,
            }
        ],
    },
    {
        "name": "user_returned",
        "args": "0x",
        "outs": "0x00000000",
        "startInk": 820000,
        "endInk": 820000,
    },
]
SAMPLE_TRACE_INK = 846790 - 830000


def rpc_body(result: Any, request_id: Any = "1") -> str:
    return json.dumps({"jsonrpc": "2.0", "id": request_id, "result": result})


class FakeEndpoint:
    """
    In-memory Endpoint.

    Every call is appended to ``calls``. The nonce advances after each
    submitted transaction like a real node. Set ``*_error`` attributes to
    make the matching operation raise.
    """

    def __init__(
        self,
        nonce: int = 0,
        chain_id: int = CHAIN_ID,
        trace: Optional[list[dict[str, Any]]] = None,
        status: str = "0x1",
    ):
        self.nonce = nonce
        self.chain_id = chain_id
        self.trace_body = rpc_body(SAMPLE_TRACE if trace is None else trace)
        self.status = status
        self.calls: list[tuple[Any, ...]] = []
        self.sent: list[str] = []
        self.nonce_error: Optional[Exception] = None
        self.chain_id_error: Optional[Exception] = None
        self.submit_error: Optional[Exception] = None
        self.raw_call_error: Optional[Exception] = None

    def get_nonce(self, address: str) -> int:
        self.calls.append(("get_nonce", address))
        if self.nonce_error is not None:
            raise self.nonce_error
        return self.nonce

    def get_chain_id(self) -> int:
        self.calls.append(("get_chain_id",))
        if self.chain_id_error is not None:
            raise self.chain_id_error
        return self.chain_id

    def submit_and_confirm(
        self, raw_tx: str, timeout: float = 120.0, poll_interval: float = 0.5
    ) -> dict[str, Any]:
        self.calls.append(("submit_and_confirm", raw_tx, timeout, poll_interval))
        if self.submit_error is not None:
            raise self.submit_error
        self.sent.append(raw_tx)
        self.nonce += 1
        return {
            "transactionHash": to_hex(keccak256(hex_to_bytes(raw_tx))),
            "status": self.status,
            "blockNumber": hex(len(self.sent)),
        }

    def raw_call(self, method: str, params: list, request_id: Any = 1) -> str:
        self.calls.append(("raw_call", method, params, request_id))
        if self.raw_call_error is not None:
            raise self.raw_call_error
        return self.trace_body


@pytest.fixture()
def endpoint() -> FakeEndpoint:
    return FakeEndpoint()
