"""
Trace Analyzer - ink usage of a mined transaction.

The tracer returns the call's hostios as a flat list followed by one
closing frame. The call starts at the first entry's ``startInk`` and ends
at the second-to-last entry's ``endInk``; the last entry is not part of
the call.
"""

from __future__ import annotations

import json
from typing import Sequence

from ..config import INK_PER_GAS, STYLUS_TRACER
from ..errors import (
    EndpointError,
    InkUnderflowError,
    MissingResultError,
    ResponseParseError,
    TraceRequestError,
    TraceTooShortError,
)
from ..chain.rpc import Endpoint
from ..log import get_logger
from .hostio import HostioTraceNode, parse_hostio_trace

logger = get_logger(__name__)

MIN_TRACE_LENGTH = 3


def fetch_hostio_trace(endpoint: Endpoint, tx_hash: str) -> list[HostioTraceNode]:
    """
    Request the ``stylusTracer`` trace of a transaction.

    Raises:
        TraceRequestError: Transport failure
        ResponseParseError: Body is not JSON
        MissingResultError: Response has no ``result`` (e.g. an error envelope)
        TraceDeserializationError: Result does not match the trace schema
    """
    try:
        body = endpoint.raw_call(
            "debug_traceTransaction",
            [tx_hash, {"tracer": STYLUS_TRACER}],
            request_id="1",
        )
    except EndpointError as exc:
        raise TraceRequestError("failed to trace transaction") from exc

    try:
        response = json.loads(body)
    except ValueError as exc:
        raise ResponseParseError("failed to parse json response") from exc

    if not isinstance(response, dict) or "result" not in response:
        message = "failed to get result from response"
        if isinstance(response, dict) and isinstance(response.get("error"), dict):
            message += f": {response['error'].get('message', response['error'])}"
        raise MissingResultError(message)

    return parse_hostio_trace(response["result"])


def ink_used(trace: Sequence[HostioTraceNode]) -> int:
    """
    Ink spent by the traced call.

    Raises:
        TraceTooShortError: Fewer than three entries
        InkUnderflowError: End ink is above start ink
    """
    if len(trace) < MIN_TRACE_LENGTH:
        raise TraceTooShortError(len(trace), MIN_TRACE_LENGTH)

    start_ink = trace[0].start_ink
    end_ink = trace[-2].end_ink
    if end_ink > start_ink:
        raise InkUnderflowError(start_ink, end_ink)
    return start_ink - end_ink


def get_ink_usage(endpoint: Endpoint, tx_hash: str) -> int:
    """Trace the transaction and return the ink usage."""
    ink = ink_used(fetch_hostio_trace(endpoint, tx_hash))
    logger.info("%s used %d ink", tx_hash, ink)
    return ink


def ink_to_gas(ink: int) -> float:
    return ink / INK_PER_GAS


def format_gas(ink: int) -> str:
    """Exact gas figure for display, e.g. ``12345678`` ink -> ``"1234.5678 gas"``."""
    return f"{ink // INK_PER_GAS}.{ink % INK_PER_GAS:04d} gas"


def gas_summary(ink: int) -> str:
    """Approximate gas as printed by ``run``: ``20000`` -> ``"2 gas"``, ``16790`` -> ``"1.679 gas"``."""
    gas = ink_to_gas(ink)
    if gas.is_integer():
        return f"{int(gas)} gas"
    return f"{gas!r} gas"
