"""
Pipeline composition and the comparison-table harness.

``measure_ink`` runs encoder -> submitter -> analyzer once. ``run_comparison``
repeats it for every (method, program) pair one at a time: all calls share
one sender, so each submit-and-confirm cycle has to finish before the next
nonce is fetched.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Optional, Sequence

from tabulate import tabulate

from .abi.calldata import generate_calldata
from .chain.rpc import Endpoint
from .chain.signer import PrivateKeyInput
from .chain.tx import send_tx
from .config import RECEIPT_POLL_INTERVAL, RECEIPT_TIMEOUT
from .errors import ConfigError
from .log import get_logger
from .trace.ink import format_gas, get_ink_usage

logger = get_logger(__name__)


def measure_ink(
    endpoint: Endpoint,
    private_key: PrivateKeyInput,
    program: str,
    signature: str,
    args: Sequence[str],
    receipt_timeout: float = RECEIPT_TIMEOUT,
    poll_interval: float = RECEIPT_POLL_INTERVAL,
) -> int:
    """Call ``signature`` on ``program`` and return the ink it used."""
    calldata = generate_calldata(signature, args)
    tx_hash = send_tx(
        endpoint,
        private_key,
        program,
        calldata,
        receipt_timeout=receipt_timeout,
        poll_interval=poll_interval,
    )
    return get_ink_usage(endpoint, tx_hash)


@dataclass(frozen=True)
class MethodCall:
    signature: str
    args: tuple[str, ...] = ()


@dataclass(frozen=True)
class BenchPlan:
    """
    Programs and methods to compare.

    Attributes:
        programs: (name, address) pairs, one table column each
        methods: One table row each
    """

    programs: tuple[tuple[str, str], ...]
    methods: tuple[MethodCall, ...]

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "BenchPlan":
        programs = payload.get("programs")
        methods = payload.get("methods")
        if not isinstance(programs, dict) or not programs:
            raise ConfigError("bench plan needs a non-empty 'programs' object")
        if not isinstance(methods, list) or not methods:
            raise ConfigError("bench plan needs a non-empty 'methods' list")

        calls = []
        for entry in methods:
            if isinstance(entry, str):
                calls.append(MethodCall(entry))
                continue
            if not isinstance(entry, dict) or not isinstance(entry.get("signature"), str):
                raise ConfigError(f"invalid method entry: {entry!r}")
            args = entry.get("args", [])
            if not isinstance(args, list):
                raise ConfigError(f"'args' must be a list in {entry!r}")
            calls.append(MethodCall(entry["signature"], tuple(str(a) for a in args)))

        return cls(
            programs=tuple((str(name), str(addr)) for name, addr in programs.items()),
            methods=tuple(calls),
        )

    @classmethod
    def from_path(cls, path: Path) -> "BenchPlan":
        try:
            with path.open("r", encoding="utf-8") as f:
                payload = json.load(f)
        except (OSError, ValueError) as exc:
            raise ConfigError(f"cannot read bench plan {path}") from exc
        if not isinstance(payload, dict):
            raise ConfigError(f"bench plan {path} must be a JSON object")
        return cls.from_dict(payload)


@dataclass
class ComparisonTable:
    columns: list[str]
    rows: list[tuple[str, list[int]]] = field(default_factory=list)

    def render(self, tablefmt: str = "grid") -> str:
        headers = ["Method", *self.columns]
        body = [[label, *(format_gas(ink) for ink in cells)] for label, cells in self.rows]
        return tabulate(body, headers=headers, tablefmt=tablefmt, disable_numparse=True)


def run_comparison(
    endpoint: Endpoint,
    private_key: PrivateKeyInput,
    plan: BenchPlan,
    receipt_timeout: float = RECEIPT_TIMEOUT,
    poll_interval: float = RECEIPT_POLL_INTERVAL,
    on_result: Optional[Callable[[MethodCall, str, int], None]] = None,
) -> ComparisonTable:
    """Measure every method against every program, strictly in sequence."""
    table = ComparisonTable(columns=[name for name, _ in plan.programs])
    for method in plan.methods:
        cells = []
        for name, address in plan.programs:
            ink = measure_ink(
                endpoint,
                private_key,
                address,
                method.signature,
                method.args,
                receipt_timeout=receipt_timeout,
                poll_interval=poll_interval,
            )
            logger.info("%s on %s: %d ink", method.signature, name, ink)
            if on_result is not None:
                on_result(method, name, ink)
            cells.append(ink)
        table.rows.append((method.signature, cells))
    return table
