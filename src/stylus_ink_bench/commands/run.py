"""
Run - Measure the ink used by one program call.

Encodes the call, sends it from the key's address, waits for the receipt
and reads the ink from the transaction's stylusTracer trace.
"""

from __future__ import annotations

from typing import Optional

import click

from ..bench import measure_ink
from ..errors import InkBenchError
from ..trace.ink import gas_summary
from .common import (
    fail,
    key_option,
    make_endpoint,
    poll_interval_option,
    receipt_timeout_option,
    resolve_key,
    rpc_option,
    rpc_timeout_option,
)


@click.command()
@rpc_option
@key_option
@click.option("-p", "--program", required=True, help="Address of the Stylus program")
@click.option("-s", "--signature", required=True, help="Function signature, e.g. 'setNumber(uint)'")
@click.option("-a", "--args", "args", multiple=True, help="Function argument (repeat per parameter)")
@rpc_timeout_option
@receipt_timeout_option
@poll_interval_option
def run(
    rpc_url: str,
    key: Optional[str],
    program: str,
    signature: str,
    args: tuple[str, ...],
    rpc_timeout: float,
    receipt_timeout: float,
    poll_interval: float,
) -> None:
    """Benchmark the ink usage of a Stylus transaction."""
    try:
        ink = measure_ink(
            make_endpoint(rpc_url, rpc_timeout),
            resolve_key(key),
            program,
            signature,
            list(args),
            receipt_timeout=receipt_timeout,
            poll_interval=poll_interval,
        )
    except InkBenchError as exc:
        fail(exc)

    click.echo(f"{ink} ink")
    click.echo(gas_summary(ink))
