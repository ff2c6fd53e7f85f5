"""
Trace - Ink usage of an already mined transaction.

Useful to re-read a measurement without spending another transaction.
"""

from __future__ import annotations

import click

from ..errors import InkBenchError
from ..trace.ink import fetch_hostio_trace, gas_summary, ink_used
from .common import fail, make_endpoint, rpc_option, rpc_timeout_option


@click.command()
@click.argument("tx_hash")
@rpc_option
@rpc_timeout_option
@click.option("--steps", is_flag=True, help="Also list the top-level hostio calls")
def trace(tx_hash: str, rpc_url: str, rpc_timeout: float, steps: bool) -> None:
    """Report the ink used by transaction TX_HASH."""
    try:
        nodes = fetch_hostio_trace(make_endpoint(rpc_url, rpc_timeout), tx_hash)
        ink = ink_used(nodes)
    except InkBenchError as exc:
        fail(exc)

    if steps:
        width = max(len(node.name) for node in nodes)
        for node in nodes:
            click.echo(
                click.style(node.name.ljust(width), fg="cyan")
                + f"  {node.ink_used} ink"
            )
        click.echo()

    click.echo(f"{ink} ink")
    click.echo(gas_summary(ink))
