"""
Compare - Ink table of several methods across several programs.

The plan file is JSON::

    {
      "programs": {"opt-3": "0xe78b...", "opt-s": "0xc646..."},
      "methods": [
        {"signature": "number()"},
        {"signature": "setNumber(uint)", "args": ["0xdeadbeef"]}
      ]
    }

Every cell costs one transaction from the same sender, sent one after the
other.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import click
from tabulate import tabulate_formats

from ..bench import BenchPlan, MethodCall, run_comparison
from ..errors import InkBenchError
from ..trace.ink import format_gas
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
@click.argument("plan_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@rpc_option
@key_option
@rpc_timeout_option
@receipt_timeout_option
@poll_interval_option
@click.option(
    "--table-format",
    type=click.Choice(tabulate_formats),
    default="grid",
    show_default=True,
    help="tabulate table style",
)
def compare(
    plan_file: Path,
    rpc_url: str,
    key: Optional[str],
    rpc_timeout: float,
    receipt_timeout: float,
    poll_interval: float,
    table_format: str,
) -> None:
    """Measure every method of PLAN_FILE on every program and print a table."""

    def progress(method: MethodCall, program: str, ink: int) -> None:
        click.echo(
            click.style(f"  {method.signature} @ {program}: ", dim=True)
            + format_gas(ink),
            err=True,
        )

    try:
        plan = BenchPlan.from_path(plan_file)
        table = run_comparison(
            make_endpoint(rpc_url, rpc_timeout),
            resolve_key(key),
            plan,
            receipt_timeout=receipt_timeout,
            poll_interval=poll_interval,
            on_result=progress,
        )
    except InkBenchError as exc:
        fail(exc)

    click.echo(table.render(tablefmt=table_format))
