from __future__ import annotations

import click

from ..abi.calldata import generate_calldata
from ..errors import InkBenchError
from ..utils import to_hex
from .common import fail


@click.command()
@click.option("-s", "--signature", required=True, help="Function signature")
@click.option("-a", "--args", "args", multiple=True, help="Function argument (repeat per parameter)")
def calldata(signature: str, args: tuple[str, ...]) -> None:
    """Print the calldata for a call without sending anything."""
    try:
        data = generate_calldata(signature, list(args))
    except InkBenchError as exc:
        fail(exc)
    click.echo(to_hex(data))
