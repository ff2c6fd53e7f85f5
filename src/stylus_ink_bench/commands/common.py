"""Options and error reporting shared by the commands."""

from __future__ import annotations

import sys
from typing import NoReturn, Optional

import click

from ..config import (
    DEFAULT_RPC_URL,
    RECEIPT_POLL_INTERVAL,
    RECEIPT_TIMEOUT,
    RPC_TIMEOUT,
    RPC_URL_ENV,
    load_private_key,
)
from ..errors import InkBenchError, format_cause_chain
from ..chain.rpc import RpcClient

rpc_option = click.option(
    "-r",
    "--rpc",
    "rpc_url",
    envvar=RPC_URL_ENV,
    default=DEFAULT_RPC_URL,
    show_default=True,
    help="Ethereum client RPC",
)
key_option = click.option(
    "-k",
    "--key",
    default=None,
    help="Private key of the sender (default: PRIVATE_KEY from env or .env)",
)
rpc_timeout_option = click.option(
    "--rpc-timeout",
    default=RPC_TIMEOUT,
    type=float,
    show_default=True,
    help="Seconds per RPC request",
)
receipt_timeout_option = click.option(
    "--timeout",
    "receipt_timeout",
    default=RECEIPT_TIMEOUT,
    type=float,
    show_default=True,
    help="Seconds to wait for the transaction receipt",
)
poll_interval_option = click.option(
    "--poll-interval",
    default=RECEIPT_POLL_INTERVAL,
    type=float,
    show_default=True,
    help="Seconds between receipt polls",
)


def make_endpoint(rpc_url: str, rpc_timeout: float = RPC_TIMEOUT) -> RpcClient:
    return RpcClient(url=rpc_url, timeout=rpc_timeout)


def resolve_key(key: Optional[str]) -> str:
    return key if key else load_private_key()


def fail(exc: InkBenchError) -> NoReturn:
    """Print the cause chain and exit with the error's exit code."""
    click.secho(f"Error: {format_cause_chain(exc)}", fg="red", err=True)
    sys.exit(exc.exit_code)
