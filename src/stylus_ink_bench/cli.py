"""
stylus-ink-bench CLI

Measures the ink a Stylus program spends on a call, using the node's
stylusTracer.

Commands:
  run       - Send one call and print its ink / gas
  calldata  - Print calldata for a signature and arguments
  trace     - Ink of an already mined transaction
  compare   - Table of methods x programs from a JSON plan
"""

from __future__ import annotations

import sys

import click

from .log import setup_logging

# ============ Constants ============

VERSION = "0.1.0"


# ============ Main CLI Group ============


@click.group()
@click.version_option(version=VERSION, prog_name="stylus-ink-bench")
@click.option("-v", "--verbose", is_flag=True, help="Log RPC traffic and pipeline steps")
@click.option("-q", "--quiet", is_flag=True, help="Suppress log output")
def cli(verbose: bool, quiet: bool) -> None:
    """Benchmark the ink usage of Stylus programs."""
    setup_logging(verbose=verbose, quiet=quiet)


# ============ Commands ============

from .commands.run import run
from .commands.calldata import calldata
from .commands.trace import trace
from .commands.compare import compare

cli.add_command(run)
cli.add_command(calldata)
cli.add_command(trace)
cli.add_command(compare)


# ============ Entry Points ============


def main() -> None:
    """stylus-ink-bench entry point."""
    cli()


if __name__ == "__main__":
    sys.exit(main())
