"""
Defaults and environment lookup.

The RPC URL and private key can come from the command line, the process
environment, or a ``.env`` file in the working directory. Nothing here ever
writes the key back to disk.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from .errors import ConfigError

# Nitro dev node
DEFAULT_RPC_URL = "http://localhost:8547"

RPC_URL_ENV = "STYLUS_RPC_URL"
PRIVATE_KEY_ENV = "PRIVATE_KEY"
DEFAULT_ENV_FILE = Path(".env")

RPC_TIMEOUT = 30.0
RECEIPT_TIMEOUT = 120.0
RECEIPT_POLL_INTERVAL = 0.5

# Static execution-cost parameters. Measurement only, no fee estimation.
GAS_LIMIT = 30_000_000
MAX_PRIORITY_FEE_PER_GAS = 1_000_000_000  # 1 gwei
MAX_FEE_PER_GAS = 20_000_000_000  # 20 gwei

STYLUS_TRACER = "stylusTracer"
INK_PER_GAS = 10_000


def load_private_key(env_path: Optional[Path] = None) -> str:
    """
    Load the sender's private key from the environment or a .env file.

    Args:
        env_path: Path to .env file (default: ./.env)

    Returns:
        0x-prefixed hex private key

    Raises:
        ConfigError: If PRIVATE_KEY is not set
    """
    env_path = env_path or DEFAULT_ENV_FILE

    if env_path.exists():
        load_dotenv(env_path, override=False)

    private_key = os.environ.get(PRIVATE_KEY_ENV)
    if not private_key:
        raise ConfigError(
            f"{PRIVATE_KEY_ENV} not found. Pass --key or set {PRIVATE_KEY_ENV} "
            f"in the environment or {env_path}"
        )

    if not private_key.startswith("0x"):
        private_key = "0x" + private_key

    return private_key
