__all__ = [
    # Pipeline
    "generate_calldata",
    "send_tx",
    "get_ink_usage",
    "measure_ink",
    # Comparison harness
    "BenchPlan",
    "ComparisonTable",
    "MethodCall",
    "run_comparison",
    # Endpoint
    "Endpoint",
    "RpcClient",
    # Trace model
    "HostioTraceNode",
    "parse_hostio_trace",
    "ink_used",
    "ink_to_gas",
    "gas_summary",
    # Errors
    "InkBenchError",
    "CalldataError",
    "TransactionError",
    "TraceError",
    "format_cause_chain",
]

from .abi.calldata import generate_calldata
from .bench import BenchPlan, ComparisonTable, MethodCall, measure_ink, run_comparison
from .chain.rpc import Endpoint, RpcClient
from .chain.tx import send_tx
from .errors import (
    CalldataError,
    InkBenchError,
    TraceError,
    TransactionError,
    format_cause_chain,
)
from .trace.hostio import HostioTraceNode, parse_hostio_trace
from .trace.ink import gas_summary, get_ink_usage, ink_to_gas, ink_used
