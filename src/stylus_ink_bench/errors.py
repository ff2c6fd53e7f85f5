"""
Exceptions for stylus-ink-bench.

Each pipeline stage has its own base class so callers can tell which stage
failed; the CLI maps the base class to a process exit code. Stage errors
wrap their underlying cause with ``raise ... from exc`` and
``format_cause_chain`` renders the whole chain for display.
"""

from __future__ import annotations

from typing import Optional


class InkBenchError(RuntimeError):
    exit_code: int = 1


class ConfigError(InkBenchError):
    exit_code = 1


# ============ Endpoint ============


class EndpointError(InkBenchError):
    pass


class RpcError(EndpointError):
    """The node answered with a JSON-RPC error object."""

    def __init__(self, method: str, code: Optional[int], message: str):
        self.method = method
        self.code = code
        self.rpc_message = message
        super().__init__(f"{method} failed: {message} (code {code})")


class RpcTransportError(EndpointError):
    """The HTTP request could not be completed."""


class RpcResponseError(EndpointError):
    """The HTTP response is not a JSON-RPC envelope."""


# ============ Calldata Encoder ============


class CalldataError(InkBenchError):
    exit_code = 2


class SignatureParseError(CalldataError):
    def __init__(self, signature: str, reason: str):
        self.signature = signature
        self.reason = reason
        super().__init__(f"failed to parse function signature {signature!r}: {reason}")


class ArgumentCountMismatch(CalldataError):
    def __init__(self, expected: int, actual: int):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"mismatch number of arguments (want {expected}; got {actual})"
        )


class TypeResolutionError(CalldataError):
    def __init__(self, param: str, reason: str):
        self.param = param
        super().__init__(f"could not resolve arg: {param}: {reason}")


class ArgumentCoercionError(CalldataError):
    def __init__(self, param: str, argument: str):
        self.param = param
        self.argument = argument
        super().__init__(f"could not parse arg: {param} from {argument!r}")


class CalldataEncodingError(CalldataError):
    pass


# ============ Transaction Submitter ============


class TransactionError(InkBenchError):
    exit_code = 3

    def __init__(self, message: str, tx_hash: Optional[str] = None):
        self.tx_hash = tx_hash
        super().__init__(message)


class InvalidKeyError(TransactionError):
    pass


class NetworkQueryError(TransactionError):
    pass


class SigningError(TransactionError):
    pass


class SubmissionError(TransactionError):
    pass


class ConfirmationTimeoutError(TransactionError):
    def __init__(self, tx_hash: str, timeout: float):
        self.timeout = timeout
        super().__init__(
            f"transaction {tx_hash} not confirmed within {timeout:g}s", tx_hash=tx_hash
        )


class ConfirmationError(TransactionError):
    pass


# ============ Trace Analyzer ============


class TraceError(InkBenchError):
    exit_code = 4


class TraceRequestError(TraceError):
    pass


class ResponseParseError(TraceError):
    pass


class MissingResultError(TraceError):
    pass


class TraceDeserializationError(TraceError):
    pass


class TraceTooShortError(TraceError):
    def __init__(self, length: int, minimum: int):
        self.length = length
        self.minimum = minimum
        super().__init__(
            f"hostio trace is too short ({length} entries; need at least {minimum})"
        )


class InkUnderflowError(TraceError):
    def __init__(self, start_ink: int, end_ink: int):
        self.start_ink = start_ink
        self.end_ink = end_ink
        super().__init__(
            f"malformed hostio trace: end ink {end_ink} exceeds start ink {start_ink}"
        )


# ============ Formatting ============


def format_cause_chain(exc: BaseException) -> str:
    """Render an exception and every ``__cause__`` behind it on one line."""
    parts: list[str] = []
    seen: set[int] = set()
    current: Optional[BaseException] = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        text = str(current) or type(current).__name__
        if not parts or parts[-1] != text:
            parts.append(text)
        current = current.__cause__
    return ": ".join(parts)
