"""
Hostio trace model.

``stylusTracer`` reports each host I/O made by a Stylus program as a JSON
object; calls into other contracts carry their own nested ``steps``::

    {
      "name": "storage_load_bytes32",
      "args": "0x...", "outs": "0x...",
      "startInk": 846790, "endInk": 832030,
      "address": "0x...",            # optional
      "steps": [ ...same shape... ]  # optional
    }
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from ..errors import TraceDeserializationError
from ..utils import hex_to_bytes

U64_MAX = 2 ** 64 - 1


def _require_str(payload: dict[str, Any], key: str) -> str:
    if key not in payload:
        raise TraceDeserializationError(f"missing field {key!r}")
    value = payload[key]
    if not isinstance(value, str):
        raise TraceDeserializationError(f"field {key!r} must be a string, got {value!r}")
    return value


def _require_u64(payload: dict[str, Any], key: str) -> int:
    if key not in payload:
        raise TraceDeserializationError(f"missing field {key!r}")
    value = payload[key]
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= U64_MAX:
        raise TraceDeserializationError(f"field {key!r} must be a u64, got {value!r}")
    return value


@dataclass(frozen=True)
class HostioTraceNode:
    name: str
    args: str
    outs: str
    start_ink: int
    end_ink: int
    address: Optional[str] = None
    steps: Optional[tuple["HostioTraceNode", ...]] = None

    @property
    def args_bytes(self) -> bytes:
        return hex_to_bytes(self.args)

    @property
    def outs_bytes(self) -> bytes:
        return hex_to_bytes(self.outs)

    @property
    def ink_used(self) -> int:
        return self.start_ink - self.end_ink

    @classmethod
    def from_dict(cls, payload: Any) -> "HostioTraceNode":
        if not isinstance(payload, dict):
            raise TraceDeserializationError(f"trace entry must be an object, got {payload!r}")

        address = payload.get("address")
        if address is not None and not isinstance(address, str):
            raise TraceDeserializationError(f"field 'address' must be a string, got {address!r}")

        raw_steps = payload.get("steps")
        steps: Optional[tuple[HostioTraceNode, ...]] = None
        if raw_steps is not None:
            if not isinstance(raw_steps, list):
                raise TraceDeserializationError(
                    f"field 'steps' must be a list, got {raw_steps!r}"
                )
            steps = tuple(cls.from_dict(step) for step in raw_steps)

        return cls(
            name=_require_str(payload, "name"),
            args=_require_str(payload, "args"),
            outs=_require_str(payload, "outs"),
            start_ink=_require_u64(payload, "startInk"),
            end_ink=_require_u64(payload, "endInk"),
            address=address,
            steps=steps,
        )

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "name": self.name,
            "args": self.args,
            "outs": self.outs,
            "startInk": self.start_ink,
            "endInk": self.end_ink,
        }
        if self.address is not None:
            result["address"] = self.address
        if self.steps is not None:
            result["steps"] = [step.to_dict() for step in self.steps]
        return result


def parse_hostio_trace(result: Any) -> list[HostioTraceNode]:
    """
    Deserialize a ``stylusTracer`` result into trace nodes.

    Raises:
        TraceDeserializationError: If the result does not match the schema
    """
    if not isinstance(result, list):
        raise TraceDeserializationError(f"hostio trace must be a list, got {type(result).__name__}")
    nodes = []
    for index, entry in enumerate(result):
        try:
            nodes.append(HostioTraceNode.from_dict(entry))
        except TraceDeserializationError as exc:
            raise TraceDeserializationError(f"invalid trace entry {index}") from exc
    return nodes


def dump_hostio_trace(nodes: list[HostioTraceNode]) -> list[dict[str, Any]]:
    return [node.to_dict() for node in nodes]
