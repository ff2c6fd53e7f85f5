"""
ABI - Calldata encoder.

Parses human-readable function signatures and coerces string arguments into
ABI-encoded calldata using eth-abi's type grammar and encoders.
"""
