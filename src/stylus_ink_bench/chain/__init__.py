"""
Chain - JSON-RPC endpoint access and transaction submission.

Uses httpx for JSON-RPC and eth-account for signing, without web3.py.
"""
