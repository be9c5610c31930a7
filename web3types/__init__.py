"""Typed models for Ethereum JSON-RPC data: hashes, blocks, transactions, logs, filters, traces and signatures."""

__version__ = "0.1.0"