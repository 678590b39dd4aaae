"""
Greeter Ledger

A single-owner ledger-state component: a mutable greeting with call
counters, an owner-gated withdrawal and deterministic portfolio queries.
"""

__version__ = "1.0.0"
