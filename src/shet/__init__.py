"""SHET token ledger with a composable transfer policy."""

__version__ = "0.1.0"
