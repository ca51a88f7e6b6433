"""groupcart — shared shopping lists with a favor ledger."""

__version__ = "0.1.0"
