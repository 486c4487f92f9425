"""CFONB120 bank statement decoding and payment reconciliation."""

from cfonb_recon.reconciliation.pipeline import parse_statement_file, reconcile

__version__ = "0.1.0"

__all__ = ["parse_statement_file", "reconcile", "__version__"]
