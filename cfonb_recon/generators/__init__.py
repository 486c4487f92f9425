"""Synthetic statement data generators."""

from cfonb_recon.generators.base import BaseGenerator
from cfonb_recon.generators.statement import (
    AccountKey,
    ExpectedPaymentGenerator,
    MovementSpec,
    StatementGenerator,
)

__all__ = [
    "AccountKey",
    "BaseGenerator",
    "ExpectedPaymentGenerator",
    "MovementSpec",
    "StatementGenerator",
]
