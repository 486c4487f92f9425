"""Domain models for statements, accounts and payment matching."""

from cfonb_recon.models.enums import MatchStatus, RecordType
from cfonb_recon.models.payment import (
    ExpectedPayment,
    Matched,
    MatchResult,
    ReconciliationReport,
    Unmatched,
)
from cfonb_recon.models.statement import Account, Balance, Movement, OperationType

__all__ = [
    "Account",
    "Balance",
    "ExpectedPayment",
    "MatchResult",
    "MatchStatus",
    "Matched",
    "Movement",
    "OperationType",
    "ReconciliationReport",
    "RecordType",
    "Unmatched",
]
