"""Expected payments and match results."""

from collections import Counter
from dataclasses import dataclass, field
from decimal import Decimal

from cfonb_recon.models.enums import MatchStatus
from cfonb_recon.models.statement import Account, Movement


@dataclass(frozen=True)
class ExpectedPayment:
    """An invoice awaiting payment, supplied by the invoicing system."""

    invoice_id: str
    from_party: str  # counterparty name, matched as a substring of the label
    amount: Decimal
    ref: str  # matched as a substring of any movement reference


@dataclass
class Matched:
    """A credit movement paired with the expected payment it settles."""

    account_id: str
    expected_payment: ExpectedPayment
    movement: Movement
    status: MatchStatus = field(default=MatchStatus.MATCHED, init=False)


@dataclass
class Unmatched:
    """A credit movement no expected payment accounts for."""

    account_id: str
    movement: Movement
    status: MatchStatus = field(default=MatchStatus.UNMATCHED, init=False)


MatchResult = Matched | Unmatched


@dataclass
class ReconciliationReport:
    """Outcome of one matching pass.

    ``results`` maps each account id to its results in movement order;
    accounts keep the order in which they were reconciled.
    """

    accounts: list[Account] = field(default_factory=list)
    results: dict[str, list[MatchResult]] = field(default_factory=dict)

    @property
    def matched(self) -> list[Matched]:
        """All matched results, account by account."""
        return [r for rs in self.results.values() for r in rs if isinstance(r, Matched)]

    @property
    def unmatched(self) -> list[Unmatched]:
        """All unmatched results, account by account."""
        return [r for rs in self.results.values() for r in rs if isinstance(r, Unmatched)]

    @property
    def reused_expected_payments(self) -> list[str]:
        """Invoice ids matched by more than one movement."""
        counts = Counter(m.expected_payment.invoice_id for m in self.matched)
        return [invoice_id for invoice_id, count in counts.items() if count > 1]
