"""Reconciliation scenario: a multi-account statement file with a known outcome."""

import logging
import random
from dataclasses import dataclass, field
from datetime import date, timedelta
from decimal import Decimal

from cfonb_recon.generators.statement import (
    AccountKey,
    ExpectedPaymentGenerator,
    MovementSpec,
    StatementGenerator,
)
from cfonb_recon.models.payment import ExpectedPayment

logger = logging.getLogger(__name__)


@dataclass
class ScenarioData:
    """Generated file, expected payments, and what reconciling them must give."""

    content: str
    expected_payments: list[ExpectedPayment]
    reference_date: date
    account_ids: list[str] = field(default_factory=list)
    statement_count: int = 0
    closing_balances: dict[str, Decimal] = field(default_factory=dict)
    movements: dict[str, list[MovementSpec]] = field(default_factory=dict)
    expected_matched: int = 0
    expected_unmatched: int = 0

    def clock(self) -> date:
        """Century provider pinned to the scenario's reference date."""
        return self.reference_date


class ReconciliationScenario:
    """Generate statements for several accounts over several days.

    This scenario creates:
    - ``num_accounts`` accounts with one statement per day each
    - statements of different accounts interleaved in the file
    - one expected payment per credit, except for a share of credits
      left without any (``unmatched_rate``)
    - decoy expected payments that match nothing
    """

    def __init__(
        self,
        num_accounts: int = 3,
        statements_per_account: int = 2,
        movements_per_statement: int = 5,
        unmatched_rate: float = 0.2,
        num_decoys: int = 3,
        reference_date: date | None = None,
        seed: int | None = None,
    ) -> None:
        """Initialize the scenario.

        Parameters
        ----------
        num_accounts : int
            Number of distinct accounts.
        statements_per_account : int
            Statements (days) per account.
        movements_per_statement : int
            Movements in each statement.
        unmatched_rate : float
            Share of credits without an expected payment (0.0 to 1.0).
        num_decoys : int
            Expected payments that match no movement.
        reference_date : date | None
            Date of the last statement, defaults to today.
        seed : int | None
            Random seed for reproducibility.
        """
        self.num_accounts = num_accounts
        self.statements_per_account = statements_per_account
        self.movements_per_statement = movements_per_statement
        self.unmatched_rate = unmatched_rate
        self.num_decoys = num_decoys
        self.reference_date = reference_date or date.today()
        self.seed = seed

        self._statement_gen = StatementGenerator(seed=seed)
        self._payment_gen = ExpectedPaymentGenerator(seed=seed)

    def generate(self) -> ScenarioData:
        """Generate the statement file and expected payments.

        Returns
        -------
        ScenarioData
            File content with the outcome reconciling it must produce.
        """
        logger.info(
            "Starting reconciliation scenario: %d accounts, %d statements each, %.0f%% unmatched",
            self.num_accounts,
            self.statements_per_account,
            self.unmatched_rate * 100,
        )

        accounts: list[AccountKey] = []
        for _ in range(self.num_accounts):
            account = self._statement_gen.generate_account()
            while account.account_id in {a.account_id for a in accounts}:
                account = self._statement_gen.generate_account()
            accounts.append(account)

        data = ScenarioData(content="", expected_payments=[], reference_date=self.reference_date)
        balances = {
            account.account_id: Decimal(random.randint(0, 10_000_000)).scaleb(-2) for account in accounts
        }
        lines: list[str] = []

        first_day = self.reference_date - timedelta(days=self.statements_per_account - 1)
        for day in range(self.statements_per_account):
            as_of = first_day + timedelta(days=day)
            for account in accounts:
                statement_lines, movements, closing = self._statement_gen.generate_statement(
                    account,
                    balances[account.account_id],
                    as_of,
                    self.movements_per_statement,
                )
                lines.extend(statement_lines)
                balances[account.account_id] = closing
                data.movements.setdefault(account.account_id, []).extend(movements)
                data.statement_count += 1
                self._expect_payments(movements, data)

        for _ in range(self.num_decoys):
            data.expected_payments.insert(random.randint(0, len(data.expected_payments)), self._payment_gen.decoy())

        data.content = "\n".join(lines) + "\n"
        data.account_ids = [account.account_id for account in accounts]
        data.closing_balances = balances

        logger.info(
            "Scenario complete: %d statements, %d expected payments, %d credits left unmatched",
            data.statement_count,
            len(data.expected_payments),
            data.expected_unmatched,
        )
        return data

    def _expect_payments(self, movements: list[MovementSpec], data: ScenarioData) -> None:
        for movement in movements:
            if not movement.is_credit:
                continue
            if random.random() < self.unmatched_rate:
                data.expected_unmatched += 1
            else:
                data.expected_payments.append(self._payment_gen.for_movement(movement))
                data.expected_matched += 1
