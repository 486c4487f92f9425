"""Synthetic CFONB120 statement and expected payment generators."""

import random
from dataclasses import dataclass, field
from datetime import date, timedelta
from decimal import Decimal

from cfonb_recon.codecs.fields import compute_account_id, encode_amount, encode_date
from cfonb_recon.generators.base import BaseGenerator
from cfonb_recon.models.enums import RecordType
from cfonb_recon.models.payment import ExpectedPayment
from cfonb_recon.parsing.layout import LAYOUTS, MOVEMENT_DETAIL_LAYOUT, MOVEMENT_LAYOUT


@dataclass(frozen=True)
class AccountKey:
    """Bank, branch and account number of a generated account."""

    bank_code: str
    branch_code: str
    account_number: str

    @property
    def account_id(self) -> str:
        return compute_account_id(self.bank_code, self.branch_code, self.account_number)


@dataclass
class MovementSpec:
    """Content of one movement record and its detail records."""

    label: str
    amount: Decimal
    reference: str
    accounting_date: date
    operation_code: str
    details: list[tuple[str, str]] = field(default_factory=list)

    @property
    def is_credit(self) -> bool:
        return self.amount >= 0


class StatementGenerator(BaseGenerator):
    """Generate valid CFONB120 statements.

    Credits use operation code 05 and debits 06, so every generated
    movement agrees with its operation's direction. Closing balances are
    computed from the movements, so statements always balance.
    """

    CURRENCY = "EUR"
    CREDIT_CODE = "05"
    DEBIT_CODE = "06"
    DETAIL_QUALIFIERS = ["LIB", "RCN", "NPY"]

    def __init__(self, seed: int | None = None, decimal_count: int = 2) -> None:
        super().__init__(seed)
        self.decimal_count = decimal_count
        self._operation_number = 0
        self._reference_number = 0

    def generate_account(self) -> AccountKey:
        """Generate bank, branch and account number components."""
        return AccountKey(
            bank_code=self.fake.numerify("#####"),
            branch_code=self.fake.numerify("#####"),
            account_number=self.fake.numerify("###########"),
        )

    def next_reference(self, prefix: str = "INV") -> str:
        """Return a unique fixed-width reference such as ``INV-000042``."""
        self._reference_number += 1
        return f"{prefix}-{self._reference_number:06d}"

    def generate_movement(self, accounting_date: date, is_credit: bool | None = None) -> MovementSpec:
        """Generate a random movement.

        Parameters
        ----------
        accounting_date : date
            Date the movement is booked.
        is_credit : bool | None
            Direction; random when None.

        Returns
        -------
        MovementSpec
            Movement with zero to two detail records.
        """
        if is_credit is None:
            is_credit = random.random() < 0.6

        cents = random.randint(100, 5_000_000)
        amount = Decimal(cents).scaleb(-2)
        if not is_credit:
            amount = -amount

        label = self.to_record_text(self.fake.company(), 31)
        reference = self.next_reference()
        details = [
            (
                random.choice(self.DETAIL_QUALIFIERS),
                self.to_record_text(f"/{reference} {self.fake.sentence(nb_words=4)}", 70),
            )
            for _ in range(random.choices([0, 1, 2], weights=[0.5, 0.35, 0.15], k=1)[0])
        ]

        return MovementSpec(
            label=label,
            amount=amount,
            reference=reference,
            accounting_date=accounting_date,
            operation_code=self.CREDIT_CODE if is_credit else self.DEBIT_CODE,
            details=details,
        )

    def generate_movements(self, count: int, accounting_date: date) -> list[MovementSpec]:
        """Generate ``count`` random movements booked on one date."""
        return [self.generate_movement(accounting_date) for _ in range(count)]

    def render_statement(
        self,
        account: AccountKey,
        opening_balance: Decimal,
        as_of: date,
        movements: list[MovementSpec],
    ) -> list[str]:
        """Render a statement as 120 character lines.

        Parameters
        ----------
        account : AccountKey
            Account the statement is for.
        opening_balance : Decimal
            Balance before the movements.
        as_of : date
            Date of both balances.
        movements : list[MovementSpec]
            Movements in booking order.

        Returns
        -------
        list[str]
            Opening balance, movements with their details, closing balance.
        """
        closing_balance = opening_balance + sum((m.amount for m in movements), Decimal("0"))

        lines = [self.render_balance(RecordType.OPEN_BALANCE, account, opening_balance, as_of)]
        for movement in movements:
            lines.extend(self.render_movement(account, movement))
        lines.append(self.render_balance(RecordType.CLOSE_BALANCE, account, closing_balance, as_of))
        return lines

    def generate_statement(
        self,
        account: AccountKey,
        opening_balance: Decimal,
        as_of: date,
        num_movements: int,
    ) -> tuple[list[str], list[MovementSpec], Decimal]:
        """Generate a random statement.

        Returns
        -------
        tuple[list[str], list[MovementSpec], Decimal]
            Lines, the movements they hold, and the closing balance.
        """
        movements = self.generate_movements(num_movements, as_of)
        closing_balance = opening_balance + sum((m.amount for m in movements), Decimal("0"))
        return self.render_statement(account, opening_balance, as_of, movements), movements, closing_balance

    def render_balance(self, record_type: RecordType, account: AccountKey, amount: Decimal, as_of: date) -> str:
        """Render an opening or closing balance record."""
        return LAYOUTS[record_type].render(
            bank_code=account.bank_code,
            branch_code=account.branch_code,
            currency=self.CURRENCY,
            decimal_count=str(self.decimal_count),
            account_number=account.account_number,
            date=encode_date(as_of),
            amount=encode_amount(amount, self.decimal_count),
        )

    def render_movement(self, account: AccountKey, movement: MovementSpec) -> list[str]:
        """Render a movement record followed by its detail records."""
        self._operation_number += 1
        control_fields = {
            "bank_code": account.bank_code,
            "internal_operation_code": "0000",
            "branch_code": account.branch_code,
            "currency": self.CURRENCY,
            "decimal_count": str(self.decimal_count),
            "account_number": account.account_number,
            "operation_code": movement.operation_code,
            "accounting_date": encode_date(movement.accounting_date),
        }
        lines = [
            MOVEMENT_LAYOUT.render(
                **control_fields,
                value_date=encode_date(movement.accounting_date + timedelta(days=1)),
                label=movement.label,
                operation_number=f"{self._operation_number:07d}",
                amount=encode_amount(movement.amount, self.decimal_count),
                reference=movement.reference,
            )
        ]
        for qualifier, information in movement.details:
            lines.append(
                MOVEMENT_DETAIL_LAYOUT.render(**control_fields, qualifier=qualifier, information=information)
            )
        return lines


class ExpectedPaymentGenerator(BaseGenerator):
    """Generate expected payments for, or unrelated to, generated movements."""

    def __init__(self, seed: int | None = None) -> None:
        super().__init__(seed)

    def for_movement(self, movement: MovementSpec) -> ExpectedPayment:
        """Expected payment settled by ``movement``.

        The payer name is a leading part of the movement label, as banks
        often append their own suffixes to the counterparty name.
        """
        words = movement.label.split()
        from_party = " ".join(words[: max(1, len(words) - 1)]) if words else movement.label
        return ExpectedPayment(
            invoice_id=self.fake.uuid4(),
            from_party=from_party,
            amount=movement.amount,
            ref=movement.reference,
        )

    def decoy(self) -> ExpectedPayment:
        """Expected payment that no generated movement settles."""
        return ExpectedPayment(
            invoice_id=self.fake.uuid4(),
            from_party=self.to_record_text(self.fake.company(), 31),
            amount=Decimal(random.randint(100, 5_000_000)).scaleb(-2),
            ref=f"DEC-{self.fake.numerify('######')}",
        )
