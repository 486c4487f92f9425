"""Pytest configuration and fixtures."""

import logging
from collections.abc import Callable, Iterator
from datetime import date
from decimal import Decimal

import pytest

from cfonb_recon.codecs.operations import OPERATION_TYPES
from cfonb_recon.generators.statement import AccountKey, MovementSpec, StatementGenerator
from cfonb_recon.models.statement import Account, Movement
from cfonb_recon.parsing.records import RawLine, read_lines


@pytest.fixture(autouse=True)
def reset_logging() -> Iterator[None]:
    """Drop the stderr handler installed by setup_logging after each test."""
    yield
    root = logging.getLogger()
    for handler in root.handlers[:]:
        if type(handler) is logging.StreamHandler:
            root.removeHandler(handler)
    root.setLevel(logging.WARNING)
    logging.getLogger("cfonb_recon").setLevel(logging.NOTSET)


@pytest.fixture
def seed() -> int:
    """Fixed seed for reproducible tests."""
    return 42


@pytest.fixture
def reference_date() -> date:
    """Pinned today's date for century inference."""
    return date(2024, 1, 31)


@pytest.fixture
def clock(reference_date: date) -> Callable[[], date]:
    """Clock returning the reference date."""
    return lambda: reference_date


@pytest.fixture
def account_key() -> AccountKey:
    """Sample account components."""
    return AccountKey(bank_code="12345", branch_code="67890", account_number="00000000000")


@pytest.fixture
def other_account_key() -> AccountKey:
    """A second account, different from ``account_key``."""
    return AccountKey(bank_code="30004", branch_code="00820", account_number="0001022453A")


@pytest.fixture
def statement_gen(seed: int) -> StatementGenerator:
    """Statement generator used to render records."""
    return StatementGenerator(seed=seed)


@pytest.fixture
def credit_spec() -> MovementSpec:
    """A credit of 150.00 with one detail record."""
    return MovementSpec(
        label="ACME SARL VIREMENT",
        amount=Decimal("150.00"),
        reference="INV-000001",
        accounting_date=date(2024, 1, 27),
        operation_code="05",
        details=[("LIB", "/INV-000001 FACTURE JANVIER")],
    )


@pytest.fixture
def debit_spec() -> MovementSpec:
    """A debit of 40.25 without detail records."""
    return MovementSpec(
        label="EDF PRELEVEMENT",
        amount=Decimal("-40.25"),
        reference="PRLV-0042",
        accounting_date=date(2024, 1, 27),
        operation_code="06",
    )


@pytest.fixture
def to_raw() -> Callable[[list[str]], list[RawLine]]:
    """Number rendered lines the way a file read would."""
    return lambda lines: read_lines("\n".join(lines))


@pytest.fixture
def make_movement() -> Callable[..., Movement]:
    """Factory for movements built without going through records."""

    def _make(
        amount: str = "100.00",
        label: str = "ACME SARL",
        references: list[str] | None = None,
        accounting_date: date = date(2024, 1, 27),
    ) -> Movement:
        value = Decimal(amount)
        return Movement(
            counterparty_label=label,
            amount=value,
            is_credit=value >= 0,
            accounting_date=accounting_date,
            operation_type=OPERATION_TYPES["05" if value >= 0 else "06"],
            references=list(references or []),
        )

    return _make


@pytest.fixture
def make_account() -> Callable[..., Account]:
    """Factory for account snapshots."""

    def _make(
        account_id: str = "ACC",
        balance: str = "0.00",
        last_update: date = date(2024, 1, 27),
        movements: list[Movement] | None = None,
    ) -> Account:
        return Account(
            id=account_id,
            balance=Decimal(balance),
            last_update=last_update,
            movements=list(movements or []),
        )

    return _make
