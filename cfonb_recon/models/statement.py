"""Statement models: balances, movements and reconciled accounts."""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal


@dataclass(frozen=True)
class OperationType:
    """Decoded interbank operation code.

    ``is_credit`` is None when the code covers both directions and the
    amount sign alone decides.
    """

    code: str
    label: str
    is_credit: bool | None


@dataclass(frozen=True)
class Balance:
    """Opening or closing balance of one statement."""

    account: str
    amount: Decimal
    as_of: date


@dataclass
class Movement:
    """A single credit or debit line of a statement.

    ``references`` starts with the movement's own reference and grows with
    the pairs carried by the detail records that follow it.
    """

    counterparty_label: str
    amount: Decimal
    is_credit: bool
    accounting_date: date
    operation_type: OperationType
    references: list[str] = field(default_factory=list)
    value_date: date | None = None
    operation_number: str = ""
    internal_operation_code: str = ""


@dataclass
class Account:
    """Bank account snapshot with its movement history.

    One is produced per statement; same-account snapshots are folded
    together by the merger.
    """

    id: str
    balance: Decimal
    last_update: date
    movements: list[Movement] = field(default_factory=list)
