"""Receipt assembler: statement records into a balance-checked account.

A statement is an opening balance (01), any number of movements (04) each
followed by zero or more detail records (05), and a closing balance (07).
A file may hold several statements for several accounts, back to back.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum

from cfonb_recon.codecs.fields import Clock
from cfonb_recon.exceptions import (
    AccountMismatch,
    BalanceInvariantViolation,
    MalformedStatementStructure,
    OrphanDetailRecord,
)
from cfonb_recon.models.enums import RecordType
from cfonb_recon.models.statement import Account, Balance, Movement
from cfonb_recon.parsing.records import (
    BalanceRecord,
    DetailRecord,
    MovementRecord,
    RawLine,
    parse_record,
    record_context,
)

logger = logging.getLogger(__name__)


class AssemblerState(Enum):
    EXPECT_OPEN = "expect_open"
    EXPECT_MOVEMENT_OR_CLOSE = "expect_movement_or_close"
    EXPECT_DETAIL_OR_NEXT = "expect_detail_or_next"
    CLOSED = "closed"


@dataclass
class _OpenMovement:
    movement: Movement
    control_key: str
    line_number: int


def split_statements(lines: Sequence[RawLine]) -> list[list[RawLine]]:
    """Cut a file's records into statements, each ending with a closing balance.

    Records after the last closing balance do not form a statement and
    are dropped; a file without any closing balance yields no statement.
    """
    statements: list[list[RawLine]] = []
    current: list[RawLine] = []

    for line in lines:
        current.append(line)
        if line.text[:2] == RecordType.CLOSE_BALANCE.value:
            statements.append(current)
            current = []

    if current:
        logger.warning(
            "Dropping %d record(s) after the last closing balance (from line %d)",
            len(current),
            current[0].number,
        )

    return statements


def assemble_statement(lines: Sequence[RawLine], clock: Clock = date.today) -> Account:
    """Parse one statement and check it against its balances.

    Parameters
    ----------
    lines : Sequence[RawLine]
        The statement's records, opening balance first.
    clock : Clock
        Provider of today's date for century inference.

    Returns
    -------
    Account
        Account at the closing balance with the statement's movements.

    Raises
    ------
    MalformedStatementStructure
        If records are out of place.
    OrphanDetailRecord
        If a detail record does not belong to the movement before it.
    AccountMismatch
        If the balances refer to different accounts.
    BalanceInvariantViolation
        If the movements do not add up to the closing balance.
    """
    state = AssemblerState.EXPECT_OPEN
    opening: Balance | None = None
    closing: Balance | None = None
    open_movement: _OpenMovement | None = None
    movements: list[Movement] = []

    for line in lines:
        record = parse_record(line.text, line.number, clock)

        with record_context(line.number):
            if state is AssemblerState.CLOSED:
                raise MalformedStatementStructure(
                    "Record found after the closing balance",
                    field="record_code",
                    raw=line.text[:2],
                )

            if state is AssemblerState.EXPECT_OPEN:
                if not (isinstance(record, BalanceRecord) and record.record_type is RecordType.OPEN_BALANCE):
                    raise MalformedStatementStructure(
                        "Statement must start with an opening balance (01)",
                        field="record_code",
                        raw=line.text[:2],
                    )
                opening = record.balance
                state = AssemblerState.EXPECT_MOVEMENT_OR_CLOSE

            elif isinstance(record, MovementRecord):
                open_movement = _OpenMovement(record.movement, record.control_key, line.number)
                movements.append(record.movement)
                state = AssemblerState.EXPECT_DETAIL_OR_NEXT

            elif isinstance(record, DetailRecord):
                if state is not AssemblerState.EXPECT_DETAIL_OR_NEXT or open_movement is None:
                    raise OrphanDetailRecord("Detail record does not follow a movement", raw=record.control_key)
                if record.control_key != open_movement.control_key:
                    raise OrphanDetailRecord(
                        f"Detail record does not match the movement at record #{open_movement.line_number} "
                        f"(expected {open_movement.control_key!r})",
                        field="control_key",
                        raw=record.control_key,
                    )
                open_movement.movement.references.extend(record.references)

            elif record.record_type is RecordType.CLOSE_BALANCE:
                closing = record.balance
                open_movement = None
                state = AssemblerState.CLOSED

            else:
                raise MalformedStatementStructure(
                    "Opening balance (01) found inside a statement",
                    field="record_code",
                    raw=line.text[:2],
                )

    last_line = lines[-1].number if lines else None
    if state is not AssemblerState.CLOSED or opening is None or closing is None:
        raise MalformedStatementStructure(
            "Statement must end with a closing balance (07)",
            record_index=last_line,
        )

    if opening.account != closing.account:
        raise AccountMismatch(
            f"Opening balance is for account {opening.account}, closing balance for {closing.account}",
            record_index=last_line,
            field="account",
            raw=closing.account,
        )

    verify_balance(opening, movements, closing, record_index=last_line)

    logger.debug(
        "Statement for %s on %s: %d movement(s), balance %s",
        closing.account,
        closing.as_of,
        len(movements),
        closing.amount,
    )
    return Account(
        id=closing.account,
        balance=closing.amount,
        last_update=closing.as_of,
        movements=movements,
    )


def verify_balance(
    opening: Balance,
    movements: Sequence[Movement],
    closing: Balance,
    record_index: int | None = None,
) -> None:
    """Check that the opening balance plus every movement equals the closing balance.

    The comparison is exact: amounts are decimals and no rounding slack is
    allowed.
    """
    total = sum((movement.amount for movement in movements), Decimal("0"))
    if opening.amount + total != closing.amount:
        raise BalanceInvariantViolation(
            f"Opening balance {opening.amount} plus movements {total} "
            f"does not equal closing balance {closing.amount} for account {closing.account}",
            opening=opening.amount,
            movements_total=total,
            closing=closing.amount,
            record_index=record_index,
        )
