"""Record parser: one 120 character line into a typed record."""

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import date
from typing import NamedTuple

from cfonb_recon.codecs.fields import Clock, compute_account_id, decode_amount, decode_date
from cfonb_recon.codecs.operations import parse_operation_code
from cfonb_recon.exceptions import CreditDebitMismatch, ReconError, RecordSyntaxError, UnexpectedRecordType
from cfonb_recon.models.enums import RecordType
from cfonb_recon.models.statement import Balance, Movement
from cfonb_recon.parsing.layout import CONTROL_KEY, LAYOUTS, RECORD_LENGTH


class RawLine(NamedTuple):
    """A 120 character line and its 1-based line number in the source file."""

    number: int
    text: str


@dataclass(frozen=True)
class BalanceRecord:
    """Opening (01) or closing (07) balance record."""

    record_type: RecordType
    balance: Balance
    line_number: int | None = None


@dataclass(frozen=True)
class MovementRecord:
    """Movement (04) record."""

    account: str
    movement: Movement
    control_key: str
    line_number: int | None = None


@dataclass(frozen=True)
class DetailRecord:
    """Movement detail (05) record carrying one reference pair."""

    qualifier: str
    information: str
    control_key: str
    line_number: int | None = None

    @property
    def references(self) -> list[str]:
        return [self.qualifier, self.information]


Record = BalanceRecord | MovementRecord | DetailRecord


def read_lines(content: str) -> list[RawLine]:
    """Split file content into records, dropping lines that are not 120 characters.

    Records are separated by line feeds only, with one trailing carriage
    return removed, so control characters inside a record never split it.
    Short lines are tolerated so that trailing blank lines and stray
    separators do not break a file. Line numbers refer to the unfiltered content.
    """
    lines = []
    for number, text in enumerate(content.split("\n"), start=1):
        text = text.removesuffix("\r")
        if len(text) == RECORD_LENGTH:
            lines.append(RawLine(number, text))
    return lines


@contextmanager
def record_context(line_number: int | None) -> Iterator[None]:
    """Attach ``line_number`` to any cfonb-recon error raised in the block."""
    try:
        yield
    except ReconError as err:
        if err.record_index is None:
            err.record_index = line_number
        raise


def record_type_of(text: str, line_number: int | None = None) -> RecordType:
    """Read the record type tag of a line."""
    tag = text[:2]
    try:
        return RecordType(tag)
    except ValueError:
        raise UnexpectedRecordType(
            f"Unknown record type {tag!r}, expected 01, 04, 05 or 07",
            record_index=line_number,
            field="record_code",
            raw=tag,
        ) from None


def parse_record(text: str, line_number: int | None = None, clock: Clock = date.today) -> Record:
    """Decode one record.

    Parameters
    ----------
    text : str
        The 120 character line.
    line_number : int | None
        Position in the source file, reported in errors.
    clock : Clock
        Provider of today's date for century inference.

    Returns
    -------
    Record
        A ``BalanceRecord``, ``MovementRecord`` or ``DetailRecord``.
    """
    with record_context(line_number):
        if len(text) != RECORD_LENGTH:
            raise RecordSyntaxError(f"Record must be {RECORD_LENGTH} characters, got {len(text)}", field="record")

        record_type = record_type_of(text)
        fields = LAYOUTS[record_type].slice(text)

        if record_type is RecordType.MOVEMENT:
            return _parse_movement(fields, text, line_number, clock)
        if record_type is RecordType.MOVEMENT_DETAIL:
            return DetailRecord(
                qualifier=fields["qualifier"].rstrip(),
                information=fields["information"].rstrip(),
                control_key=CONTROL_KEY.slice(text),
                line_number=line_number,
            )
        return BalanceRecord(
            record_type=record_type,
            balance=Balance(
                account=compute_account_id(fields["bank_code"], fields["branch_code"], fields["account_number"]),
                amount=decode_amount(fields["amount"], fields["decimal_count"]),
                as_of=decode_date(fields["date"], clock),
            ),
            line_number=line_number,
        )


def _parse_movement(fields: dict[str, str], text: str, line_number: int | None, clock: Clock) -> MovementRecord:
    operation_type = parse_operation_code(fields["operation_code"])
    amount = decode_amount(fields["amount"], fields["decimal_count"])

    # Zero amounts count as credits
    is_credit = amount >= 0
    if operation_type.is_credit is not None and operation_type.is_credit != is_credit:
        raise CreditDebitMismatch(
            f"Amount sign does not match operation {operation_type.code} ({operation_type.label})",
            field="amount",
            raw=fields["amount"],
        )

    movement = Movement(
        counterparty_label=fields["label"].rstrip(),
        amount=amount,
        is_credit=is_credit,
        accounting_date=decode_date(fields["accounting_date"], clock, field="accounting_date"),
        operation_type=operation_type,
        references=[fields["reference"].rstrip()],
        value_date=decode_date(fields["value_date"], clock, field="value_date"),
        operation_number=fields["operation_number"].strip(),
        internal_operation_code=fields["internal_operation_code"].strip(),
    )
    return MovementRecord(
        account=compute_account_id(fields["bank_code"], fields["branch_code"], fields["account_number"]),
        movement=movement,
        control_key=CONTROL_KEY.slice(text),
        line_number=line_number,
    )
