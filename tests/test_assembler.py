"""Tests for statement splitting and assembly."""

import logging
from dataclasses import replace
from datetime import date
from decimal import Decimal

import pytest

from cfonb_recon.exceptions import (
    AccountMismatch,
    BalanceInvariantViolation,
    MalformedStatementStructure,
    OrphanDetailRecord,
    StatementStructureError,
)
from cfonb_recon.models.enums import RecordType
from cfonb_recon.models.statement import Balance
from cfonb_recon.parsing.assembler import assemble_statement, split_statements, verify_balance

AS_OF = date(2024, 1, 27)


@pytest.fixture
def statement_lines(statement_gen, account_key, credit_spec, debit_spec) -> list[str]:
    """A balanced statement: 1000.00 + 150.00 - 40.25 = 1109.75."""
    return statement_gen.render_statement(account_key, Decimal("1000.00"), AS_OF, [credit_spec, debit_spec])


class TestSplitStatements:
    """Tests for split_statements."""

    def test_splits_on_closing_balance(self, statement_lines, to_raw) -> None:
        """Test that each closing balance ends a statement."""
        lines = to_raw(statement_lines + statement_lines)

        statements = split_statements(lines)

        assert len(statements) == 2
        assert [line for statement in statements for line in statement] == lines
        assert all(statement[-1].text[:2] == "07" for statement in statements)

    def test_drops_trailing_records(self, statement_lines, to_raw, caplog: pytest.LogCaptureFixture) -> None:
        """Test that records after the last close are dropped with a warning."""
        lines = to_raw(statement_lines + statement_lines[:2])

        with caplog.at_level(logging.WARNING, logger="cfonb_recon"):
            statements = split_statements(lines)

        assert len(statements) == 1
        assert statements[0] == lines[: len(statement_lines)]
        assert "Dropping 2 record(s)" in caplog.text

    def test_no_closing_balance(self, statement_lines, to_raw) -> None:
        """Test a file without any complete statement."""
        assert split_statements(to_raw(statement_lines[:-1])) == []

    def test_empty(self) -> None:
        """Test an empty file."""
        assert split_statements([]) == []


class TestAssembleStatement:
    """Tests for assemble_statement."""

    def test_valid_statement(self, statement_lines, to_raw, account_key, clock) -> None:
        """Test assembling a balanced statement."""
        account = assemble_statement(to_raw(statement_lines), clock)

        assert account.id == account_key.account_id
        assert account.balance == Decimal("1109.75")
        assert account.last_update == AS_OF
        assert [m.amount for m in account.movements] == [Decimal("150.00"), Decimal("-40.25")]

    def test_details_extend_references(self, statement_lines, to_raw, clock) -> None:
        """Test that detail pairs are appended to the movement's references."""
        account = assemble_statement(to_raw(statement_lines), clock)

        assert account.movements[0].references == ["INV-000001", "LIB", "/INV-000001 FACTURE JANVIER"]
        assert account.movements[1].references == ["PRLV-0042"]

    def test_several_details(self, statement_gen, account_key, credit_spec, to_raw, clock) -> None:
        """Test that every detail record adds its pair, in order."""
        spec = replace(credit_spec, details=[("LIB", "FIRST"), ("RCN", "SECOND")])
        lines = statement_gen.render_statement(account_key, Decimal("0.00"), AS_OF, [spec])

        account = assemble_statement(to_raw(lines), clock)

        assert account.movements[0].references == ["INV-000001", "LIB", "FIRST", "RCN", "SECOND"]

    def test_empty_statement(self, statement_gen, account_key, to_raw, clock) -> None:
        """Test a statement without movements."""
        lines = statement_gen.render_statement(account_key, Decimal("12.00"), AS_OF, [])

        account = assemble_statement(to_raw(lines), clock)

        assert account.movements == []
        assert account.balance == Decimal("12.00")

    def test_balance_violation(self, statement_gen, account_key, statement_lines, to_raw, clock) -> None:
        """Test that a closing balance off by one cent is rejected."""
        statement_lines[-1] = statement_gen.render_balance(
            RecordType.CLOSE_BALANCE, account_key, Decimal("1109.76"), AS_OF
        )

        with pytest.raises(BalanceInvariantViolation) as exc_info:
            assemble_statement(to_raw(statement_lines), clock)

        error = exc_info.value
        assert error.opening == Decimal("1000.00")
        assert error.movements_total == Decimal("109.75")
        assert error.closing == Decimal("1109.76")
        assert error.record_index == len(statement_lines)

    def test_detail_without_movement(self, statement_gen, account_key, credit_spec, to_raw, clock) -> None:
        """Test a detail record directly after the opening balance."""
        movement_line, detail_line = statement_gen.render_movement(account_key, credit_spec)
        lines = statement_gen.render_statement(account_key, Decimal("0.00"), AS_OF, [])
        lines.insert(1, detail_line)

        with pytest.raises(OrphanDetailRecord) as exc_info:
            assemble_statement(to_raw(lines), clock)

        assert exc_info.value.record_index == 2

    def test_detail_of_another_movement(self, statement_gen, account_key, credit_spec, to_raw, clock) -> None:
        """Test a detail whose control key differs from the open movement."""
        other = replace(credit_spec, accounting_date=date(2024, 1, 26))
        detail_line = statement_gen.render_movement(account_key, other)[1]
        lines = statement_gen.render_statement(account_key, Decimal("0.00"), AS_OF, [credit_spec])
        lines.insert(3, detail_line)

        with pytest.raises(OrphanDetailRecord) as exc_info:
            assemble_statement(to_raw(lines), clock)

        assert exc_info.value.field == "control_key"
        assert exc_info.value.record_index == 4

    def test_must_start_with_open_balance(self, statement_lines, to_raw, clock) -> None:
        """Test a statement starting with a movement."""
        with pytest.raises(MalformedStatementStructure) as exc_info:
            assemble_statement(to_raw(statement_lines[1:]), clock)

        assert exc_info.value.record_index == 1

    def test_open_balance_inside_statement(self, statement_lines, to_raw, clock) -> None:
        """Test a second opening balance before the close."""
        lines = statement_lines[:2] + statement_lines[:1] + statement_lines[2:]

        with pytest.raises(MalformedStatementStructure):
            assemble_statement(to_raw(lines), clock)

    def test_missing_close(self, statement_lines, to_raw, clock) -> None:
        """Test a statement that never closes."""
        with pytest.raises(MalformedStatementStructure, match="closing balance"):
            assemble_statement(to_raw(statement_lines[:-1]), clock)

    def test_record_after_close(self, statement_lines, to_raw, clock) -> None:
        """Test records following the closing balance."""
        lines = statement_lines + statement_lines[1:2]

        with pytest.raises(MalformedStatementStructure, match="after the closing balance"):
            assemble_statement(to_raw(lines), clock)

    def test_account_mismatch(self, statement_gen, account_key, other_account_key, to_raw, clock) -> None:
        """Test balances of two different accounts."""
        lines = [
            statement_gen.render_balance(RecordType.OPEN_BALANCE, account_key, Decimal("5.00"), AS_OF),
            statement_gen.render_balance(RecordType.CLOSE_BALANCE, other_account_key, Decimal("5.00"), AS_OF),
        ]

        with pytest.raises(AccountMismatch) as exc_info:
            assemble_statement(to_raw(lines), clock)

        assert isinstance(exc_info.value, StatementStructureError)
        assert exc_info.value.raw == other_account_key.account_id


class TestVerifyBalance:
    """Tests for verify_balance."""

    def test_exact_equality(self, make_movement) -> None:
        """Test that the check is exact on decimals."""
        opening = Balance("ACC", Decimal("0.10"), AS_OF)
        closing = Balance("ACC", Decimal("0.30"), AS_OF)

        verify_balance(opening, [make_movement("0.10"), make_movement("0.10")], closing)

    def test_violation(self, make_movement) -> None:
        """Test a mismatch reported with its components."""
        opening = Balance("ACC", Decimal("10.00"), AS_OF)
        closing = Balance("ACC", Decimal("10.00"), AS_OF)

        with pytest.raises(BalanceInvariantViolation) as exc_info:
            verify_balance(opening, [make_movement("-0.01")], closing, record_index=9)

        assert exc_info.value.movements_total == Decimal("-0.01")
        assert exc_info.value.record_index == 9
