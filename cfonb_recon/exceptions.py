"""Custom exception hierarchy for cfonb-recon."""

from decimal import Decimal


class ReconError(Exception):
    """Base exception for all cfonb-recon errors.

    Parameters
    ----------
    message : str
        Human readable description.
    record_index : int | None
        Line number of the offending record in the source file.
    field : str | None
        Name of the field being decoded.
    raw : str | None
        Offending raw substring.
    """

    def __init__(
        self,
        message: str,
        *,
        record_index: int | None = None,
        field: str | None = None,
        raw: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.record_index = record_index
        self.field = field
        self.raw = raw

    def __str__(self) -> str:
        context = []
        if self.record_index is not None:
            context.append(f"record #{self.record_index}")
        if self.field is not None:
            context.append(f"field={self.field}")
        if self.raw is not None:
            context.append(f"raw={self.raw!r}")
        if not context:
            return self.message
        return f"{self.message} ({', '.join(context)})"


class RecordSyntaxError(ReconError):
    """Raised when a single record cannot be decoded."""


class MalformedDate(RecordSyntaxError):
    """Raised when a DDMMYY field is not a valid date."""


class MalformedAmount(RecordSyntaxError):
    """Raised when a signed amount field cannot be decoded."""


class InvalidIdentifierChar(RecordSyntaxError):
    """Raised when an account identifier component has a character outside [0-9A-Z]."""


class MalformedOperationCode(RecordSyntaxError):
    """Raised when an interbank operation code is outside 01-99, A1-A6, B1-B6."""


class UnimplementedOperationCode(RecordSyntaxError):
    """Raised when an operation code is valid but absent from the lookup table."""


class UnexpectedRecordType(RecordSyntaxError):
    """Raised when a record tag is not one of 01, 04, 05, 07."""


class StatementStructureError(ReconError):
    """Raised when a statement's record sequence is inconsistent."""


class MalformedStatementStructure(StatementStructureError):
    """Raised when records do not follow the open/movements/close bracketing."""


class OrphanDetailRecord(StatementStructureError):
    """Raised when a detail record cannot be linked to the open movement."""


class AccountMismatch(StatementStructureError):
    """Raised when opening and closing balances refer to different accounts."""


class CreditDebitMismatch(StatementStructureError):
    """Raised when an amount's sign contradicts its operation code."""


class BalanceInvariantViolation(ReconError):
    """Raised when opening balance plus movements differs from the closing balance."""

    def __init__(
        self,
        message: str,
        *,
        opening: Decimal,
        movements_total: Decimal,
        closing: Decimal,
        record_index: int | None = None,
    ) -> None:
        super().__init__(message, record_index=record_index)
        self.opening = opening
        self.movements_total = movements_total
        self.closing = closing


class MergeError(ReconError):
    """Raised when a group of accounts cannot be merged."""


class HeterogeneousAccountGroup(MergeError):
    """Raised when accounts with different identifiers are merged together."""


class ConfigurationError(ReconError):
    """Raised when configuration is invalid or missing."""


class SinkError(ReconError):
    """Raised when a sink operation fails."""
