"""CFONB120 record parsing and statement assembly."""

from cfonb_recon.parsing.assembler import AssemblerState, assemble_statement, split_statements, verify_balance
from cfonb_recon.parsing.layout import CONTROL_KEY, LAYOUTS, RECORD_LENGTH, FieldSpec, RecordLayout
from cfonb_recon.parsing.records import (
    BalanceRecord,
    DetailRecord,
    MovementRecord,
    RawLine,
    Record,
    parse_record,
    read_lines,
)

__all__ = [
    "AssemblerState",
    "BalanceRecord",
    "CONTROL_KEY",
    "DetailRecord",
    "FieldSpec",
    "LAYOUTS",
    "MovementRecord",
    "RECORD_LENGTH",
    "RawLine",
    "Record",
    "RecordLayout",
    "assemble_statement",
    "parse_record",
    "read_lines",
    "split_statements",
    "verify_balance",
]
