"""Enumeration types for statement records and match results."""

from enum import Enum


class RecordType(str, Enum):
    OPEN_BALANCE = "01"
    MOVEMENT = "04"
    MOVEMENT_DETAIL = "05"
    CLOSE_BALANCE = "07"


class MatchStatus(str, Enum):
    MATCHED = "MATCHED"
    UNMATCHED = "UNMATCHED"
