"""Positional layout of the 120 character CFONB records.

Each record kind is described by a table of ``(name, offset, length)``
entries covering the whole line, reserved areas included. The same table
drives slicing when reading and padding when writing.
"""

from dataclasses import dataclass

from cfonb_recon.models.enums import RecordType

RECORD_LENGTH = 120


@dataclass(frozen=True)
class FieldSpec:
    """A fixed-width field inside a record."""

    name: str
    offset: int
    length: int

    @property
    def end(self) -> int:
        return self.offset + self.length

    def slice(self, line: str) -> str:
        return line[self.offset : self.end]


@dataclass(frozen=True)
class RecordLayout:
    """Ordered, contiguous field table for one record kind."""

    record_type: RecordType
    fields: tuple[FieldSpec, ...]

    def __post_init__(self) -> None:
        position = 0
        for spec in self.fields:
            if spec.offset != position:
                raise ValueError(
                    f"{self.record_type.name}: field {spec.name} starts at {spec.offset}, expected {position}"
                )
            position = spec.end
        if position != RECORD_LENGTH:
            raise ValueError(f"{self.record_type.name}: fields cover {position} characters, expected {RECORD_LENGTH}")

    def field(self, name: str) -> FieldSpec:
        """Return the field called ``name``."""
        for spec in self.fields:
            if spec.name == name:
                return spec
        raise KeyError(name)

    def slice(self, line: str) -> dict[str, str]:
        """Cut a line into its raw, unstripped field values."""
        return {spec.name: spec.slice(line) for spec in self.fields}

    def render(self, **values: str) -> str:
        """Build a line from field values.

        Missing fields are blank and the record code defaults to the
        layout's record type. Values shorter than their field are padded
        with spaces on the right.
        """
        unknown = set(values) - {spec.name for spec in self.fields}
        if unknown:
            raise KeyError(f"Unknown fields for {self.record_type.name}: {sorted(unknown)}")

        parts = []
        for spec in self.fields:
            value = values.get(spec.name, self.record_type.value if spec.name == "record_code" else "")
            if len(value) > spec.length:
                raise ValueError(f"{spec.name} is {len(value)} characters, field holds {spec.length}")
            parts.append(value.ljust(spec.length))
        return "".join(parts)


def _layout(record_type: RecordType, *fields: tuple[str, int]) -> RecordLayout:
    specs = []
    offset = 0
    for name, length in fields:
        specs.append(FieldSpec(name, offset, length))
        offset += length
    return RecordLayout(record_type, tuple(specs))


def _balance_layout(record_type: RecordType) -> RecordLayout:
    return _layout(
        record_type,
        ("record_code", 2),
        ("bank_code", 5),
        ("reserved_1", 4),
        ("branch_code", 5),
        ("currency", 3),
        ("decimal_count", 1),
        ("reserved_2", 1),
        ("account_number", 11),
        ("reserved_3", 2),
        ("date", 6),
        ("reserved_4", 50),
        ("amount", 14),
        ("reserved_5", 16),
    )


OPEN_BALANCE_LAYOUT = _balance_layout(RecordType.OPEN_BALANCE)
CLOSE_BALANCE_LAYOUT = _balance_layout(RecordType.CLOSE_BALANCE)

MOVEMENT_LAYOUT = _layout(
    RecordType.MOVEMENT,
    ("record_code", 2),
    ("bank_code", 5),
    ("internal_operation_code", 4),
    ("branch_code", 5),
    ("currency", 3),
    ("decimal_count", 1),
    ("reserved_1", 1),
    ("account_number", 11),
    ("operation_code", 2),
    ("accounting_date", 6),
    ("rejection_code", 2),
    ("value_date", 6),
    ("label", 31),
    ("reserved_2", 2),
    ("operation_number", 7),
    ("exoneration_index", 1),
    ("unavailability_index", 1),
    ("amount", 14),
    ("reference", 16),
)

MOVEMENT_DETAIL_LAYOUT = _layout(
    RecordType.MOVEMENT_DETAIL,
    ("record_code", 2),
    ("bank_code", 5),
    ("internal_operation_code", 4),
    ("branch_code", 5),
    ("currency", 3),
    ("decimal_count", 1),
    ("reserved_1", 1),
    ("account_number", 11),
    ("operation_code", 2),
    ("accounting_date", 6),
    ("reserved_2", 5),
    ("qualifier", 3),
    ("information", 70),
    ("reserved_3", 2),
)

LAYOUTS: dict[RecordType, RecordLayout] = {
    layout.record_type: layout
    for layout in (OPEN_BALANCE_LAYOUT, MOVEMENT_LAYOUT, MOVEMENT_DETAIL_LAYOUT, CLOSE_BALANCE_LAYOUT)
}

# Bank, branch, account, currency, decimal count, operation codes and
# accounting date: a detail record must repeat these from its movement.
CONTROL_KEY = FieldSpec("control_key", 2, 38)
