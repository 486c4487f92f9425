"""Tests for record layouts."""

import pytest

from cfonb_recon.models.enums import RecordType
from cfonb_recon.parsing.layout import (
    CONTROL_KEY,
    LAYOUTS,
    MOVEMENT_DETAIL_LAYOUT,
    MOVEMENT_LAYOUT,
    OPEN_BALANCE_LAYOUT,
    RECORD_LENGTH,
    FieldSpec,
    RecordLayout,
)


class TestRecordLayout:
    """Tests for RecordLayout."""

    @pytest.mark.parametrize("record_type", list(RecordType))
    def test_layouts_cover_whole_record(self, record_type: RecordType) -> None:
        """Test that every record type has a full 120 character layout."""
        layout = LAYOUTS[record_type]

        assert layout.fields[0].offset == 0
        assert layout.fields[-1].end == RECORD_LENGTH

    def test_rejects_gap(self) -> None:
        """Test that non-contiguous fields are refused."""
        with pytest.raises(ValueError, match="starts at"):
            RecordLayout(RecordType.MOVEMENT, (FieldSpec("a", 0, 10), FieldSpec("b", 11, 109)))

    def test_rejects_short_layout(self) -> None:
        """Test that layouts must cover 120 characters."""
        with pytest.raises(ValueError, match="cover"):
            RecordLayout(RecordType.MOVEMENT, (FieldSpec("a", 0, 100),))

    def test_movement_offsets(self) -> None:
        """Test positions of the movement fields used by the parser."""
        assert MOVEMENT_LAYOUT.field("operation_code").offset == 32
        assert MOVEMENT_LAYOUT.field("accounting_date").offset == 34
        assert MOVEMENT_LAYOUT.field("value_date").offset == 42
        assert (MOVEMENT_LAYOUT.field("label").offset, MOVEMENT_LAYOUT.field("label").length) == (48, 31)
        assert MOVEMENT_LAYOUT.field("amount").offset == 90
        assert MOVEMENT_LAYOUT.field("reference").offset == 104

    def test_detail_offsets(self) -> None:
        """Test positions of the detail reference pair."""
        assert MOVEMENT_DETAIL_LAYOUT.field("qualifier").offset == 45
        assert MOVEMENT_DETAIL_LAYOUT.field("information").offset == 48
        assert MOVEMENT_DETAIL_LAYOUT.field("information").end == 118

    def test_control_key_shared_by_movement_and_detail(self) -> None:
        """Test that the control key spans the same fields in both records."""
        assert CONTROL_KEY.offset == 2
        assert CONTROL_KEY.end == 40
        assert MOVEMENT_LAYOUT.field("accounting_date").end == CONTROL_KEY.end
        assert MOVEMENT_DETAIL_LAYOUT.field("accounting_date").end == CONTROL_KEY.end

    def test_field_unknown(self) -> None:
        """Test looking up a missing field."""
        with pytest.raises(KeyError):
            OPEN_BALANCE_LAYOUT.field("label")

    def test_render_pads_and_defaults_record_code(self) -> None:
        """Test rendering a sparse record."""
        line = OPEN_BALANCE_LAYOUT.render(bank_code="123", amount="0000000001234{")

        assert len(line) == RECORD_LENGTH
        assert line[:2] == "01"
        assert line[2:7] == "123  "
        assert OPEN_BALANCE_LAYOUT.slice(line)["amount"] == "0000000001234{"

    def test_render_rejects_long_value(self) -> None:
        """Test that values never spill into the next field."""
        with pytest.raises(ValueError, match="bank_code"):
            OPEN_BALANCE_LAYOUT.render(bank_code="123456")

    def test_render_rejects_unknown_field(self) -> None:
        """Test that typos in field names are caught."""
        with pytest.raises(KeyError):
            OPEN_BALANCE_LAYOUT.render(bank="12345")

    def test_slice_then_render(self) -> None:
        """Test that slicing a rendered line gives the padded values back."""
        line = MOVEMENT_LAYOUT.render(label="ACME", reference="REF")
        fields = MOVEMENT_LAYOUT.slice(line)

        assert MOVEMENT_LAYOUT.render(**fields) == line
        assert fields["label"].rstrip() == "ACME"
