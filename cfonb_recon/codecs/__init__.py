"""Decoders and encoders for CFONB120 fields."""

from cfonb_recon.codecs.fields import (
    AMOUNT_LENGTH,
    Clock,
    compute_account_id,
    decode_amount,
    decode_date,
    encode_amount,
    encode_date,
)
from cfonb_recon.codecs.operations import OPERATION_TYPES, parse_operation_code

__all__ = [
    "AMOUNT_LENGTH",
    "Clock",
    "OPERATION_TYPES",
    "compute_account_id",
    "decode_amount",
    "decode_date",
    "encode_amount",
    "encode_date",
    "parse_operation_code",
]
