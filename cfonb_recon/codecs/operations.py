"""Interbank operation codes.

Codes come from the CFONB interbank operation list. Only the codes seen in
production are mapped; any other valid code is rejected until it is added
to ``OPERATION_TYPES`` with its expected direction.
"""

import re

from cfonb_recon.exceptions import MalformedOperationCode, UnimplementedOperationCode
from cfonb_recon.models.statement import OperationType

_VALID_CODE = re.compile(r"(?!00)[0-9]{2}|[AB][1-6]")

OPERATION_TYPES: dict[str, OperationType] = {
    "05": OperationType(code="05", label="payment received", is_credit=True),
    "06": OperationType(code="06", label="payment sent", is_credit=False),
    "14": OperationType(code="14", label="treasury payment sent", is_credit=False),
    "41": OperationType(code="41", label="payment sent/received to/from abroad", is_credit=None),
}


def parse_operation_code(code: str, field: str = "operation_code") -> OperationType:
    """Decode a two-character interbank operation code.

    Parameters
    ----------
    code : str
        Raw code, ``01``-``99``, ``A1``-``A6`` or ``B1``-``B6``.
    field : str
        Field name reported in errors.

    Returns
    -------
    OperationType
        Label and expected direction of the operation.

    Raises
    ------
    MalformedOperationCode
        If the code is outside the valid ranges.
    UnimplementedOperationCode
        If the code is valid but not mapped yet.
    """
    if not _VALID_CODE.fullmatch(code):
        raise MalformedOperationCode(
            "Operation code must range from 01 to 99, A1 to A6 or B1 to B6",
            field=field,
            raw=code,
        )
    try:
        return OPERATION_TYPES[code]
    except KeyError:
        raise UnimplementedOperationCode(
            f"Operation code {code} is valid but has no mapping yet",
            field=field,
            raw=code,
        ) from None
