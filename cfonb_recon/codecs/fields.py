"""Fixed-width field codecs: dates, signed amounts and account identifiers.

Dates are stored as DDMMYY. The century is not part of the data: it is
taken from the current date supplied by a ``Clock``, so a file cannot
carry dates more than about fifty years apart from today and decoding on
the first days of a new century will be wrong. This is a limitation of the
format and is kept as is.

Amounts are 14 characters. The last character folds the sign and the
least significant digit together::

    {ABCDEFGHI -> positive, last digit 0-9
    }JKLMNOPQR -> negative, last digit 0-9

so ``0000000001234Q`` with two decimals reads ``-123.48``.
"""

import re
from datetime import date
from decimal import Decimal
from typing import Callable

from cfonb_recon.exceptions import InvalidIdentifierChar, MalformedAmount, MalformedDate

Clock = Callable[[], date]

AMOUNT_LENGTH = 14
MAX_DECIMAL_COUNT = 3

_DIGITS = re.compile(r"[0-9]*")
_POSITIVE_CODES = "{ABCDEFGHI"
_NEGATIVE_CODES = "}JKLMNOPQR"

SIGN_CODES: dict[str, tuple[bool, int]] = {
    **{code: (False, digit) for digit, code in enumerate(_POSITIVE_CODES)},
    **{code: (True, digit) for digit, code in enumerate(_NEGATIVE_CODES)},
}

_IDENTIFIER_DIGITS: dict[str, str] = {digit: digit for digit in "0123456789"}
for _digit, _letters in (
    ("1", "AJ"),
    ("2", "BKS"),
    ("3", "CLT"),
    ("4", "DMU"),
    ("5", "ENV"),
    ("6", "FOW"),
    ("7", "GPX"),
    ("8", "HQY"),
    ("9", "IRZ"),
):
    for _letter in _letters:
        _IDENTIFIER_DIGITS[_letter] = _digit


def decode_date(raw: str, clock: Clock = date.today, field: str = "date") -> date:
    """Decode a DDMMYY field.

    Parameters
    ----------
    raw : str
        Six digit date, e.g. ``"270120"``.
    clock : Clock
        Provider of today's date, used only for its century.
    field : str
        Field name reported in errors.

    Returns
    -------
    date
        Decoded calendar date.
    """
    if len(raw) != 6 or not _DIGITS.fullmatch(raw):
        raise MalformedDate("Date must be 6 digits in the DDMMYY format", field=field, raw=raw)

    century = clock().year // 100 * 100
    try:
        return date(century + int(raw[4:6]), int(raw[2:4]), int(raw[0:2]))
    except ValueError as exc:
        raise MalformedDate(f"Invalid calendar date: {exc}", field=field, raw=raw) from exc


def decode_amount(raw: str, decimal_count: str, field: str = "amount") -> Decimal:
    """Decode a signed 14 character amount.

    Parameters
    ----------
    raw : str
        Amount field, digits followed by the sign code.
    decimal_count : str
        Single digit giving the number of fractional digits.
    field : str
        Field name reported in errors.

    Returns
    -------
    Decimal
        Exact amount with ``decimal_count`` fractional digits.
    """
    if not (len(decimal_count) == 1 and _DIGITS.fullmatch(decimal_count)):
        raise MalformedAmount("Decimal count must be a single digit", field="decimal_count", raw=decimal_count)
    decimals = int(decimal_count)
    if decimals > MAX_DECIMAL_COUNT:
        raise MalformedAmount(
            f"Decimal count must be between 0 and {MAX_DECIMAL_COUNT}",
            field="decimal_count",
            raw=decimal_count,
        )
    if len(raw) != AMOUNT_LENGTH:
        raise MalformedAmount(f"Amount must be {AMOUNT_LENGTH} characters", field=field, raw=raw)

    body, code = raw[:-1], raw[-1]
    # The sign code carries the last fractional digit
    split = len(body) - max(decimals - 1, 0)
    integer_part, decimal_digits = body[:split], body[split:]

    if not _DIGITS.fullmatch(integer_part):
        raise MalformedAmount(f"Integer part {integer_part!r} is not numeric", field=field, raw=raw)
    if not _DIGITS.fullmatch(decimal_digits):
        raise MalformedAmount(f"Decimal digits {decimal_digits!r} are not numeric", field=field, raw=raw)
    if code not in SIGN_CODES:
        raise MalformedAmount(
            f"Unknown sign code {code!r}, expected '{{', '}}' or A-R",
            field=field,
            raw=raw,
        )

    negative, last_digit = SIGN_CODES[code]
    sign = "-" if negative else ""
    return Decimal(f"{sign}{integer_part}{decimal_digits}{last_digit}").scaleb(-decimals)


def compute_account_id(bank_code: str, branch_code: str, account_number: str) -> str:
    """Build an account identifier from its components and mod-97 key.

    Parameters
    ----------
    bank_code : str
        5 character bank code.
    branch_code : str
        5 character branch (counter) code.
    account_number : str
        11 character account number, letters allowed.

    Returns
    -------
    str
        The three components followed by the two digit key.
    """
    bank = _identifier_number(bank_code, "bank_code")
    branch = _identifier_number(branch_code, "branch_code")
    account = _identifier_number(account_number, "account_number")

    key = 97 - (bank * 89 + branch * 15 + account * 3) % 97
    return f"{bank_code}{branch_code}{account_number}{key:02d}"


def encode_date(value: date) -> str:
    """Encode a date as DDMMYY."""
    return value.strftime("%d%m%y")


def encode_amount(value: Decimal, decimal_count: int) -> str:
    """Encode an amount into its 14 character signed form.

    Parameters
    ----------
    value : Decimal
        Amount to encode.
    decimal_count : int
        Number of fractional digits to write (0-3).

    Returns
    -------
    str
        Zero padded digits ending with the sign code.
    """
    if not 0 <= decimal_count <= MAX_DECIMAL_COUNT:
        raise MalformedAmount(f"Decimal count must be between 0 and {MAX_DECIMAL_COUNT}", raw=str(decimal_count))

    scaled = value.scaleb(decimal_count)
    if scaled != scaled.to_integral_value():
        raise MalformedAmount(
            f"{value} has more than {decimal_count} fractional digits",
            raw=str(value),
        )

    digits = str(abs(int(scaled))).zfill(AMOUNT_LENGTH)
    if len(digits) > AMOUNT_LENGTH:
        raise MalformedAmount(f"{value} does not fit in {AMOUNT_LENGTH} characters", raw=str(value))

    codes = _NEGATIVE_CODES if value < 0 else _POSITIVE_CODES
    return digits[:-1] + codes[int(digits[-1])]


def _identifier_number(value: str, field: str) -> int:
    if not value:
        raise InvalidIdentifierChar("Identifier component is empty", field=field, raw=value)
    try:
        return int("".join(_IDENTIFIER_DIGITS[char] for char in value))
    except KeyError as exc:
        raise InvalidIdentifierChar(
            f"Invalid identifier character {exc.args[0]!r}, expected [0-9A-Z]",
            field=field,
            raw=value,
        ) from None
