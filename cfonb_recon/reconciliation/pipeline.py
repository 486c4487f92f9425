"""End-to-end reconciliation: statement file to match results."""

import json
import logging
from collections.abc import Iterable
from datetime import date
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

from cfonb_recon.codecs.fields import Clock
from cfonb_recon.exceptions import ConfigurationError
from cfonb_recon.models.payment import ExpectedPayment, ReconciliationReport
from cfonb_recon.models.statement import Account
from cfonb_recon.parsing.assembler import assemble_statement, split_statements
from cfonb_recon.parsing.records import read_lines
from cfonb_recon.reconciliation.matcher import match_accounts
from cfonb_recon.reconciliation.merger import merge_all

logger = logging.getLogger(__name__)


def parse_statement_file(content: str, clock: Clock = date.today) -> list[Account]:
    """Parse a whole statement file into merged accounts.

    Any decoding, structural or balance error aborts the whole file: a
    single bad statement means balances in the file cannot be trusted.

    Parameters
    ----------
    content : str
        Raw file content.
    clock : Clock
        Provider of today's date for century inference.

    Returns
    -------
    list[Account]
        One account per identifier, in order of first appearance.
    """
    lines = read_lines(content)
    statements = split_statements(lines)
    logger.info("Read %d record(s) forming %d statement(s)", len(lines), len(statements))

    snapshots = [assemble_statement(statement, clock) for statement in statements]
    accounts = merge_all(snapshots)
    if not accounts:
        logger.warning("No account produced: the file has no complete statement")
    return accounts


def reconcile(
    content: str,
    expected_payments: Iterable[ExpectedPayment],
    clock: Clock = date.today,
    max_workers: int | None = None,
) -> ReconciliationReport:
    """Parse a statement file and match its credits against expected payments."""
    accounts = parse_statement_file(content, clock)
    return match_accounts(accounts, expected_payments, max_workers=max_workers)


def expected_payment_from_dict(data: dict[str, Any]) -> ExpectedPayment:
    """Build an expected payment from its JSON form."""
    if not isinstance(data, dict):
        raise ConfigurationError(f"Expected payment must be a JSON object, got {data!r}")
    try:
        return ExpectedPayment(
            invoice_id=str(data["invoice_id"]),
            from_party=str(data["from_party"]),
            amount=Decimal(str(data["amount"])),
            ref=str(data["ref"]),
        )
    except KeyError as exc:
        raise ConfigurationError(f"Expected payment is missing {exc.args[0]!r}: {data}") from exc
    except InvalidOperation as exc:
        raise ConfigurationError(f"Expected payment amount is not a number: {data.get('amount')!r}") from exc


def load_expected_payments(path: str | Path) -> list[ExpectedPayment]:
    """Read expected payments from a JSON array file."""
    with open(path, encoding="utf-8") as f:
        try:
            data = json.load(f)
        except ValueError as exc:
            raise ConfigurationError(f"{path} cannot be decoded as UTF-8 JSON: {exc}") from exc

    if not isinstance(data, list):
        raise ConfigurationError(f"{path} must contain a JSON array of expected payments")

    payments = [expected_payment_from_dict(item) for item in data]
    logger.info("Loaded %d expected payment(s) from %s", len(payments), path)
    return payments
