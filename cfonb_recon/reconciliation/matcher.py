"""Match incoming credits against expected payments.

Every credit movement is compared with the expected payments in the order
they were supplied and the first one that fits wins. A matched movement is
not considered again, but the expected payment stays available: a single
invoice can be matched by several movements of the same amount. Such reuse
is reported by ``ReconciliationReport.reused_expected_payments`` and logged,
not prevented.

Accounts are independent, so they are matched concurrently against a shared
read-only tuple of expected payments. Results are put back in account order
before being returned.
"""

import logging
from collections.abc import Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed

from cfonb_recon.models.payment import ExpectedPayment, Matched, MatchResult, ReconciliationReport, Unmatched
from cfonb_recon.models.statement import Account, Movement

logger = logging.getLogger(__name__)


def matches(expected: ExpectedPayment, movement: Movement) -> bool:
    """Tell whether a movement settles an expected payment.

    The movement must be a credit of exactly the expected amount, its label
    must contain the payer's name and one of its references must contain
    the expected reference.
    """
    return (
        movement.is_credit
        and movement.amount == expected.amount
        and expected.from_party in movement.counterparty_label
        and any(expected.ref in reference for reference in movement.references)
    )


def find_expected_payment(
    movement: Movement,
    expected_payments: Sequence[ExpectedPayment],
) -> ExpectedPayment | None:
    """Return the first expected payment the movement settles, if any."""
    return next((expected for expected in expected_payments if matches(expected, movement)), None)


def match_account(account: Account, expected_payments: Sequence[ExpectedPayment]) -> list[MatchResult]:
    """Match every credit movement of one account.

    Parameters
    ----------
    account : Account
        Merged account.
    expected_payments : Sequence[ExpectedPayment]
        Candidates, scanned in order.

    Returns
    -------
    list[MatchResult]
        One result per credit movement, in movement order. Debits are
        skipped.
    """
    results: list[MatchResult] = []

    for movement in account.movements:
        if not movement.is_credit:
            continue

        expected = find_expected_payment(movement, expected_payments)
        if expected is None:
            logger.warning(
                "Unmatched payment on account %s from %r of %s",
                account.id,
                movement.counterparty_label,
                movement.amount,
                extra={"extra": {"account_id": account.id, "amount": str(movement.amount)}},
            )
            results.append(Unmatched(account_id=account.id, movement=movement))
        else:
            logger.info(
                "Payment matched: invoice %s, %s from %s (ref %s)",
                expected.invoice_id,
                expected.amount,
                expected.from_party,
                expected.ref,
            )
            results.append(Matched(account_id=account.id, expected_payment=expected, movement=movement))

    return results


def match_accounts(
    accounts: Iterable[Account],
    expected_payments: Iterable[ExpectedPayment],
    max_workers: int | None = None,
) -> ReconciliationReport:
    """Match all accounts and collect results per account.

    Parameters
    ----------
    accounts : Iterable[Account]
        Merged accounts.
    expected_payments : Iterable[ExpectedPayment]
        Candidates shared by every account.
    max_workers : int | None
        Thread pool size; ``1`` matches inline.

    Returns
    -------
    ReconciliationReport
        Accounts and their results, in the order the accounts were given.
    """
    accounts = list(accounts)
    candidates = tuple(expected_payments)
    per_account: dict[int, list[MatchResult]] = {}

    if max_workers == 1 or len(accounts) <= 1:
        for index, account in enumerate(accounts):
            per_account[index] = match_account(account, candidates)
    else:
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            futures = {
                executor.submit(match_account, account, candidates): index
                for index, account in enumerate(accounts)
            }
            for future in as_completed(futures):
                per_account[futures[future]] = future.result()

    results: dict[str, list[MatchResult]] = {}
    for index, account in enumerate(accounts):
        results.setdefault(account.id, []).extend(per_account[index])

    report = ReconciliationReport(accounts=accounts, results=results)

    for invoice_id in report.reused_expected_payments:
        logger.warning("Expected payment for invoice %s matched more than one movement", invoice_id)

    logger.info(
        "Matching complete: %d account(s), %d matched, %d unmatched",
        len(accounts),
        len(report.matched),
        len(report.unmatched),
    )
    return report
