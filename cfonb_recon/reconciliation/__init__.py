"""Account merging, payment matching and the end-to-end pipeline."""

from cfonb_recon.reconciliation.matcher import find_expected_payment, match_account, match_accounts, matches
from cfonb_recon.reconciliation.merger import group_accounts, merge_accounts, merge_all
from cfonb_recon.reconciliation.pipeline import (
    expected_payment_from_dict,
    load_expected_payments,
    parse_statement_file,
    reconcile,
)

__all__ = [
    "expected_payment_from_dict",
    "find_expected_payment",
    "group_accounts",
    "load_expected_payments",
    "match_account",
    "match_accounts",
    "matches",
    "merge_accounts",
    "merge_all",
    "parse_statement_file",
    "reconcile",
]
