"""Fold same-account snapshots into a single account history."""

from collections.abc import Iterable, Sequence

from cfonb_recon.exceptions import HeterogeneousAccountGroup, MergeError
from cfonb_recon.models.statement import Account


def group_accounts(accounts: Iterable[Account]) -> dict[str, list[Account]]:
    """Group accounts by identifier, keeping encounter order.

    Example: ``[A0, B0, A1]`` groups as ``{"A": [A0, A1], "B": [B0]}``.
    """
    groups: dict[str, list[Account]] = {}
    for account in accounts:
        groups.setdefault(account.id, []).append(account)
    return groups


def merge_accounts(group: Sequence[Account]) -> Account:
    """Merge snapshots of one account.

    Movements are concatenated in order. Balance and last update come from
    the snapshot with the latest ``last_update``; on a tie the earlier
    snapshot wins. Balances are not re-checked across snapshots, each
    statement was checked on its own. The inputs are left untouched.
    """
    if not group:
        raise MergeError("Cannot merge an empty group of accounts")

    first = group[0]
    for account in group[1:]:
        if account.id != first.id:
            raise HeterogeneousAccountGroup(
                f"Cannot merge account {account.id} into {first.id}, group accounts by id first",
                field="id",
                raw=account.id,
            )

    latest = first
    movements = list(first.movements)
    for account in group[1:]:
        movements.extend(account.movements)
        if account.last_update > latest.last_update:
            latest = account

    return Account(
        id=first.id,
        balance=latest.balance,
        last_update=latest.last_update,
        movements=movements,
    )


def merge_all(accounts: Iterable[Account]) -> list[Account]:
    """Group then merge, one account per identifier."""
    return [merge_accounts(group) for group in group_accounts(accounts).values()]
