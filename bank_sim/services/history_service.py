"""
History service — the transaction list as the home screen shows it.

Transactions are grouped under their reference-timezone calendar date.
Dates appear in the order they are first met while walking the log from
newest to oldest, so the most recent date comes first; inside a date the
log's own order is kept.
"""

from collections.abc import Iterable

from bank_sim.schemas.ledger import DateGroup
from bank_sim.schemas.transaction import Transaction


def group_by_date(transactions: Iterable[Transaction]) -> list[DateGroup]:
    """Group a newest-first transaction log by date."""
    groups: dict[str, list[Transaction]] = {}
    for txn in transactions:
        groups.setdefault(txn.date, []).append(txn)

    return [
        DateGroup(date=date, transactions=items)
        for date, items in groups.items()
    ]
