"""
Fuel Log – Grouping helpers.
Stable partition of trip records by key, used by both export layouts.
"""


def group_by(records, key_fn):
    """
    Partition *records* by ``key_fn(record)``.

    Groups come back in the order their key first appears in the input and
    each group keeps the input order of its records. Nothing is sorted.

    Returns
    -------
    list[tuple[key, list]]
    """
    groups = {}
    for record in records:
        groups.setdefault(key_fn(record), []).append(record)
    return list(groups.items())


def dispatch_key(record):
    """One dispatch sheet per (date, driver)."""
    return (record.date, record.user)


def day_key(record):
    """One fuel-log row per calendar day."""
    return record.date
