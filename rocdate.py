"""
Fuel Log – ROC (民國) calendar formatting.
ISO ``YYYY-MM-DD`` strings are split as plain calendar triples, never parsed as timestamps.
"""

ROC_YEAR_OFFSET = 1911


def _split(iso_date):
    parts = iso_date.split("-")
    if len(parts) != 3:
        raise ValueError(f"Expected a YYYY-MM-DD date, got {iso_date!r}")
    year, month, day = (int(p) for p in parts)
    return year, month, day


def roc_year(iso_date):
    return _split(iso_date)[0] - ROC_YEAR_OFFSET


def roc_year_month(iso_date):
    """Return ``(roc_year, month)`` for *iso_date*."""
    year, month, _ = _split(iso_date)
    return year - ROC_YEAR_OFFSET, month


def day_of_month(iso_date):
    return _split(iso_date)[2]


def to_roc_date(iso_date):
    """``"2026-02-15"`` → ``"115年2月15日"``; empty input gives an empty string."""
    if not iso_date:
        return ""
    year, month, day = _split(iso_date)
    return f"{year - ROC_YEAR_OFFSET}年{month}月{day}日"


def to_roc_month(iso_date):
    """``"2026-02-15"`` → ``"115年2月"``."""
    if not iso_date:
        return ""
    year, month, _ = _split(iso_date)
    return f"{year - ROC_YEAR_OFFSET}年{month}月"
