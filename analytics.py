# analytics.py
from datetime import date
from typing import Iterable, List, Optional, Tuple

import pandas as pd

PERIODS = ("week", "month", "year")
CATEGORIES = ("all", "travel", "diet", "shopping")
COLUMNS = ["date", "total", "travel", "diet", "shopping"]


def history_frame(entries: Iterable) -> pd.DataFrame:
    """One row per history entry, in the order given."""
    rows = [{
        "date": pd.Timestamp(e.date),
        "total": e.total or 0.0,
        "travel": (e.breakdown or {}).get("travel", 0.0),
        "diet": (e.breakdown or {}).get("diet", 0.0),
        "shopping": (e.breakdown or {}).get("shopping", 0.0),
    } for e in entries]
    return pd.DataFrame(rows, columns=COLUMNS)


def filter_history(entries: Iterable, start: Optional[date] = None, end: Optional[date] = None) -> List:
    return [e for e in entries
            if (start is None or e.date >= start) and (end is None or e.date <= end)]


def aggregate_history(entries: Iterable, period: str = "week", category: str = "all") -> Tuple[List[str], List[float]]:
    """Labels and values for the dashboard chart.

    ``week`` is the last seven entries; ``month`` and ``year`` average all
    entries falling in each bucket.
    """
    if period not in PERIODS:
        raise ValueError(f"unknown period {period!r}")
    if category not in CATEGORIES:
        raise ValueError(f"unknown category {category!r}")

    column = "total" if category == "all" else category
    df = history_frame(entries)
    if df.empty:
        return [], []

    if period == "week":
        last7 = df.tail(7)
        return list(last7["date"].dt.strftime("%m-%d")), [float(v) for v in last7[column]]

    fmt = "%Y-%m" if period == "month" else "%Y"
    df["bucket"] = df["date"].dt.strftime(fmt)
    means = df.groupby("bucket", sort=True)[column].mean()
    return list(means.index), [float(v) for v in means.values]
