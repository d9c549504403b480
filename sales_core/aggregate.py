"""Grouped reductions behind every dashboard view.

``aggregate`` is the one reducer: a key function picks the group of each row
(``None`` drops the row), a coercion turns the measure cell into a number, and
a ``SortPolicy`` decides ordering and truncation.  ``scatter_series`` is the
only view that collects points instead of summing.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Literal, Optional

import pandas as pd

from sales_core.coercion import cell_label, parse_calendar_date, parse_currency, parse_integer
from sales_core.config import SCATTER_LABEL_DEFAULT, UNKNOWN_FEMININE

Order = Literal["value_desc", "key_asc"]
KeyFunc = Callable[[Any], Optional[str]]
Coercion = Callable[[Any], float]


@dataclass(frozen=True)
class SortPolicy:
    order: Order = "value_desc"
    top_n: Optional[int] = None
    reverse: bool = False


@dataclass(frozen=True)
class Aggregate:
    labels: List[str] = field(default_factory=list)
    values: List[float] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.labels)

    def pairs(self) -> List[tuple]:
        return list(zip(self.labels, self.values))

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame({"label": self.labels, "value": self.values})


@dataclass(frozen=True)
class ScatterSeries:
    name: str
    x: List[int] = field(default_factory=list)
    y: List[float] = field(default_factory=list)
    text: List[str] = field(default_factory=list)


def label_key(default: str) -> KeyFunc:
    return lambda value: cell_label(value, default)


def month_key(value: Any) -> Optional[str]:
    ts = parse_calendar_date(value)
    if ts is None:
        return None
    return f"{ts.year:04d}-{ts.month:02d}"


def aggregate(
    df: pd.DataFrame,
    group_col: str,
    measure_col: str,
    *,
    coerce: Coercion = parse_currency,
    key: KeyFunc = label_key(UNKNOWN_FEMININE),
    policy: SortPolicy = SortPolicy(),
) -> Aggregate:
    if df.empty:
        return Aggregate()

    frame = pd.DataFrame(
        {
            "key": df[group_col].map(key).astype(object),
            "value": df[measure_col].map(coerce),
        }
    )
    frame = frame[frame["key"].notna()]
    if frame.empty:
        return Aggregate()

    # sort=False keeps groups in first-encountered order, which the stable sort preserves on ties
    grouped = frame.groupby("key", sort=False)["value"].sum().reset_index()
    if policy.order == "key_asc":
        grouped = grouped.sort_values("key", kind="stable")
    else:
        grouped = grouped.sort_values("value", ascending=False, kind="stable")
    if policy.top_n is not None:
        grouped = grouped.head(policy.top_n)
    if policy.reverse:
        grouped = grouped.iloc[::-1]

    return Aggregate(
        labels=[str(k) for k in grouped["key"].tolist()],
        values=grouped["value"].tolist(),
    )


def scatter_series(
    df: pd.DataFrame,
    quantity_col: str,
    revenue_col: str,
    label_col: str,
    group_col: str,
) -> List[ScatterSeries]:
    buckets: Dict[str, Dict[str, list]] = {}
    for quantity_raw, revenue_raw, label_raw, group_raw in zip(
        df[quantity_col], df[revenue_col], df[label_col], df[group_col]
    ):
        quantity = parse_integer(quantity_raw)
        revenue = parse_currency(revenue_raw)
        if quantity <= 0 or revenue <= 0:
            continue
        group = cell_label(group_raw, UNKNOWN_FEMININE, strip=False)
        bucket = buckets.setdefault(group, {"x": [], "y": [], "text": []})
        bucket["x"].append(quantity)
        bucket["y"].append(revenue)
        bucket["text"].append(cell_label(label_raw, SCATTER_LABEL_DEFAULT, strip=False))
    return [ScatterSeries(name=name, x=b["x"], y=b["y"], text=b["text"]) for name, b in buckets.items()]

