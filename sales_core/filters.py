from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional

import pandas as pd

from sales_core.coercion import cell_label
from sales_core.config import FILTER_DIMENSIONS, FILTER_SENTINEL
from sales_core.schema import ResolvedSchema


@dataclass(frozen=True)
class FilterSelections:
    states: List[str] = field(default_factory=list)
    categories: List[str] = field(default_factory=list)
    stores: List[str] = field(default_factory=list)
    brands: List[str] = field(default_factory=list)

    def by_dimension(self) -> Dict[str, FrozenSet[str]]:
        return {
            "state": frozenset(self.states),
            "category": frozenset(self.categories),
            "store": frozenset(self.stores),
            "brand": frozenset(self.brands),
        }

    def is_empty(self) -> bool:
        return not (self.states or self.categories or self.stores or self.brands)


def _as_str_list(values: Optional[Iterable[object]]) -> List[str]:
    if not values:
        return []
    if isinstance(values, str):
        values = [values]
    return list(dict.fromkeys(str(v) for v in values if v is not None))


def normalize_filters(raw: Optional[Mapping[str, object]]) -> FilterSelections:
    raw = raw or {}

    def pick(name: str) -> List[str]:
        return _as_str_list(raw.get(name) or raw.get(f"selected_{name}"))  # type: ignore[arg-type]

    return FilterSelections(
        states=pick("states"),
        categories=pick("categories"),
        stores=pick("stores"),
        brands=pick("brands"),
    )


def dimension_labels(series: pd.Series) -> pd.Series:
    return series.map(lambda v: cell_label(v, FILTER_SENTINEL))


def apply_filters(
    df: pd.DataFrame,
    schema: ResolvedSchema,
    selections: Optional[FilterSelections] = None,
) -> pd.DataFrame:
    """Keep rows matching every active dimension selection.

    A dimension is active when its selection is non-empty and its header
    resolved; inactive dimensions impose no constraint.
    """
    if selections is None or df.empty:
        return df
    filtered = df
    for dimension, selected in selections.by_dimension().items():
        column = schema.get(dimension)
        if not selected or column is None or column not in filtered.columns:
            continue
        filtered = filtered[dimension_labels(filtered[column]).isin(selected)]
    return filtered


def filter_options(df: pd.DataFrame, schema: ResolvedSchema) -> Dict[str, List[str]]:
    options: Dict[str, List[str]] = {}
    for dimension in FILTER_DIMENSIONS:
        column = schema.get(dimension)
        if column is None or column not in df.columns:
            options[dimension] = []
            continue
        options[dimension] = sorted(dimension_labels(df[column]).unique().tolist())
    return options
