import logging
from typing import List

import pandas as pd

from .facets import FACET_COLUMNS, FACET_TYPES

logger = logging.getLogger(__name__)


GROUP_COLUMNS: List[str] = ["subject", "activity"] + FACET_COLUMNS

TIDY_COLUMNS: List[str] = GROUP_COLUMNS + ["count", "average"]


def _sort_tidy(tidy: pd.DataFrame) -> pd.DataFrame:
    # Facets sort in declaration order with the absent value first.
    keyed = tidy.copy()
    for column, enum_type in FACET_TYPES.items():
        keyed[column] = pd.Categorical(
            keyed[column], categories=[member.value for member in enum_type], ordered=True
        )
    order = keyed.sort_values(GROUP_COLUMNS, kind="mergesort", na_position="first").index
    return tidy.loc[order].reset_index(drop=True)


def aggregate_tidy(categorized: pd.DataFrame) -> pd.DataFrame:
    """Count and average ``value`` per (subject, activity, facets) group."""
    grouped = categorized.groupby(GROUP_COLUMNS, dropna=False, sort=False)["value"]
    tidy = grouped.agg(count="size", average="mean").reset_index()
    tidy["count"] = tidy["count"].astype("int64")
    for column in FACET_COLUMNS:
        tidy[column] = pd.Series([v if isinstance(v, str) else None for v in tidy[column]], dtype=object)
    tidy = _sort_tidy(tidy)[TIDY_COLUMNS]
    logger.info("Aggregated %d rows into %d tidy groups", len(categorized), len(tidy))
    return tidy
