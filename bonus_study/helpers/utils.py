"""General utilities for the bonus-depreciation study.

This module holds the quarter arithmetic used to place every panel row
on the event-time axis, and the naming convention shared by the period
indicators and their treatment interactions.  Column names encode the
signed offset (``period_minus10``, ``treat_plus41``) so that estimator
output can be mapped back to event time without a side table.
"""

from __future__ import annotations

from typing import List, Optional, Union

import numpy as np
import pandas as pd

ArrayLike = Union[int, np.ndarray, pd.Series]

PERIOD_PREFIX = "period_"
TREAT_PREFIX = "treat_"


# ----------------------------
# Quarter arithmetic
# ----------------------------
def quarter_ordinal(year: ArrayLike, quarter: ArrayLike) -> ArrayLike:
    """Map (year, quarter) to a running quarter count: ``year * 4 + quarter - 1``."""
    return year * 4 + (quarter - 1)


def year_quarter(year: ArrayLike, quarter: ArrayLike) -> ArrayLike:
    """Continuous time index, e.g. 2001Q3 -> 2001.5."""
    return year + (quarter - 1) / 4.0


def event_time(
    year: ArrayLike,
    quarter: ArrayLike,
    base_year: int = 2001,
    base_quarter: int = 3,
    pre: int = 18,
    post: int = 41,
):
    """Signed quarters since the baseline quarter, missing outside ``[-pre, post]``.

    Scalars return an ``int`` or ``None``; Series/arrays return a nullable
    ``Int64`` Series.
    """
    base = quarter_ordinal(base_year, base_quarter)
    if np.isscalar(year) and np.isscalar(quarter):
        k = int(quarter_ordinal(int(year), int(quarter)) - base)
        return k if -pre <= k <= post else None

    y = pd.to_numeric(pd.Series(year), errors="coerce")
    q = pd.to_numeric(pd.Series(quarter, index=y.index), errors="coerce")
    k = (quarter_ordinal(y, q) - base).astype("Float64").round().astype("Int64")
    inwin = k.between(-pre, post, inclusive="both").fillna(False).astype(bool)
    return k.where(inwin, pd.NA)


# ----------------------------
# Column naming
# ----------------------------
def _suffix(k: int) -> str:
    return f"minus{abs(k)}" if k < 0 else f"plus{k}"


def period_name(k: int) -> str:
    return PERIOD_PREFIX + _suffix(int(k))


def interaction_name(k: int) -> str:
    return TREAT_PREFIX + _suffix(int(k))


def offset_from_name(col: str) -> Optional[int]:
    """Parse period_/treat_ column names into integer event times."""
    for prefix in (PERIOD_PREFIX, TREAT_PREFIX):
        if col.startswith(prefix):
            rest = col[len(prefix):]
            if rest.startswith("minus"):
                return -int(rest[len("minus"):])
            if rest.startswith("plus"):
                return int(rest[len("plus"):])
    return None


def window_offsets(pre: int, post: int, include_reference: bool = True) -> List[int]:
    """Offsets -pre..post, optionally without the reference period 0."""
    return [k for k in range(-pre, post + 1) if include_reference or k != 0]


__all__ = [
    "quarter_ordinal",
    "year_quarter",
    "event_time",
    "period_name",
    "interaction_name",
    "offset_from_name",
    "window_offsets",
]
