# bonus_study/helpers/preparation.py
from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from pathlib import Path

import joblib
import numpy as np
import pandas as pd

from .config import StudyConfig
from . import defaults as D
from .utils import (
    event_time,
    interaction_name,
    period_name,
    quarter_ordinal,
    window_offsets,
    year_quarter,
)


# ----------------------------
# Merge + treatment
# ----------------------------
def merge_exposure(panel: pd.DataFrame, exposure: pd.DataFrame, config: StudyConfig) -> pd.DataFrame:
    """Many-to-one join of z0 onto the panel and the threshold treatment flag.

    Unmatched industries keep z0 (and therefore ``treat``) missing.
    """
    cfg = config
    n_before = len(panel)
    m = panel.merge(
        exposure[[cfg.industry_col, cfg.exposure_col]],
        on=cfg.industry_col,
        how="left",
        validate="many_to_one",
    )
    if len(m) != n_before:
        raise ValueError(f"Exposure merge changed row count: {n_before} -> {len(m)}")

    unmatched = m[cfg.exposure_col].isna()
    if unmatched.any():
        n_ind = m.loc[unmatched, cfg.industry_col].nunique()
        print(f"[prepare] {int(unmatched.sum())} rows ({n_ind} industries) without exposure; treat left missing.")

    m[D.TREAT] = treatment_flag(m[cfg.exposure_col], cfg.treat_threshold)
    return m


def treatment_flag(z0: pd.Series, threshold: float) -> pd.Series:
    """1 if z0 < threshold (strict), 0 if z0 >= threshold, missing if z0 is missing."""
    z = pd.to_numeric(z0, errors="coerce")
    flag = (z < threshold).astype("Int64")
    return flag.mask(z.isna(), pd.NA)


# ----------------------------
# Design matrix
# ----------------------------
def period_columns(pre: int, post: int) -> List[str]:
    return [period_name(k) for k in window_offsets(pre, post, include_reference=True)]


def interaction_columns(pre: int, post: int) -> List[str]:
    return [interaction_name(k) for k in window_offsets(pre, post, include_reference=False)]


def add_period_indicators(df: pd.DataFrame, pre: int, post: int, event_col: str = D.EVENT_TIME) -> pd.DataFrame:
    """One int8 indicator per offset in [-pre, post] (reference 0 included).

    Rows with a missing event time are 0 in every indicator.
    """
    evt = pd.to_numeric(df[event_col], errors="coerce").astype(float)
    block = {
        period_name(k): (evt == k).astype("int8")
        for k in window_offsets(pre, post, include_reference=True)
    }
    out = df.drop(columns=list(block), errors="ignore")
    return pd.concat([out, pd.DataFrame(block, index=df.index)], axis=1)


def add_interactions(df: pd.DataFrame, pre: int, post: int, treat_col: str = D.TREAT) -> pd.DataFrame:
    """treat x period_k for every k != 0; offset 0 is the omitted reference.

    A missing treatment flag yields missing interactions.
    """
    treat = pd.to_numeric(df[treat_col], errors="coerce").astype(float)
    block = {
        interaction_name(k): df[period_name(k)].astype(float) * treat
        for k in window_offsets(pre, post, include_reference=False)
    }
    out = df.drop(columns=list(block), errors="ignore")
    return pd.concat([out, pd.DataFrame(block, index=df.index)], axis=1)


# ----------------------------
# Baseline weights
# ----------------------------
def baseline_weights(
    df: pd.DataFrame,
    config: StudyConfig,
    group_cols: Optional[Sequence[str]] = None,
) -> pd.DataFrame:
    """Employment in the baseline quarter summed per (state, industry)."""
    cfg = config
    group_cols = list(group_cols or [cfg.state_col, cfg.industry_col])
    at_base = df[cfg.year_col].eq(cfg.base_year) & df[cfg.quarter_col].eq(cfg.base_quarter)
    base = df[at_base.fillna(False).astype(bool)]
    return (
        base.groupby(group_cols, as_index=False)[cfg.emp_col]
        .sum(min_count=1)
        .rename(columns={cfg.emp_col: D.WEIGHT})
    )


def attach_baseline_weight(
    df: pd.DataFrame,
    config: StudyConfig,
    group_cols: Optional[Sequence[str]] = None,
) -> pd.DataFrame:
    """Return a copy of ``df`` with the time-invariant baseline weight merged on."""
    cfg = config
    group_cols = list(group_cols or [cfg.state_col, cfg.industry_col])
    w = baseline_weights(df, cfg, group_cols)
    out = df.drop(columns=[D.WEIGHT], errors="ignore").merge(w, on=group_cols, how="left")
    missing = out[D.WEIGHT].isna()
    if missing.any():
        n_units = out.loc[missing, group_cols].drop_duplicates().shape[0]
        print(f"[prepare] {n_units} units have no baseline-quarter employment; weight left missing.")
    return out


# ----------------------------
# Panel builder
# ----------------------------
class PanelData:
    """
    State x industry x gender x quarter panel ready for the event study:
      - z0 merged many-to-one and the threshold treatment flag,
      - log outcomes (missing for zero employment),
      - state x industry and state x time group ids,
      - quarters since 2001Q3, bounded to the event window,
      - period indicators and treat x period interactions.

    Baseline weights are attached per estimation sample by the estimator,
    since they differ across the gender subsets.
    """

    def __init__(self, config: StudyConfig, panel: pd.DataFrame, exposure: pd.DataFrame) -> None:
        self.config = config.copy()
        self.panel: Optional[pd.DataFrame] = None
        self.info: Dict[str, Any] = {}
        self.period_cols: List[str] = []
        self.interaction_cols: List[str] = []
        self._prepare(panel, exposure)

    def _prepare(self, panel: pd.DataFrame, exposure: pd.DataFrame) -> None:
        cfg = self.config

        # ---------- (1) Merge exposure + treatment ----------
        g = merge_exposure(panel, exposure, cfg)

        # ---------- (2) Outcomes ----------
        emp = pd.to_numeric(g[cfg.emp_col], errors="coerce")
        g["ln_emp"] = np.log(emp.where(emp > 0))
        if cfg.earn_col in g.columns:
            earn = pd.to_numeric(g[cfg.earn_col], errors="coerce")
            g["ln_earn"] = np.log(earn.where(earn > 0))

        # ---------- (3) Time + group ids ----------
        year = g[cfg.year_col].astype("Int64")
        quarter = g[cfg.quarter_col].astype("Int64")
        g["yq"] = year_quarter(year, quarter).astype(float)
        g["qtr_ord"] = quarter_ordinal(year, quarter)
        g[D.UNIT_ID] = g[cfg.state_col].astype(str) + "_" + g[cfg.industry_col].astype(str)
        g[D.STATE_TIME_ID] = (
            g[cfg.state_col].astype(str) + "_" + g["qtr_ord"].astype(str)
        ).where(g["qtr_ord"].notna())

        # ---------- (4) Event time ----------
        g[D.EVENT_TIME] = event_time(
            g[cfg.year_col], g[cfg.quarter_col],
            base_year=cfg.base_year, base_quarter=cfg.base_quarter,
            pre=cfg.pre, post=cfg.post,
        )

        # ---------- (5) Indicators + interactions ----------
        g = add_period_indicators(g, cfg.pre, cfg.post)
        g = add_interactions(g, cfg.pre, cfg.post)
        self.period_cols = period_columns(cfg.pre, cfg.post)
        self.interaction_cols = interaction_columns(cfg.pre, cfg.post)

        # ---------- (6) Stats & info ----------
        units = g[D.UNIT_ID].nunique()
        treated_units = g.loc[g[D.TREAT] == 1, D.UNIT_ID].nunique()
        in_window = int(g[D.EVENT_TIME].notna().sum())
        zero_emp = int(g["ln_emp"].isna().sum())
        missing_time = int(g["qtr_ord"].isna().sum())
        print("=== PANEL STATS ===")
        print(
            f"Units: {units} | Treated units: {treated_units} | Obs: {len(g)} | "
            f"In window: {in_window} ({in_window / max(len(g), 1):.1%}) | Missing ln(emp): {zero_emp} | "
            f"Missing time: {missing_time}"
        )

        self.info = {
            "n_obs": int(len(g)),
            "n_units": int(units),
            "n_treated_units": int(treated_units),
            "n_industries": int(g[cfg.industry_col].nunique()),
            "n_states": int(g[cfg.state_col].nunique()),
            "n_in_window": in_window,
            "n_missing_exposure": int(g[cfg.exposure_col].isna().sum()),
            "n_missing_ln_emp": zero_emp,
            "n_missing_time": missing_time,
            "genders": sorted(g["gender"].dropna().unique().tolist()) if "gender" in g.columns else [],
            "baseline": (cfg.base_year, cfg.base_quarter),
            "treat_threshold": cfg.treat_threshold,
            "pre": int(cfg.pre),
            "post": int(cfg.post),
        }
        self.panel = g

    # ---------- persistence
    def save(self, path: str) -> str:
        Path(path).parent.mkdir(parents=True, exist_ok=True)
        joblib.dump(
            {
                "panel": self.panel,
                "info": self.info,
                "period_cols": self.period_cols,
                "interaction_cols": self.interaction_cols,
            },
            path,
        )
        print(f"[prepare] Saved merged panel -> {path}")
        return path


def load_panel_data(path: str) -> Dict[str, Any]:
    """Reload a table written by :meth:`PanelData.save`."""
    return joblib.load(path)


__all__ = [
    "PanelData",
    "merge_exposure",
    "treatment_flag",
    "period_columns",
    "interaction_columns",
    "add_period_indicators",
    "add_interactions",
    "baseline_weights",
    "attach_baseline_weight",
    "load_panel_data",
]
