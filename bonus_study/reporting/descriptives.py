# bonus_study/reporting/descriptives.py
from __future__ import annotations

from typing import Dict

import numpy as np
import pandas as pd

from ..helpers.config import StudyConfig
from ..helpers.utils import year_quarter


def reference_quarter_stats(panel: pd.DataFrame, config: StudyConfig) -> pd.DataFrame:
    """Mean and SD of employment and earnings by gender in the reference quarter."""
    cfg = config
    ry, rq = cfg.reference_quarter
    at_ref = panel[cfg.year_col].eq(ry) & panel[cfg.quarter_col].eq(rq)
    d = panel[at_ref.fillna(False).astype(bool)]
    gender = d[cfg.sex_col].map(cfg.gender_labels).fillna(d[cfg.sex_col].astype(str))

    values = [cfg.emp_col] + ([cfg.earn_col] if cfg.earn_col in d.columns else [])
    stats = d[values].groupby(gender).agg(["mean", "std", "count"])
    stats.columns = [f"{v}_{s}" for v, s in stats.columns]
    stats.index.name = "gender"

    # keep the panel's gender order (all, male, female)
    order = [lab for lab in cfg.gender_labels.values() if lab in stats.index]
    order += [g for g in stats.index if g not in order]
    return stats.loc[order].reset_index()


def employment_time_series(panel: pd.DataFrame, config: StudyConfig) -> pd.DataFrame:
    """Total employment by year-quarter, one column per gender."""
    cfg = config
    d = panel[[cfg.year_col, cfg.quarter_col, cfg.sex_col, cfg.emp_col]].copy()
    d["gender"] = d[cfg.sex_col].map(cfg.gender_labels).fillna(d[cfg.sex_col].astype(str))
    d["yq"] = year_quarter(d[cfg.year_col], d[cfg.quarter_col]).astype(float)
    d = d[d["yq"].notna()]
    wide = (
        d.pivot_table(index="yq", columns="gender", values=cfg.emp_col, aggfunc="sum")
        .sort_index()
    )
    order = [lab for lab in cfg.gender_labels.values() if lab in wide.columns]
    wide = wide[order + [c for c in wide.columns if c not in order]]
    wide.columns.name = None
    return wide.reset_index()


def exposure_summary(exposure: pd.DataFrame, config: StudyConfig) -> Dict[str, float]:
    z = pd.to_numeric(exposure[config.exposure_col], errors="coerce").dropna()
    if z.empty:
        return {"n": 0, "mean": np.nan, "sd": np.nan, "min": np.nan, "max": np.nan, "share_treated": np.nan}
    return {
        "n": int(z.size),
        "mean": float(z.mean()),
        "sd": float(z.std()),
        "min": float(z.min()),
        "max": float(z.max()),
        "share_treated": float((z < config.treat_threshold).mean()),
    }


__all__ = ["reference_quarter_stats", "employment_time_series", "exposure_summary"]
