# bonus_study/helpers/loading.py
from __future__ import annotations

from typing import Iterable, List, Optional

import pandas as pd

from .config import StudyConfig


def _check_columns(df: pd.DataFrame, need: Iterable[str], what: str) -> None:
    miss = set(need) - set(df.columns)
    if miss:
        raise ValueError(f"Missing columns in {what}: {sorted(miss)}")


def _read_delimited(path: str, sep: Optional[str]) -> pd.DataFrame:
    if sep is None:
        # python engine sniffs the delimiter
        return pd.read_csv(path, sep=None, engine="python")
    return pd.read_csv(path, sep=sep)


def _coerce_numeric(df: pd.DataFrame, cols: List[str]) -> pd.DataFrame:
    for c in cols:
        df[c] = pd.to_numeric(df[c], errors="coerce")
    return df


def clean_panel(df: pd.DataFrame, config: StudyConfig) -> pd.DataFrame:
    """Validate and normalise a raw panel frame.

    Numeric columns are coerced (bad cells become NaN), gender codes are
    labelled and the (state, industry, gender, year, quarter) key is
    checked for uniqueness.  Rows with an unusable year or quarter are
    kept with both set to missing (nullable ``Int64``).
    """
    cfg = config
    need = [
        cfg.state_col, cfg.industry_col, cfg.sex_col,
        cfg.year_col, cfg.quarter_col, cfg.emp_col,
    ]
    _check_columns(df, need, "panel")
    d = df.copy()

    numeric = [cfg.sex_col, cfg.year_col, cfg.quarter_col, cfg.emp_col]
    numeric += [c for c in (cfg.earn_col, cfg.manuf_col) if c in d.columns]
    d = _coerce_numeric(d, numeric)

    # unusable time cells stay in the table as missing
    bad_time = (
        d[cfg.year_col].isna()
        | (d[cfg.year_col] % 1 != 0)
        | ~d[cfg.quarter_col].isin([1, 2, 3, 4])
    )
    if bad_time.any():
        print(f"[load] {int(bad_time.sum())} panel rows with unusable year/quarter; time left missing.")
    d[cfg.year_col] = d[cfg.year_col].mask(bad_time).astype("Int64")
    d[cfg.quarter_col] = d[cfg.quarter_col].mask(bad_time).astype("Int64")

    d["gender"] = d[cfg.sex_col].map(cfg.gender_labels)

    key = [cfg.state_col, cfg.industry_col, cfg.sex_col, cfg.year_col, cfg.quarter_col]
    dup = d.duplicated(subset=key, keep=False) & ~bad_time
    if dup.any():
        raise ValueError(
            f"Panel key {key} is not unique: {int(dup.sum())} duplicated rows."
        )

    if cfg.manufacturing_only:
        _check_columns(d, [cfg.manuf_col], "panel")
        before = len(d)
        d = d[d[cfg.manuf_col] == 1].copy()
        print(f"[load] Manufacturing only: kept {len(d)} of {before} rows.")

    return d.reset_index(drop=True)


def clean_exposure(df: pd.DataFrame, config: StudyConfig) -> pd.DataFrame:
    cfg = config
    _check_columns(df, [cfg.industry_col, cfg.exposure_col], "exposure")
    d = df[[cfg.industry_col, cfg.exposure_col]].copy()
    d = _coerce_numeric(d, [cfg.exposure_col])
    dup = d[cfg.industry_col].duplicated(keep=False)
    if dup.any():
        raise ValueError(
            f"Exposure table has {int(dup.sum())} rows with duplicated {cfg.industry_col!r}; "
            "z0 must be defined once per industry."
        )
    return d.reset_index(drop=True)


def load_panel(path: str, config: StudyConfig) -> pd.DataFrame:
    raw = _read_delimited(path, config.sep)
    print(f"[load] Panel: {len(raw)} rows from {path}")
    return clean_panel(raw, config)


def load_exposure(path: str, config: StudyConfig) -> pd.DataFrame:
    raw = _read_delimited(path, config.sep)
    print(f"[load] Exposure: {len(raw)} industries from {path}")
    return clean_exposure(raw, config)


def load_inputs(config: StudyConfig) -> tuple:
    """Return (panel, exposure) from the frames or paths on the config."""
    if config.panel_df is not None:
        panel = clean_panel(config.panel_df, config)
    elif config.panel_path:
        panel = load_panel(config.panel_path, config)
    else:
        raise ValueError("StudyConfig needs panel_df or panel_path.")

    if config.exposure_df is not None:
        exposure = clean_exposure(config.exposure_df, config)
    elif config.exposure_path:
        exposure = load_exposure(config.exposure_path, config)
    else:
        raise ValueError("StudyConfig needs exposure_df or exposure_path.")
    return panel, exposure


__all__ = ["clean_panel", "clean_exposure", "load_panel", "load_exposure", "load_inputs"]
