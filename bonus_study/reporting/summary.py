# summary.py
from __future__ import annotations

from typing import Any, Dict, Optional

import numpy as np
import pandas as pd

from .plotting import plot_event_study_by_gender, plot_event_study_line

# ================================
# Formatting helpers
# ================================

def _fmt_p(p: Optional[float]) -> str:
    if p is None or (isinstance(p, float) and (np.isnan(p) or np.isinf(p))):
        return "NA"
    return f"{p:.3f}" if p >= 0.001 else "<0.001"


def _stars(p: float) -> str:
    if not np.isfinite(p):
        return ""
    if p < 0.01:
        return "***"
    if p < 0.05:
        return "**"
    if p < 0.10:
        return "*"
    return ""


def _rule(title: str | None = None) -> None:
    line = "=" * 78
    if title:
        print(f"\n{line}\n{title}\n{line}")
    else:
        print(f"\n{line}")


# ================================
# Blocks
# ================================

def print_panel_block(info: Dict[str, Any]) -> None:
    _rule("PANEL")
    base = info.get("baseline", ("NA", "NA"))
    print(
        f"Obs: {info.get('n_obs', 'NA')} | Units (state x industry): {info.get('n_units', 'NA')} | "
        f"Treated units: {info.get('n_treated_units', 'NA')}"
    )
    print(
        f"States: {info.get('n_states', 'NA')} | Industries: {info.get('n_industries', 'NA')} | "
        f"Genders: {', '.join(map(str, info.get('genders', [])))}"
    )
    print(
        f"Baseline: {base[0]}Q{base[1]} | Window: -{info.get('pre', 'NA')}..+{info.get('post', 'NA')} | "
        f"Treated iff z0 < {info.get('treat_threshold', 'NA')}"
    )
    print(
        f"Rows without exposure: {info.get('n_missing_exposure', 0)} | "
        f"Rows with missing ln(emp): {info.get('n_missing_ln_emp', 0)} | "
        f"Rows with missing year/quarter: {info.get('n_missing_time', 0)}"
    )


def print_descriptives_block(descriptives: Dict[str, Any]) -> None:
    _rule("DESCRIPTIVES")
    ref = descriptives.get("reference_stats")
    if isinstance(ref, pd.DataFrame) and not ref.empty:
        print("[reference quarter: employment / earnings by gender]")
        print(ref.to_string(index=False, float_format=lambda v: f"{v:,.1f}"))
    exp = descriptives.get("exposure")
    if exp:
        print(
            f"\n[z0] n={exp['n']} mean={exp['mean']:.3f} sd={exp['sd']:.3f} "
            f"range=[{exp['min']:.3f}, {exp['max']:.3f}] share treated={exp['share_treated']:.1%}"
        )


def print_es_block(res: Any, *, head: int = 8, plot: bool = False) -> None:
    _rule(f"EVENT STUDY: {res.label}")
    if res.empty:
        print("(no event-study results)")
        return
    print(f"n={res.n_obs} | clusters={res.n_clusters} | coefficients={len(res.coefs)}")
    if res.dropped:
        print(f"Dropped (no variation): {', '.join(res.dropped)}")
    d = res.coefs.copy()
    d["sig"] = d["p"].map(_stars)
    with pd.option_context("display.width", 120):
        print(d[["event_time", "beta", "se", "lo", "hi", "p", "sig"]].head(head).to_string(index=False))
    print(f"Pre-trends: joint leads = 0 p = {_fmt_p(res.pta_p)} | linear slope p = {_fmt_p(res.pre_slope_p)}")
    post = d[d["event_time"] > 0]
    if not post.empty:
        print(f"Mean post-period coefficient: {post['beta'].mean():+.4f}")

    if plot:
        try:
            plot_event_study_line(res, title=f"Event study ({res.label})", show=True)
        except Exception as e:
            print(f"[plot warning] could not plot ES: {e}")


def print_study_summary(result: Any, *, plot: bool = False) -> None:
    """Print panel stats, descriptives and every event-study run."""
    print_panel_block(getattr(result.data, "info", {}) or {})
    print_descriptives_block(result.descriptives or {})
    for res in (result.event_studies or {}).values():
        print_es_block(res, plot=plot)

    by_gender = {k: v for k, v in (result.event_studies or {}).items() if k in ("male", "female")}
    if plot and len(by_gender) > 1:
        try:
            plot_event_study_by_gender(by_gender, show=True)
        except Exception as e:
            print(f"[plot warning] could not plot ES by gender: {e}")

    if result.figures:
        _rule("FIGURES")
        for name, path in result.figures.items():
            print(f"  - {name}: {path}")


__all__ = [
    "print_panel_block",
    "print_descriptives_block",
    "print_es_block",
    "print_study_summary",
]
