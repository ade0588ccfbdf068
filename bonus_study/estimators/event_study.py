from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

import numpy as np
import pandas as pd
import pyfixest as pf

from ..helpers import defaults as D
from ..helpers.config import StudyConfig
from ..helpers.utils import offset_from_name
from ..robustness.stats.pretrend import joint_pretest_zero, pre_slope_test
from .base import EstimationError


@dataclass
class AbsorbedFit:
    model: Any
    used: pd.DataFrame
    regressors: List[str]        # estimated, in input order
    dropped: List[str]           # zero variance / absorbed / collinear
    n_clusters: int
    formula: str


@dataclass
class EventStudyResult:
    label: str
    coefs: pd.DataFrame          # cols: event_time, name, beta, se, p, lo, hi
    n_obs: int = 0
    n_clusters: int = 0
    dropped: List[str] = field(default_factory=list)
    pta_p: float = np.nan        # joint Wald test of the leads
    pre_slope_p: float = np.nan  # linear pre-trend test
    model: Any = None
    data: Optional[pd.DataFrame] = None

    @property
    def empty(self) -> bool:
        return self.coefs is None or self.coefs.empty


def outcome_name(config: StudyConfig) -> str:
    """Name of the log outcome built by PanelData for ``config.outcome_col``."""
    if config.outcome_col == config.earn_col:
        return "ln_earn"
    return "ln_emp"


def fe_formula(outcome: str, regressors: Sequence[str], fe_cols: Sequence[str]) -> str:
    """``y ~ x1 + x2 | fe1 + fe2`` (no ``|`` part when there are no fixed effects)."""
    rhs = " + ".join(regressors)
    if fe_cols:
        return f"{outcome} ~ {rhs} | {' + '.join(fe_cols)}"
    return f"{outcome} ~ {rhs}"


def fit_absorbed_wls(
    df: pd.DataFrame,
    outcome: str,
    regressors: Sequence[str],
    fe_cols: Sequence[str],
    weight_col: str,
    cluster_col: str,
    *,
    cov_type: str = "cluster",
    fixef_tol: float = 1e-8,
) -> AbsorbedFit:
    """Weighted least squares with absorbed fixed effects (pyfixest ``feols``).

    Rows missing any needed variable, or with a non-positive weight, are
    dropped.  Regressors without variation in the used sample are left
    out before fitting; regressors that pyfixest removes as collinear with
    the fixed effects or with earlier regressors are also listed in
    ``dropped``.  ``cov_type`` is ``"cluster"`` (CRV1 on ``cluster_col``,
    small-sample correction counting the non-nested fixed effects) or
    ``"nonrobust"``.
    """
    regressors = list(regressors)
    need = [outcome, weight_col, cluster_col] + list(fe_cols) + regressors
    used = df.dropna(subset=list(dict.fromkeys(need))).copy()
    used = used[used[weight_col] > 0]
    if used.empty:
        raise EstimationError("No complete observations for the regression.")

    varies = used[regressors].astype(float).std(axis=0, ddof=0) > 0
    cols = [c for c in regressors if varies[c]]
    if not cols:
        raise EstimationError("All regressors are constant in the estimation sample.")

    n_clusters = int(used[cluster_col].nunique())
    if cov_type == "cluster":
        if n_clusters < 2:
            raise EstimationError("Clustered standard errors need at least two clusters.")
        vcov: Any = {"CRV1": cluster_col}
    elif cov_type == "nonrobust":
        vcov = "iid"
    else:
        raise ValueError(f"Unknown cov_type {cov_type!r}; use 'cluster' or 'nonrobust'.")

    fml = fe_formula(outcome, cols, fe_cols)
    model_cols = list(dict.fromkeys([outcome, weight_col, cluster_col] + list(fe_cols) + cols))
    m = pf.feols(
        fml,
        data=used[model_cols],
        vcov=vcov,
        weights=weight_col,
        fixef_rm="none",
        fixef_tol=fixef_tol,
    )

    est = set(m.coef().index)
    names = [c for c in cols if c in est]
    if not names:
        raise EstimationError("No regressor survives fixed-effect absorption.")
    b = m.coef().loc[names].to_numpy(float)
    se = m.se().loc[names].to_numpy(float)
    if not (np.all(np.isfinite(b)) and np.all(np.isfinite(se))):
        raise EstimationError("Regression produced non-finite coefficients or standard errors.")

    return AbsorbedFit(
        model=m,
        used=used,
        regressors=names,
        dropped=[c for c in regressors if c not in names],
        n_clusters=n_clusters,
        formula=fml,
    )


def event_study(
    sample: pd.DataFrame,
    config: StudyConfig,
    interaction_cols: Sequence[str],
    label: str = "overall",
    *,
    fe_cols: Sequence[str] = (D.UNIT_ID, D.STATE_TIME_ID),
    cluster_col: str = D.UNIT_ID,
) -> EventStudyResult:
    """ln(outcome) on treat x period interactions with absorbed FE.

    ``sample`` must carry the baseline ``weight`` column.  Offset 0 has no
    interaction column and is the reference period.
    """
    outcome = outcome_name(config)
    if sample.empty:
        print(f"[Event Study][{label}] empty sample; skipped.")
        return EventStudyResult(label=label, coefs=pd.DataFrame())

    fit = fit_absorbed_wls(
        sample,
        outcome,
        interaction_cols,
        fe_cols,
        D.WEIGHT,
        cluster_col,
        cov_type="cluster",
        fixef_tol=config.fixef_tol,
    )
    m = fit.model

    # ------------------------------------------------------------------
    # Coefficient table
    # ------------------------------------------------------------------
    coef = m.coef()
    se = m.se()
    pval = m.pvalue()
    ci = m.confint(alpha=config.alpha)
    rows: List[Dict[str, Any]] = []
    for col in fit.regressors:
        tau = offset_from_name(col)
        if tau is None:
            continue
        rows.append(
            {
                "event_time": tau,
                "name": col,
                "beta": float(coef[col]),
                "se": float(se[col]),
                "p": float(pval[col]),
                "lo": float(ci.loc[col].iloc[0]),
                "hi": float(ci.loc[col].iloc[1]),
            }
        )
    coef_tab = pd.DataFrame(rows).sort_values("event_time").reset_index(drop=True)

    # ------------------------------------------------------------------
    # Pre-trend tests over the estimated leads
    # ------------------------------------------------------------------
    leads = [c for c in fit.regressors if (offset_from_name(c) or 0) < 0]
    pta_p = np.nan
    slope_p = np.nan
    if leads:
        pta_p = joint_pretest_zero(m, leads)["p_value"]
    if len(leads) >= 2:
        slope_p = pre_slope_test(m, leads, [offset_from_name(c) for c in leads])["p_value"]

    if fit.dropped:
        print(f"[Event Study][{label}] dropped {len(fit.dropped)} regressors without usable variation: "
              f"{', '.join(fit.dropped[:8])}{' ...' if len(fit.dropped) > 8 else ''}")
    print(f"[Event Study][{label}] n={len(fit.used)}, clusters={fit.n_clusters}, "
          f"coefs={len(coef_tab)}")

    return EventStudyResult(
        label=label,
        coefs=coef_tab,
        n_obs=int(len(fit.used)),
        n_clusters=fit.n_clusters,
        dropped=fit.dropped,
        pta_p=float(pta_p),
        pre_slope_p=float(slope_p),
        model=m,
        data=fit.used,
    )


__all__ = [
    "AbsorbedFit",
    "EventStudyResult",
    "fe_formula",
    "fit_absorbed_wls",
    "event_study",
    "outcome_name",
]
