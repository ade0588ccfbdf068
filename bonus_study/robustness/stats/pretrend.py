"""
Pre-trend diagnostics for the event-study leads.

The lead coefficients (``treat_minus18`` .. ``treat_minus1``) measure
differences between treated and control industries before the 2001
policy change.  Two Wald tests are provided: a joint test that all
leads are zero and a one-degree-of-freedom test for a linear trend
across them.  Both use the cluster-robust covariance already attached
to the fitted pyfixest model, and are meant for reporting only.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Sequence, Tuple

import numpy as np
import pandas as pd
from scipy.stats import chi2


def _params_cov(result) -> Tuple[pd.Series, pd.DataFrame]:
    b = result.coef()
    V = pd.DataFrame(np.asarray(result._vcov, dtype=float), index=b.index, columns=b.index)
    return b, V


def _lead_block(result, names: Sequence[str]):
    params, cov = _params_cov(result)
    present = [n for n in names if n in params.index]
    if not present:
        raise ValueError("None of the requested lead coefficients were estimated.")
    b = params.loc[present].to_numpy(float)
    V = cov.loc[present, present].to_numpy(float)
    return present, b, 0.5 * (V + V.T)


def joint_pretest_zero(result, lead_names: Sequence[str]) -> Dict[str, Any]:
    """Chi-square Wald test of H0: every lead coefficient is zero.

    Returns ``stat``, ``df``, ``p_value`` and ``tested`` (names found in
    the model; dropped regressors are skipped).
    """
    names, b, V = _lead_block(result, lead_names)
    # pseudo-inverse: lead covariances are often near singular
    stat = float(b @ np.linalg.pinv(V, rcond=1e-12) @ b)
    k = len(names)
    return {"stat": stat, "df": k, "p_value": float(chi2.sf(stat, df=k)), "tested": names}


def linear_contrast(event_times: Sequence[int]) -> np.ndarray:
    """Mean-zero, unit-norm weights proportional to event time."""
    w = np.asarray(event_times, dtype=float)
    w = w - w.mean()
    norm = np.linalg.norm(w)
    return w / (norm if norm > 0 else 1.0)


def pre_slope_test(
    result,
    lead_names: Sequence[str],
    event_times: Optional[Sequence[int]] = None,
) -> Dict[str, Any]:
    """Wald test that a linear contrast of the leads is zero.

    ``event_times`` must align with ``lead_names``; names missing from the
    fitted model are removed together with their event time.
    """
    if event_times is None or len(event_times) != len(lead_names):
        raise ValueError("Provide event_times matching lead_names.")
    keep = {n: t for n, t in zip(lead_names, event_times) if n in result.coef().index}
    names, b, V = _lead_block(result, list(keep))
    if len(names) < 2:
        raise ValueError("A slope test needs at least two lead coefficients.")
    L = linear_contrast([keep[n] for n in names])
    Lb = float(L @ b)
    var = float(L @ V @ L)
    stat = 0.0 if var <= 0 else Lb * Lb / var
    return {"stat": stat, "df": 1, "p_value": float(chi2.sf(stat, df=1)), "contrast": L, "tested": names}


__all__ = ["joint_pretest_zero", "linear_contrast", "pre_slope_test"]
