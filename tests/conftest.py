import matplotlib

matplotlib.use("Agg")

import numpy as np
import pandas as pd
import pytest

from bonus_study.helpers.config import StudyConfig

BASE_ORD = 2001 * 4 + 2


def make_panel(
    states=(1, 2, 3),
    industries=(10, 11, 12, 13),
    z0=(0.80, 0.85, 0.90, 0.95),
    years=range(1996, 2013),
    sexes=(0, 1, 2),
    effect=-0.05,
    noise=0.0,
    seed=0,
):
    """Synthetic panel where treated industries (z0 < 0.875) lose ``effect``
    log points in post quarters 1..41, plus unit and state x time effects."""
    rng = np.random.default_rng(seed)
    exposure = pd.DataFrame({"industry": list(industries), "z0": list(z0)})
    treated = {i: z < 0.875 for i, z in zip(industries, z0)}
    state_time = {}
    rows = []
    for s in states:
        for ind in industries:
            unit_level = rng.uniform(5.0, 8.0)
            for sex in sexes:
                sex_shift = {0: 0.0, 1: -0.6, 2: -0.9}[sex]
                for y in years:
                    for q in (1, 2, 3, 4):
                        k = y * 4 + q - 1 - BASE_ORD
                        st = state_time.setdefault((s, k), rng.normal(0, 0.1))
                        eff = effect if (treated[ind] and 0 < k <= 41) else 0.0
                        ln_emp = unit_level + sex_shift + st + eff + (rng.normal(0, noise) if noise else 0.0)
                        rows.append(
                            {
                                "state": s,
                                "industry": ind,
                                "sex": sex,
                                "year": y,
                                "quarter": q,
                                "emp": float(np.exp(ln_emp)),
                                "earnings": 2500.0 + 5 * k,
                                "manuf": int(ind < 12),
                            }
                        )
    return pd.DataFrame(rows), exposure


@pytest.fixture
def synthetic():
    return make_panel()


@pytest.fixture
def config(synthetic):
    panel, exposure = synthetic
    return StudyConfig(panel_df=panel, exposure_df=exposure, verbose=False)
