import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import pytest

from bonus_study.reporting.descriptives import (
    employment_time_series,
    exposure_summary,
    reference_quarter_stats,
)
from bonus_study.reporting.plotting import (
    coefficient_points,
    plot_employment_series,
    plot_event_study_by_gender,
    plot_event_study_line,
    plot_exposure_histogram,
)


def _coefs(offsets, shift=0.0):
    beta = np.array([0.01 * k + shift for k in offsets])
    return pd.DataFrame(
        {"event_time": offsets, "beta": beta, "lo": beta - 0.02, "hi": beta + 0.02}
    )


def test_reference_quarter_stats(config):
    stats = reference_quarter_stats(config.panel_df, config)
    assert stats["gender"].tolist() == ["all", "male", "female"]
    base = config.panel_df[(config.panel_df["year"] == 2001) & (config.panel_df["quarter"] == 3)]
    male = base[base["sex"] == 1]["emp"]
    row = stats.set_index("gender").loc["male"]
    assert row["emp_mean"] == pytest.approx(male.mean())
    assert row["emp_std"] == pytest.approx(male.std())
    assert row["emp_count"] == len(male)
    assert "earnings_mean" in stats.columns


def test_reference_quarter_can_be_moved(config):
    cfg = config.copy()
    cfg.ref_year, cfg.ref_quarter = 1999, 1
    assert cfg.reference_quarter == (1999, 1)
    stats = reference_quarter_stats(cfg.panel_df, cfg)
    base = cfg.panel_df[(cfg.panel_df["year"] == 1999) & (cfg.panel_df["quarter"] == 1)]
    assert stats.set_index("gender").loc["all", "emp_mean"] == pytest.approx(base[base["sex"] == 0]["emp"].mean())


def test_employment_time_series(config):
    ts = employment_time_series(config.panel_df, config)
    assert list(ts.columns) == ["yq", "all", "male", "female"]
    assert ts["yq"].is_monotonic_increasing
    assert len(ts) == 17 * 4
    p = config.panel_df
    expected = p[(p["year"] == 2001) & (p["quarter"] == 3) & (p["sex"] == 2)]["emp"].sum()
    assert ts.set_index("yq").loc[2001.5, "female"] == pytest.approx(expected)


def test_exposure_summary(config):
    s = exposure_summary(config.exposure_df, config)
    assert s["n"] == 4
    assert s["share_treated"] == pytest.approx(0.5)
    assert s["min"] == pytest.approx(0.80)


def test_coefficient_points_sorted_without_reference():
    d = coefficient_points(_coefs([3, -2, 0, 1, -1]))
    assert d["event_time"].tolist() == [-2, -1, 1, 3]


def test_event_study_plot_saved(tmp_path):
    offsets = [k for k in range(-18, 42) if k != 0]
    path = tmp_path / "es.png"
    fig, ax, out = plot_event_study_line(_coefs(offsets), save=str(path), close=True)
    assert path.exists()
    assert out["path"] == str(path)
    assert out["n"] == 59
    labels = [t.get_text() for t in ax.get_xticklabels()]
    assert "0" not in labels and "-18" in labels and "41" in labels
    # vertical reference line at the policy quarter
    assert any(
        len(line.get_xdata()) == 2 and np.allclose(line.get_xdata(), [0.0, 0.0]) for line in ax.get_lines()
    )


def test_gender_overlay_plot(tmp_path):
    offsets = [-2, -1, 1, 2]
    series = {"male": _coefs(offsets), "female": _coefs(offsets, shift=0.05)}
    fig, ax, out = plot_event_study_by_gender(series, save=str(tmp_path / "g.png"), close=True)
    assert (tmp_path / "g.png").exists()
    assert out["n_series"] == 2
    _, labels = ax.get_legend_handles_labels()
    assert {"male", "female"} <= set(labels)


def test_descriptive_plots(config, tmp_path):
    _, _, out = plot_exposure_histogram(config.exposure_df["z0"], threshold=0.875, save=str(tmp_path / "h.png"), close=True)
    assert out["n"] == 4
    ts = employment_time_series(config.panel_df, config)
    _, _, out = plot_employment_series(ts, event_x=2001.5, save=str(tmp_path / "ts.png"), close=True)
    assert out["n_series"] == 3
    assert (tmp_path / "h.png").exists() and (tmp_path / "ts.png").exists()
    plt.close("all")
