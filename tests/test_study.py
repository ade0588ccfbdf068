import os

import numpy as np
import pytest

from bonus_study import BonusStudy, StudyConfig
from bonus_study.helpers.preparation import load_panel_data
from bonus_study.reporting.summary import print_study_summary

from conftest import make_panel


@pytest.fixture
def study_config(tmp_path):
    panel, exposure = make_panel(noise=0.02, seed=21)
    return StudyConfig(
        panel_df=panel,
        exposure_df=exposure,
        artifact_dir=str(tmp_path / "artifacts"),
        verbose=False,
    )


def test_full_run_produces_three_event_studies(study_config):
    result = BonusStudy(study_config).run()
    assert list(result.event_studies) == ["overall", "male", "female"]
    for res in result.event_studies.values():
        assert not res.empty
        assert len(res.coefs) == 59
        assert np.isfinite(res.coefs["beta"]).all()

    post = result.event_studies["overall"].coefs
    assert post.loc[post["event_time"] > 0, "beta"].mean() == pytest.approx(-0.05, abs=0.02)


def test_artifacts_written(study_config):
    result = BonusStudy(study_config).run()
    expected = {
        "z0_histogram",
        "employment_by_gender",
        "event_study_overall",
        "event_study_male",
        "event_study_female",
        "event_study_by_gender",
    }
    assert set(result.figures) == expected
    for path in result.figures.values():
        assert os.path.exists(path)
        assert os.path.dirname(path) == study_config.artifact_dir

    loaded = load_panel_data(result.merged_path)
    assert len(loaded["panel"]) == len(study_config.panel_df)
    assert len(loaded["interaction_cols"]) == 59


def test_run_without_plots(study_config):
    study = BonusStudy(study_config)
    result = study.run(run_plots=False)
    assert result.figures == {}
    assert study.panel is result.data
    assert set(result.descriptives) == {"reference_stats", "employment_series", "exposure"}


def test_accessors_before_run(study_config):
    study = BonusStudy(study_config)
    with pytest.raises(RuntimeError):
        study.panel
    with pytest.raises(RuntimeError):
        study.estimator


def test_summary_prints_every_block(study_config, capsys):
    result = BonusStudy(study_config).run(run_plots=False)
    print_study_summary(result)
    out = capsys.readouterr().out
    assert "DESCRIPTIVES" in out
    for label in ("overall", "male", "female"):
        assert f"EVENT STUDY: {label}" in out
    assert "Pre-trends" in out
