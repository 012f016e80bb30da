import json
from pathlib import Path

import pandas as pd
import pytest

from application import run_model_evaluation, save_data_fingerprint, save_evaluation_artifacts
from application.evaluation import EvaluationOutputs, resolve_model_columns
from domain.synthetic import generate_student_dataset
from infrastructure.config.models import ColumnsConfig, RunConfig, StatsConfig, SyntheticDataConfig, ThresholdConfig
from infrastructure.io import read_table, write_table


@pytest.fixture(scope="module")
def students() -> pd.DataFrame:
    return generate_student_dataset(SyntheticDataConfig(n_districts=3, size_scale=0.1))


def _run_config(**overrides: object) -> RunConfig:
    fields = {
        "data_file_path": Path("data/montucky.csv"),
        "columns": ColumnsConfig(
            outcome_col="ontime_grad",
            predictor_cols=["scale_score_7_math", "pct_days_absent_7", "iep_7", "male"],
            cluster_col="sch_g7_code",
            group_cols=["iep_7"],
            effect_size_cols=["scale_score_7_math"],
        ),
        "stats": StatsConfig(n_boot=50),
        "test_fraction": 0.25,
    }
    fields.update(overrides)
    return RunConfig(**fields)


def test_run_model_evaluation(students: pd.DataFrame) -> None:
    outputs = run_model_evaluation(_run_config(), students)
    metrics = outputs.metrics

    assert 0.0 <= metrics["auc"] <= 1.0
    assert 0.0 <= metrics["holdout_auc"] <= 1.0
    assert metrics["pseudo_r_squared"] is not None
    assert metrics["holdout_pseudo_r_squared"] is None
    assert outputs.holdout_cm_df is not None

    assert list(outputs.coef_df.index) == ["const", "scale_score_7_math", "pct_days_absent_7", "iep_7", "male"]
    assert {"std_error_naive", "std_error_cluster", "p_value_cluster"} <= set(outputs.coef_df.columns)

    assert outputs.effect_df is not None
    assert outputs.effect_df.loc[0, "group_col"] == "iep_7"
    # Students on an IEP score lower on average
    assert outputs.effect_df.loc[0, "std_mean_diff"] < 0


def test_run_without_holdout_or_clusters(students: pd.DataFrame) -> None:
    cfg = _run_config(test_fraction=None)
    cfg.columns.cluster_col = None

    outputs = run_model_evaluation(cfg, students)

    assert outputs.holdout_cm_df is None
    assert "holdout_auc" not in outputs.metrics
    assert "std_error_cluster" not in outputs.coef_df.columns


def test_unknown_columns_raise(students: pd.DataFrame) -> None:
    cfg = _run_config(
        columns=ColumnsConfig(outcome_col="ontime_grad", predictor_cols=["not_a_column"]),
    )
    with pytest.raises(KeyError):
        resolve_model_columns(cfg, students)


def test_artifacts_are_written(students: pd.DataFrame, tmp_path: Path) -> None:
    cfg = _run_config()
    outputs = run_model_evaluation(cfg, students)

    paths = save_evaluation_artifacts(outputs, tmp_path)
    fingerprint = save_data_fingerprint(cfg, students, tmp_path)

    assert all(path.exists() for path in paths.values())
    assert "Holdout confusion matrix" in paths

    metrics = json.loads(paths["Metrics JSON"].read_text(encoding="utf-8"))
    assert metrics["n_obs"] == outputs.metrics["n_obs"]
    assert json.loads(fingerprint.read_text(encoding="utf-8"))["rows"] == len(students)

    cm = pd.read_csv(paths["Confusion matrix"], index_col=0)
    assert list(cm.index) == ["Pred FALSE", "Pred TRUE"]


def test_holdout_reuses_training_threshold(students: pd.DataFrame) -> None:
    outputs = run_model_evaluation(_run_config(threshold=ThresholdConfig(confusion_threshold="optimal")), students)
    metrics = outputs.metrics

    assert metrics["holdout_optimal_threshold"] == metrics["optimal_threshold"]
    assert metrics["holdout_confusion_threshold"] == metrics["optimal_threshold"]


def test_metrics_json_writes_nan_as_null(tmp_path: Path) -> None:
    cm_df = pd.DataFrame(
        [[0, 0, float("nan")], [1, 1, 0.5]],
        index=["Pred FALSE", "Pred TRUE"],
        columns=["Obs FALSE", "Obs TRUE", "class.error"],
    )
    outputs = EvaluationOutputs(
        metrics={"auc": 0.5, "class_error": cm_df["class.error"].tolist(), "pseudo_r_squared": None},
        cm_df=cm_df,
        coef_df=pd.DataFrame({"estimate": [0.1]}, index=["const"]),
    )

    paths = save_evaluation_artifacts(outputs, tmp_path)
    text = paths["Metrics JSON"].read_text(encoding="utf-8")

    assert "NaN" not in text
    assert json.loads(text)["class_error"] == [None, 0.5]


def test_read_write_table_round_trip(students: pd.DataFrame, tmp_path: Path) -> None:
    path = write_table(students.head(20), tmp_path / "out" / "students.csv")
    assert read_table(path).shape == (20, students.shape[1])

    with pytest.raises(ValueError):
        write_table(students.head(2), tmp_path / "students.parquet")
    with pytest.raises(FileNotFoundError):
        read_table(tmp_path / "missing.csv")
