import numpy as np
import pandas as pd
import pytest
import statsmodels.api as sm

from application.modeling import build_design_matrix, fit_logistic_model, summarize_logit, summarize_predictions
from domain.evaluation import compute_cluster_robust_vcov, compute_pseudo_r_squared


def _student_frame(n: int = 400, n_schools: int = 20, seed: int = 5) -> pd.DataFrame:
    rng = np.random.default_rng(seed)
    school = np.arange(n) % n_schools
    school_effect = rng.normal(0, 0.5, size=n_schools)
    math = rng.normal(size=n)
    iep = rng.binomial(1, 0.2, size=n)
    grp = rng.choice(["a", "b", "c"], size=n)
    logit = 0.3 + 1.0 * math - 0.7 * iep + np.where(grp == "c", 0.4, 0.0) + school_effect[school]
    return pd.DataFrame(
        {
            "grad": rng.binomial(1, 1 / (1 + np.exp(-logit))),
            "math": math,
            "iep": iep,
            "grp": grp,
            "school": school,
        }
    )


def test_summarize_logit_fields() -> None:
    df = _student_frame()
    results = fit_logistic_model(df, "grad", ["math", "iep"])
    summary = summarize_logit(results)

    assert summary.n_obs == len(df)
    assert summary.rank == 3
    assert summary.param_names == ["const", "math", "iep"]
    assert summary.score_matrix.shape == (len(df), 3)
    assert ((summary.predictions > 0) & (summary.predictions < 1)).all()
    assert compute_pseudo_r_squared(summary.log_likelihood, summary.log_likelihood_null) == pytest.approx(
        results.prsquared
    )


def test_cluster_vcov_matches_statsmodels_cluster_covariance() -> None:
    df = _student_frame()
    summary = summarize_logit(fit_logistic_model(df, "grad", ["math", "iep"]))

    vcov = compute_cluster_robust_vcov(
        summary.score_matrix,
        df.loc[summary.row_labels, "school"],
        rank=summary.rank,
        n_obs=summary.n_obs,
        bread=summary.bread,
        param_names=summary.param_names,
    )

    exog = sm.add_constant(df[["math", "iep"]].astype(float))
    reference = sm.Logit(df["grad"].astype(float), exog).fit(
        disp=0,
        cov_type="cluster",
        cov_kwds={"groups": df["school"].to_numpy()},
    )
    np.testing.assert_allclose(vcov.to_numpy(), np.asarray(reference.cov_params()), rtol=1e-5)


def test_missing_rows_are_dropped_before_fitting() -> None:
    df = _student_frame()
    df.loc[[0, 5, 9], "math"] = np.nan

    summary = summarize_logit(fit_logistic_model(df, "grad", ["math", "iep"]))

    assert summary.n_obs == len(df) - 3
    assert 5 not in summary.row_labels


def test_categorical_predictors_are_dummy_encoded() -> None:
    df = _student_frame()
    summary = summarize_logit(fit_logistic_model(df, "grad", ["math", "grp"]))
    assert summary.param_names == ["const", "math", "grp_b", "grp_c"]


def test_design_matrix_aligns_new_data_without_reference_level() -> None:
    new = pd.DataFrame({"math": [0.5, -0.5], "grp": ["b", "c"]})
    design = build_design_matrix(new, ["math", "grp"], columns=["const", "math", "grp_b", "grp_c"])

    assert list(design.columns) == ["const", "math", "grp_b", "grp_c"]
    assert design["grp_b"].tolist() == [1.0, 0.0]
    assert design["grp_c"].tolist() == [0.0, 1.0]


def test_summarize_predictions_scores_new_rows_like_the_fit() -> None:
    df = _student_frame()
    results = fit_logistic_model(df, "grad", ["math", "grp"])
    summary = summarize_logit(results)

    subset = df[df["grp"] != "a"].head(30)
    scored = summarize_predictions(results, subset, "grad", ["math", "grp"])

    positions = df.index.get_indexer(subset.index)
    np.testing.assert_allclose(scored.predictions, summary.predictions[positions])
    assert scored.score_matrix is None
