"""
Synthetic multi-district grade-7 student file with high-school outcomes.

Each district draws its own score gaps, school effects and graduation model
coefficients from small hand-tuned menus, so relationships vary realistically
between districts. The finished file is salted with outliers and missing values
so it can be used to practice data cleaning before modelling.

All randomness flows through numpy Generators seeded from the config.
"""

import numpy as np
import pandas as pd

from infrastructure.config.models import SyntheticDataConfig

RACE_LEVELS = [
    "White",
    "Black or African American",
    "Asian",
    "Hispanic or Latino Ethnicity",
    "Demographic Race Two or More Races",
    "American Indian or Alaska Native",
    "Native Hawaiian or Other Pacific Islander",
]

# Multipliers applied to uniform draws before normalizing the race mix
RACE_MIX_SCALE = np.array([7, 1.5, 1 / 3.75, 2.25, 2.25, 1 / 3.75, 1 / 4.25])

# Menus of district-level assessment gaps (in SD units of the scale score)
ASSESS_RACE_GAPS = {
    "White": [0.84, 0.95, 1.2, 1.25, 0.675, 1.45],
    "Black or African American": [0, -0.5, -0.3, -0.125, -0.2],
    "Asian": [0.4, 0.25, 0.1, 0.125, 0.05, -0.2, -0.15],
    "Hispanic or Latino Ethnicity": [0.05, 0, -0.4, -0.1, -0.125, -0.2],
    "Demographic Race Two or More Races": list(np.arange(-2, 3) / 40),
    "American Indian or Alaska Native": list(np.arange(-8, 9) / 40),
    "Native Hawaiian or Other Pacific Islander": list(np.arange(-8, 9) / 40),
}
ASSESS_MALE_GAPS = [0.0, -0.05, 0.25, 0.1, 0.275, 0.375]
ASSESS_FEMALE_GAPS = [0.0, -0.05, 0.05, -0.1, 0.125, -0.075]
ASSESS_NON_FRL_GAPS = [0.8, 0.6, 0.7, 0.45, 0.51, 0.6125, 0.975]
ASSESS_FRL_GAPS = [0.05, 0, -0.25, -0.3, -0.125, -0.6, -0.5]

# Menus of district-level graduation adjustments (logit scale)
GRAD_RACE_GAPS = {
    "White": [0.4, 0.35, 0.1, 0.225, 0.175, 0.215],
    "Black or African American": [0, -0.35, -0.3, -0.125, -0.2],
    "Asian": [0.4, 0.25, 0.1, 0.125, 0.05],
    "Hispanic or Latino Ethnicity": [0.05, 0, -0.1, -0.125, -0.2],
    "Demographic Race Two or More Races": list(np.arange(-2, 3) / 40),
    "American Indian or Alaska Native": list(np.arange(-8, 9) / 40),
    "Native Hawaiian or Other Pacific Islander": list(np.arange(-8, 9) / 40),
}
GRAD_NON_FRL_GAPS = [0, 0.25, 0.1, 0.125, 0.175]
GRAD_FRL_GAPS = [0.05, 0, -0.5, -0.1, -0.125, -0.3]

# High-school status mix conditional on graduating or not
GRAD_STATUSES = (["ontime", "late", "early"], [0.85, 0.12, 0.03])
NON_GRAD_STATUSES = (["dropout", "transferout", "still_enroll", "disappear"], [0.45, 0.3, 0.1, 0.15])

STATUS_COLUMNS = {
    "disappear": "disappeared",
    "dropout": "dropout",
    "early": "early_grad",
    "late": "late_grad",
    "ontime": "ontime_grad",
    "still_enroll": "still_enrolled",
    "transferout": "transferout",
}


# Fictitious place names for districts and cooperatives
PLACE_NAMES = [
    "Alder Creek", "Bitterroot", "Blue Mesa", "Cedar Bluff", "Clearwater", "Copper Falls",
    "Crow Hollow", "Deer Lodge", "Dry Fork", "Eagle Pass", "Elk Ridge", "Fairmont",
    "Flint Hills", "Glacier View", "Granite Peak", "Harlow", "Hidden Valley", "Iron Gate",
    "Juniper", "Kestrel", "Lake Jasper", "Larch Point", "Lone Pine", "Maple Grove",
    "Millbrook", "Missoula Flats", "North Fork", "Oak Hollow", "Pine Bluff", "Prairie View",
    "Quartz Hill", "Red Lodge", "Ridgeway", "Rock Springs", "Sage Flat", "Silver Bow",
    "Snowcrest", "Spruce Lake", "Stillwater", "Sweetgrass", "Thunder Basin", "Timber Creek",
    "Twin Rivers", "Upper Basin", "Valley Forge", "Whitefish", "Willow Bend", "Wolf Point",
    "Yellow Rock", "Big Horn", "Cutbank", "Musselshell", "Powder River", "Rosebud",
    "Sun River", "Teton", "Two Medicine", "White Sulphur", "Wibaux", "Yaak",
]


def sigmoid(x: np.ndarray) -> np.ndarray:
    return 1 / (1 + np.exp(-x))


def truncate_label(label: str, width: int = 9, ellipsis: str = "...") -> str:
    """Right-truncate a label to ``width`` characters including the ellipsis."""
    if len(label) <= width:
        return label
    return label[: width - len(ellipsis)] + ellipsis


def district_seed(base_seed: int, district: int) -> int:
    """Seed for the 1-based district number."""
    return base_seed + 2 * district


def _draw_district_parameters(rng: np.random.Generator) -> dict:
    """Draw assessment gaps, variance components and graduation coefficients for one district."""
    race_mix = rng.uniform(size=len(RACE_LEVELS)) * RACE_MIX_SCALE

    return {
        "race_prob": race_mix / race_mix.sum(),
        "frpl_rate": rng.uniform(0.3, 0.7),
        "assess_race": {r: float(rng.choice(v)) for r, v in ASSESS_RACE_GAPS.items()},
        "assess_sex": {1: float(rng.choice(ASSESS_MALE_GAPS)), 0: float(rng.choice(ASSESS_FEMALE_GAPS))},
        "assess_frl": {0: float(rng.choice(ASSESS_NON_FRL_GAPS)), 1: float(rng.choice(ASSESS_FRL_GAPS))},
        "base_shift": rng.normal(0, 3),
        "score_sd": float(rng.integers(8, 13)),
        "school_var": (float(rng.choice([0.4, 0.3, 0.5, 0.375, 0.425])), float(rng.choice([0.125, 0.5, 0.66, 0.75]))),
        "grad_race": {r: float(rng.choice(v)) for r, v in GRAD_RACE_GAPS.items()},
        "grad_frl": {0: float(rng.choice(GRAD_NON_FRL_GAPS)), 1: float(rng.choice(GRAD_FRL_GAPS))},
        "grad_school_sd": float(np.sqrt(rng.choice(np.arange(180, 381) / 60))) * 0.25,
        "b_intercept": float(rng.choice(np.arange(10, 31) / 2.75)) / 4,
        "b_math": float(rng.choice(np.arange(1, 9) / 0.6)) / 20,
        "b_read": float(rng.choice(np.arange(2, 15) / 8)) / 8,
        "b_iep": float(rng.choice(np.arange(10, 21) / -8)) / 3,
        "b_frpl": float(rng.choice(np.arange(6, 17) / -12)) / 2,
        "b_ell": float(rng.choice(np.arange(6, 15) / -14)) / 2,
        "b_male": float(rng.choice(np.arange(2, 15) / -25)),
        "b_absent": -0.05,
    }


def _salt_district(df: pd.DataFrame, rng: np.random.Generator, cfg: SyntheticDataConfig) -> pd.DataFrame:
    """Recode some FRL values to unknown (9) and reduced-price (2)."""
    frpl = df["frpl_7"].to_numpy().copy()
    frpl[rng.uniform(size=len(frpl)) < cfg.frpl_unknown_rate] = 9
    frpl[(frpl == 1) & (rng.uniform(size=len(frpl)) < cfg.frpl_reduced_rate)] = 2
    df["frpl_7"] = frpl
    return df


def simulate_district(district: int, cfg: SyntheticDataConfig) -> pd.DataFrame:
    """
    Simulate one district's grade-7 cohort records.

    Args:
        district: 1-based district number (also the LEA id suffix)
        cfg: Synthetic data configuration

    Returns:
        DataFrame with one row per student
    """
    rng = np.random.default_rng(district_seed(cfg.seed, district))
    par = _draw_district_parameters(rng)

    n = max(int(round(float(rng.choice(cfg.district_sizes)) * cfg.size_scale)), 20)
    low, high = cfg.schools_range
    n_schools = int(rng.integers(low, high + 1))
    n_high_schools = max(1, n_schools // 3)
    lea_id = f"0{district}"

    # Uneven school sizes
    school_weights = rng.dirichlet(np.full(n_schools, 2.0))
    school = rng.choice(n_schools, size=n, p=school_weights)
    first_hs = rng.integers(0, n_high_schools, size=n)
    school_math = rng.normal(0, np.sqrt(par["school_var"][0]), size=n_schools) * par["score_sd"] / 2
    school_read = rng.normal(0, np.sqrt(par["school_var"][1]), size=n_schools) * par["score_sd"] / 2
    school_grad = rng.normal(0, par["grad_school_sd"], size=n_schools)

    race = rng.choice(len(RACE_LEVELS), size=n, p=par["race_prob"])
    race_names = np.array(RACE_LEVELS)[race]
    male = rng.binomial(1, 0.5, size=n)
    frpl = rng.binomial(1, par["frpl_rate"], size=n)
    hispanic_or_asian = np.isin(race_names, ["Hispanic or Latino Ethnicity", "Asian"])
    ell = rng.binomial(1, np.where(hispanic_or_asian, 0.3, 0.04))
    iep = rng.binomial(1, 0.12, size=n)
    gifted = rng.binomial(1, np.where(iep == 1, 0.02, 0.09))

    latent = (
        np.array([par["assess_race"][r] for r in race_names])
        + np.where(male == 1, par["assess_sex"][1], par["assess_sex"][0])
        + np.where(frpl == 1, par["assess_frl"][1], par["assess_frl"][0])
        - 0.6 * iep
        - 0.2 * ell
        + 0.4 * gifted
    )
    math_noise = rng.normal(0, par["score_sd"], size=n)
    math = 50 + par["base_shift"] + 10 * latent + school_math[school] + math_noise
    read = (
        50
        + par["base_shift"]
        + 9 * latent
        + school_read[school]
        + 0.55 * math_noise
        + rng.normal(0, par["score_sd"] * 0.8, size=n)
    )

    absent = np.clip(
        rng.gamma(2.0, 0.03, size=n) + 0.02 * frpl + 0.02 * iep - 0.001 * (math - 50),
        0,
        0.6,
    )

    z_math = (math - 50) / 10
    z_read = (read - 50) / 10
    grad_logit = (
        par["b_intercept"]
        + par["b_math"] * z_math
        + par["b_read"] * z_read
        + par["b_iep"] * iep
        + par["b_frpl"] * frpl
        + par["b_ell"] * ell
        + par["b_male"] * male
        + par["b_absent"] * (absent * 100)
        + np.array([par["grad_race"][r] for r in race_names])
        + np.where(frpl == 1, par["grad_frl"][1], par["grad_frl"][0])
        + school_grad[school]
    )
    any_grad = rng.binomial(1, sigmoid(grad_logit))

    status = np.where(
        any_grad == 1,
        rng.choice(GRAD_STATUSES[0], size=n, p=GRAD_STATUSES[1]),
        rng.choice(NON_GRAD_STATUSES[0], size=n, p=NON_GRAD_STATUSES[1]),
    )

    cohort_year = rng.integers(cfg.first_cohort_year, cfg.first_cohort_year + cfg.n_cohorts, size=n)
    cohort_grad_year = cohort_year + 3
    grad_offset = pd.Series(status).map({"ontime": 0, "early": -1, "late": 1}).to_numpy(dtype=float)

    df = pd.DataFrame(
        {
            "sid": district * 1_000_000 + np.arange(1, n + 1),
            "sch_g7_code": [f"{lea_id}-{s + 1:03d}" for s in school],
            "sch_g7_lea_id": lea_id,
            "first_hs_code": [f"{lea_id}-{101 + h}" for h in first_hs],
            "first_hs_lea_id": lea_id,
            "year": cohort_year - 2,
            "grade": 7,
            "cohort_year": cohort_year,
            "cohort_grad_year": cohort_grad_year,
            "male": male.astype(float),
            "race_ethnicity": [truncate_label(r) for r in race_names],
            "frpl_7": frpl,
            "ell_7": ell,
            "iep_7": iep,
            "gifted_7": gifted,
            "scale_score_7_math": np.round(math, 2),
            "scale_score_7_read": np.round(read, 2),
            "pct_days_absent_7": absent,
            "any_grad": any_grad,
            "year_of_graduation": cohort_grad_year + grad_offset,
            "vendor_ews_score": np.round(sigmoid(grad_logit + rng.normal(0, 0.75, size=n)), 4),
        }
    )

    for code, column in STATUS_COLUMNS.items():
        df[column] = (status == code).astype(int)

    # School composition of the grade-7 school
    for src, dest in [
        ("male", "sch_g7_male_per"),
        ("frpl_7", "sch_g7_frpl_per"),
        ("ell_7", "sch_g7_lep_per"),
        ("gifted_7", "sch_g7_gifted_per"),
    ]:
        df[dest] = df.groupby("sch_g7_code")[src].transform("mean").round(3)
    df["sch_g7_enroll"] = df.groupby("sch_g7_code")["sid"].transform("size")

    return _salt_district(df, rng, cfg)


def salt_dataset(df: pd.DataFrame, rng: np.random.Generator, cfg: SyntheticDataConfig) -> pd.DataFrame:
    """
    Add outliers and missing values, then express absences in percent.

    Returns a new DataFrame; the input is not modified.
    """
    out = df.copy()
    n = len(out)

    absent = out["pct_days_absent_7"].to_numpy(dtype=float).copy()
    absent[rng.uniform(size=n) < cfg.absence_outlier_rate] = 0.8
    absent[rng.uniform(size=n) < cfg.absence_extreme_rate] = 1.4
    absent[rng.uniform(size=n) < cfg.absence_missing_rate] = np.nan
    out["pct_days_absent_7"] = np.round(absent * 100, 2)

    for col in ["scale_score_7_math", "scale_score_7_read"]:
        out[col] = out[col].mask(rng.uniform(size=n) < cfg.score_missing_rate)

    for col in ["male", "race_ethnicity"]:
        out[col] = out[col].mask(rng.uniform(size=n) < cfg.demographic_missing_rate)

    return out


def _draw_places(rng: np.random.Generator, n: int, exclude: set[str] | None = None) -> list[str]:
    """``n`` distinct place names, numbering repeats once the pool runs out."""
    pool = [p for p in PLACE_NAMES if p not in (exclude or set())] or PLACE_NAMES
    order = rng.permutation(len(pool))
    return [
        pool[order[i % len(pool)]] + (f" {i // len(pool) + 1}" if i >= len(pool) else "")
        for i in range(n)
    ]


def assign_districts(df: pd.DataFrame, rng: np.random.Generator, cfg: SyntheticDataConfig) -> pd.DataFrame:
    """
    Add district names and group districts into cooperatives.

    Districts are shuffled and split into cooperatives of ``cfg.coop_size``
    (the last one may be smaller). Names are added for both the grade-7 and the
    first high-school district. Returns a new DataFrame.
    """
    out = df.copy()
    lea_ids = sorted(pd.unique(out[["sch_g7_lea_id", "first_hs_lea_id"]].to_numpy().ravel()))

    lea_places = _draw_places(rng, len(lea_ids))
    lea_names = {lea: f"{place} Public Schools" for lea, place in zip(lea_ids, lea_places)}

    shuffled = [lea_ids[i] for i in rng.permutation(len(lea_ids))]
    groups = [shuffled[i : i + cfg.coop_size] for i in range(0, len(shuffled), cfg.coop_size)]
    coop_places = _draw_places(rng, len(groups), exclude=set(lea_places))
    coop_of = {lea: f"{place} Cooperative" for place, members in zip(coop_places, groups) for lea in members}

    out["sch_g7_lea_name"] = out["sch_g7_lea_id"].map(lea_names)
    out["first_hs_lea_name"] = out["first_hs_lea_id"].map(lea_names)
    out["coop_name_g7"] = out["sch_g7_lea_id"].map(coop_of)
    out["coop_name_first_hs"] = out["first_hs_lea_id"].map(coop_of)
    return out


def generate_student_dataset(cfg: SyntheticDataConfig) -> pd.DataFrame:
    """
    Generate the full synthetic student file.

    Args:
        cfg: Synthetic data configuration

    Returns:
        DataFrame with one row per student across all districts
    """
    districts = [simulate_district(d, cfg) for d in range(1, cfg.n_districts + 1)]
    combined = pd.concat(districts, ignore_index=True)

    rng = np.random.default_rng(cfg.seed)
    salted = salt_dataset(combined, rng, cfg)
    return assign_districts(salted, rng, cfg)
