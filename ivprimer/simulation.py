"""
Synthetic illustrations of what goes wrong when an instrument is weak or
invalid.

Data generating process shared by every function here::

    (X*, C) ~ bivariate normal, unit variances, correlation rho   [latent]
    Z       ~ N(0, 1)                                           [instrument]
    X       = strength * Z + X*
    Y       = beta * X + confounding * C + direct_effect * Z + e

``C`` is never shown to the estimators, so OLS of Y on X is biased by
``confounding * rho``. Shrinking ``strength`` (multiplying the instrument's
contribution by a small ``attenuation``) starves the first stage; a
non-zero ``direct_effect`` breaks the exclusion restriction.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np
import pandas as pd

from .config import ATTENUATION, F_THRESHOLD, MONTE_CARLO_SIMS, RANDOM_SEED, SIMULATION_N
from .estimators.first_stage import FirstStage, FirstStageResult
from .estimators.iv import _fit_2sls, wald_ratio

logger = logging.getLogger(__name__)

DEFAULT_RHO = 0.5
DEFAULT_BETA = 1.0
DEFAULT_CONFOUNDING = 1.0


def _draw_latent(n: int, rng: np.random.Generator, rho: float) -> pd.DataFrame:
    if not -1 < rho < 1:
        raise ValueError(f"rho must lie strictly between -1 and 1, got {rho}.")
    cov = np.array([[1.0, rho], [rho, 1.0]])
    x_star, c = rng.multivariate_normal(np.zeros(2), cov, size=n).T
    return pd.DataFrame({
        "x_star": x_star,
        "c": c,
        "z": rng.normal(size=n),
        "e": rng.normal(size=n),
    })


def _assemble(
    latent: pd.DataFrame,
    strength: float,
    beta: float,
    confounding: float,
    direct_effect: float = 0.0,
) -> pd.DataFrame:
    df = latent[["x_star", "c", "z"]].copy()
    df["x"] = strength * latent["z"] + latent["x_star"]
    df["y"] = (
        beta * df["x"]
        + confounding * latent["c"]
        + direct_effect * latent["z"]
        + latent["e"]
    )
    return df


def _ols_slope(df: pd.DataFrame) -> float:
    return float(df["y"].cov(df["x"]) / df["x"].var())


def simulate_instrument_data(
    n: int = SIMULATION_N,
    instrument_strength: float = 1.0,
    rho: float = DEFAULT_RHO,
    beta: float = DEFAULT_BETA,
    confounding: float = DEFAULT_CONFOUNDING,
    direct_effect: float = 0.0,
    seed: int | None = RANDOM_SEED,
) -> pd.DataFrame:
    """
    One synthetic sample with columns ``x_star``, ``c``, ``z``, ``x``, ``y``.

    Parameters
    ----------
    instrument_strength : float
        Coefficient on ``z`` in the equation for ``x``.
    rho : float
        Correlation between the latent regressor part ``x_star`` and the
        confounder ``c``.
    direct_effect : float
        Effect of ``z`` on ``y`` that bypasses ``x``. Zero for a valid instrument.
    """
    rng = np.random.default_rng(seed)
    return _assemble(_draw_latent(n, rng, rho), instrument_strength, beta, confounding, direct_effect)


@dataclass(frozen=True)
class WeakInstrumentComparison:
    """
    The same latent draw analysed with the instrument at full strength and
    with its contribution multiplied by ``attenuation``.
    """

    strong: FirstStageResult
    weak: FirstStageResult
    strong_iv: float
    weak_iv: float
    strong_ols: float
    weak_ols: float
    beta: float
    attenuation: float

    @property
    def f_ratio(self) -> float:
        """How many times smaller the attenuated F-statistic is."""
        return self.strong.f_stat / self.weak.f_stat

    def summary(self) -> str:
        lines = [
            "",
            f"Weak-instrument simulation (instrument scaled by {self.attenuation})",
            "─" * 50,
            f"  {'':<22}{'strong':>12}{'weak':>12}",
            f"  {'First-stage coef':<22}{self.strong.coefficient:>12.4f}{self.weak.coefficient:>12.4f}",
            f"  {'First-stage F':<22}{self.strong.f_stat:>12.2f}{self.weak.f_stat:>12.2f}",
            f"  {'First-stage R²':<22}{self.strong.rsquared:>12.4f}{self.weak.rsquared:>12.4f}",
            f"  {'2SLS estimate':<22}{self.strong_iv:>12.4f}{self.weak_iv:>12.4f}",
            f"  {'OLS estimate':<22}{self.strong_ols:>12.4f}{self.weak_ols:>12.4f}",
            "",
            f"  True effect          : {self.beta:>10.4f}",
            f"  F shrinks by a factor: {self.f_ratio:>10.1f}",
            "",
        ]
        return "\n".join(lines)

    def __repr__(self) -> str:
        return self.summary()


def compare_instrument_strength(
    n: int = SIMULATION_N,
    attenuation: float = ATTENUATION,
    rho: float = DEFAULT_RHO,
    beta: float = DEFAULT_BETA,
    confounding: float = DEFAULT_CONFOUNDING,
    threshold: float = F_THRESHOLD,
    seed: int | None = RANDOM_SEED,
) -> WeakInstrumentComparison:
    """
    Fit the relevance regression with a strong instrument, then again after
    multiplying the instrument's contribution to the regressor by
    ``attenuation``. Everything else (latent draws, noise) is held fixed.
    """
    if not 0 < attenuation < 1:
        raise ValueError(f"attenuation must lie strictly between 0 and 1, got {attenuation}.")

    rng = np.random.default_rng(seed)
    latent = _draw_latent(n, rng, rho)
    strong_df = _assemble(latent, 1.0, beta, confounding)
    weak_df = _assemble(latent, attenuation, beta, confounding)

    first_stage = FirstStage(instrument="z", treatment="x", threshold=threshold)
    comparison = WeakInstrumentComparison(
        strong=first_stage.fit(strong_df),
        weak=first_stage.fit(weak_df),
        strong_iv=float(_fit_2sls(strong_df, "x", "y", "z").params["x"]),
        weak_iv=float(_fit_2sls(weak_df, "x", "y", "z").params["x"]),
        strong_ols=_ols_slope(strong_df),
        weak_ols=_ols_slope(weak_df),
        beta=beta,
        attenuation=attenuation,
    )
    logger.info(
        f"Weak-instrument simulation: F {comparison.strong.f_stat:.1f} → "
        f"{comparison.weak.f_stat:.1f} after scaling by {attenuation}"
    )
    return comparison


def monte_carlo(
    n_sims: int = MONTE_CARLO_SIMS,
    n: int = SIMULATION_N,
    attenuation: float = ATTENUATION,
    rho: float = DEFAULT_RHO,
    beta: float = DEFAULT_BETA,
    confounding: float = DEFAULT_CONFOUNDING,
    seed: int | None = RANDOM_SEED,
) -> pd.DataFrame:
    """
    Draw ``n_sims`` fresh samples and estimate on each, one row per replication.

    Every replication uses the same latent draws for a strong design and one
    whose instrument is scaled by ``attenuation``. The IV estimate is the
    Wald ratio, OLS is the plain slope of y on x, and the F columns are the
    first-stage F-statistics. Judging them against a threshold is left to
    ``summarise_monte_carlo``.

    Columns: ``strong_iv``, ``weak_iv``, ``strong_ols``, ``weak_ols``,
    ``strong_f``, ``weak_f``. With a weak instrument the IV estimates spread
    out and their median drifts toward the OLS estimate.
    """
    if n_sims < 1:
        raise ValueError(f"n_sims must be positive, got {n_sims}.")

    rng = np.random.default_rng(seed)
    first_stage = FirstStage(instrument="z", treatment="x")
    rows = []
    for _ in range(n_sims):
        latent = _draw_latent(n, rng, rho)
        strong_df = _assemble(latent, 1.0, beta, confounding)
        weak_df = _assemble(latent, attenuation, beta, confounding)
        rows.append({
            "strong_iv": wald_ratio(strong_df, "y", "x", "z"),
            "weak_iv": wald_ratio(weak_df, "y", "x", "z"),
            "strong_ols": _ols_slope(strong_df),
            "weak_ols": _ols_slope(weak_df),
            "strong_f": first_stage.fit(strong_df).f_stat,
            "weak_f": first_stage.fit(weak_df).f_stat,
        })
    draws = pd.DataFrame(rows)
    logger.info(
        f"Monte Carlo ({n_sims} replications): median IV strong={draws['strong_iv'].median():.3f}, "
        f"weak={draws['weak_iv'].median():.3f}, true={beta}"
    )
    return draws


def summarise_monte_carlo(
    draws: pd.DataFrame,
    beta: float = DEFAULT_BETA,
    threshold: float = F_THRESHOLD,
) -> pd.DataFrame:
    """
    Median, interquartile range and median bias of each estimator column,
    plus the share of replications with first-stage F above ``threshold``.

    Medians rather than means: with a weak instrument the IV estimator has
    very heavy tails.
    """
    estimators = ["strong_iv", "weak_iv", "strong_ols", "weak_ols"]
    q = draws[estimators].quantile([0.25, 0.5, 0.75])
    table = pd.DataFrame({
        "median": q.loc[0.5],
        "iqr": q.loc[0.75] - q.loc[0.25],
        "median_bias": q.loc[0.5] - beta,
    })
    table.loc["strong_iv", "share_f_above_threshold"] = float((draws["strong_f"] > threshold).mean())
    table.loc["weak_iv", "share_f_above_threshold"] = float((draws["weak_f"] > threshold).mean())
    return table


@dataclass(frozen=True)
class InvalidInstrumentExercise:
    """
    2SLS when the instrument has its own path to the outcome.

    With ``X = strength * Z + X*`` the probability limit of the IV estimator
    is ``beta + direct_effect / strength``, so even a strong instrument is
    no protection against an exclusion violation.
    """

    beta: float
    direct_effect: float
    strength: float
    iv_effect: float
    ols_effect: float
    first_stage_f: float

    @property
    def expected_bias(self) -> float:
        return self.direct_effect / self.strength

    @property
    def observed_bias(self) -> float:
        return self.iv_effect - self.beta

    def summary(self) -> str:
        lines = [
            "",
            f"Invalid instrument (direct effect of z on y = {self.direct_effect})",
            "─" * 50,
            f"  First-stage F        : {self.first_stage_f:>10.2f}",
            f"  2SLS estimate        : {self.iv_effect:>10.4f}",
            f"  OLS estimate         : {self.ols_effect:>10.4f}",
            f"  True effect          : {self.beta:>10.4f}",
            f"  Observed IV bias     : {self.observed_bias:>+10.4f}",
            f"  Expected IV bias     : {self.expected_bias:>+10.4f}  (direct effect / strength)",
            "",
        ]
        return "\n".join(lines)

    def __repr__(self) -> str:
        return self.summary()


def simulate_invalid_instrument(
    n: int = SIMULATION_N,
    direct_effect: float = 0.3,
    instrument_strength: float = 1.0,
    rho: float = DEFAULT_RHO,
    beta: float = DEFAULT_BETA,
    confounding: float = DEFAULT_CONFOUNDING,
    seed: int | None = RANDOM_SEED,
) -> InvalidInstrumentExercise:
    """Break the exclusion restriction and measure how far 2SLS moves."""
    if instrument_strength == 0:
        raise ValueError("instrument_strength must be non-zero.")
    df = simulate_instrument_data(
        n, instrument_strength, rho, beta, confounding, direct_effect, seed
    )
    fs = FirstStage(instrument="z", treatment="x").fit(df)
    exercise = InvalidInstrumentExercise(
        beta=beta,
        direct_effect=direct_effect,
        strength=instrument_strength,
        iv_effect=float(_fit_2sls(df, "x", "y", "z").params["x"]),
        ols_effect=_ols_slope(df),
        first_stage_f=fs.f_stat,
    )
    logger.info(
        f"Invalid-instrument simulation: 2SLS={exercise.iv_effect:.4f}, "
        f"expected bias {exercise.expected_bias:+.4f}"
    )
    return exercise
