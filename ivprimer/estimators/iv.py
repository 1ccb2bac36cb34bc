from __future__ import annotations

import logging

import pandas as pd
import statsmodels.api as sm
from statsmodels.sandbox.regression.gmm import IV2SLS as _IV2SLS

from ..config import F_THRESHOLD, INSTRUMENT, OUTCOME, TREATMENT
from ..refutations._check import Assumption
from .first_stage import FirstStage, FirstStageResult
from .itt import ITT, ITTResult
from .naive import NaiveOLS, NaiveResult

logger = logging.getLogger(__name__)

IV_ASSUMPTIONS: list[Assumption] = [
    Assumption("Relevance: the instrument shifts treatment take-up", testable=True),
    Assumption("Exogeneity: the instrument is as good as randomly assigned", testable=False),
    Assumption("Exclusion restriction: the instrument affects the outcome only through treatment", testable=False),
    Assumption("Monotonicity: no defiers (nobody avoids treatment because of the instrument)", testable=False),
]


def wald_ratio(
    data: pd.DataFrame,
    outcome: str = OUTCOME,
    treatment: str = TREATMENT,
    instrument: str = INSTRUMENT,
) -> float:
    """
    The Wald estimator ``Cov(Y, Z) / Cov(D, Z)``.

    Equivalently reduced form / first stage, or ITT divided by the share of
    compliers. In the just-identified case it equals the 2SLS coefficient.

    Raises
    ------
    ``ValueError``
        If the instrument does not covary with the treatment at all.
    """
    cov_yz = float(data[outcome].cov(data[instrument]))
    cov_dz = float(data[treatment].cov(data[instrument]))
    if cov_dz == 0:
        raise ValueError(
            f"Cov({treatment}, {instrument}) is zero: the instrument does not "
            f"move the treatment, so the Wald ratio is undefined."
        )
    return cov_yz / cov_dz


class IVResult:
    """
    The result of a 2SLS estimation of the LATE.

    Carries the 2SLS fit alongside the three regressions a student compares
    it with: the naive OLS of outcome on treatment, the ITT (reduced form)
    and the first stage. ``itt_effect / first_stage.coefficient`` is the
    Wald ratio, which matches ``effect`` exactly.
    """

    def __init__(
        self,
        result,
        naive: NaiveResult,
        itt: ITTResult,
        first_stage: FirstStageResult,
        wald: float,
        treatment: str,
        outcome: str,
        instrument: str,
    ) -> None:
        self._result = result
        self._naive = naive
        self._itt = itt
        self._first_stage = first_stage
        self._wald = wald
        self._treatment = treatment
        self._outcome = outcome
        self._instrument = instrument

    @property
    def effect(self) -> float:
        """2SLS point estimate: the LATE among compliers."""
        return float(self._result.params[self._treatment])

    @property
    def wald_effect(self) -> float:
        """``Cov(Y, Z) / Cov(D, Z)`` computed directly from the data."""
        return self._wald

    @property
    def unadjusted_effect(self) -> float:
        """Naive OLS estimate of outcome on treatment."""
        return self._naive.effect

    @property
    def itt_effect(self) -> float:
        """Reduced-form (intent-to-treat) effect of the instrument on the outcome."""
        return self._itt.effect

    @property
    def std_err(self) -> float:
        return float(self._result.bse[self._treatment])

    @property
    def conf_int(self) -> tuple[float, float]:
        """95% confidence interval for the 2SLS estimate."""
        ci = self._result.conf_int()
        return (float(ci.loc[self._treatment, 0]), float(ci.loc[self._treatment, 1]))

    @property
    def pvalue(self) -> float:
        return float(self._result.pvalues[self._treatment])

    @property
    def naive(self) -> NaiveResult:
        return self._naive

    @property
    def itt(self) -> ITTResult:
        return self._itt

    @property
    def first_stage(self) -> FirstStageResult:
        return self._first_stage

    @property
    def assumptions(self) -> list[Assumption]:
        """Assumptions under which the estimate is the complier effect."""
        return list(IV_ASSUMPTIONS)

    @property
    def statsmodels_result(self):
        """The underlying statsmodels IV2SLS result, for full diagnostics."""
        return self._result

    def refute(self, data: pd.DataFrame):
        """
        Run diagnostic checks against this estimation.

        Currently runs:

        - **First-stage F-statistic**: instrument relevance, ``F > 10``.
        - **Random common cause**: a pure-noise control must not move the
          estimate by more than one standard error.
        - **Monotonicity**: the estimated complier share must be positive.

        Parameters
        ----------
        data : pd.DataFrame
            The same dataframe passed to ``fit()``.
        """
        from ..refutations.iv import (
            IVRefutationReport,
            _check_monotonicity,
            _check_random_common_cause,
        )

        checks = [
            self._first_stage.check(),
            _check_random_common_cause(
                data, self._treatment, self._outcome, self._instrument,
                self.effect, self.std_err,
            ),
            _check_monotonicity(data, self._treatment, self._instrument),
        ]
        return IVRefutationReport(
            checks=checks,
            treatment=self._treatment,
            outcome=self._outcome,
            instrument=self._instrument,
        )

    def executive_summary(self) -> str:
        """Narrative explanation of the method, assumptions and result."""
        from .._explain import explain_iv
        return explain_iv(self)

    def summary(self) -> str:
        lo, hi = self.conf_int
        bias = self.unadjusted_effect - self.effect
        lines = [
            "",
            f"IV (2SLS) Causal Effect: {self._treatment} → {self._outcome}",
            f"  Instrument: {self._instrument}    Estimand: LATE (compliers)",
            "─" * 50,
            f"  2SLS estimate        : {self.effect:>10.4f}",
            f"  Wald ratio           : {self.wald_effect:>10.4f}  (Cov(Y,Z) / Cov(D,Z))",
            f"  ITT estimate         : {self.itt_effect:>10.4f}  (reduced form)",
            f"  First stage          : {self._first_stage.coefficient:>10.4f}  (F = {self._first_stage.f_stat:.2f})",
            f"  Naive estimate       : {self.unadjusted_effect:>10.4f}  (no instrument)",
            f"  Confounding bias     : {bias:>+10.4f}",
            "",
            f"  Std. error           : {self.std_err:>10.4f}",
            f"  95% CI               : [{lo:.4f}, {hi:.4f}]",
            f"  p-value              : {self.pvalue:>10.4f}",
            "",
            "  Assumptions",
            "  " + "┄" * 48,
        ]
        for a in IV_ASSUMPTIONS:
            lines.append(f"  {a.fmt_tag()}  {a.name}")
        lines.append("")
        return "\n".join(lines)

    def __repr__(self) -> str:
        return self.summary()


class IV2SLS:
    """
    Instrumental variables estimator using Two-Stage Least Squares.

    Stage one predicts the treatment from the instrument; stage two uses only
    that predicted variation. With one binary instrument and one binary
    treatment the coefficient is the Wald ratio, the local average
    treatment effect for compliers.

    Example::

        result = IV2SLS(treatment="net_use", outcome="malaria", instrument="sms").fit(df)
        print(result.summary())
    """

    def __init__(
        self,
        treatment: str = TREATMENT,
        outcome: str = OUTCOME,
        instrument: str = INSTRUMENT,
        threshold: float = F_THRESHOLD,
    ) -> None:
        if treatment == outcome:
            raise ValueError("Treatment and outcome must be different variables.")
        if instrument == treatment:
            raise ValueError("Instrument and treatment must be different variables.")
        if instrument == outcome:
            raise ValueError("Instrument and outcome must be different variables.")
        self._treatment = treatment
        self._outcome = outcome
        self._instrument = instrument
        self._threshold = threshold

    def fit(self, data: pd.DataFrame) -> IVResult:
        """
        Estimate the LATE by 2SLS, together with the naive, ITT and
        first-stage regressions.

        Raises
        ------
        ``ValueError``
            If treatment, outcome or instrument columns are missing.
        """
        for label, var in [
            ("Treatment", self._treatment),
            ("Outcome", self._outcome),
            ("Instrument", self._instrument),
        ]:
            if var not in data.columns:
                raise ValueError(f"{label} column '{var}' not found in dataframe.")

        T, Y, Z = self._treatment, self._outcome, self._instrument
        result = _fit_2sls(data, T, Y, Z)

        iv = IVResult(
            result,
            naive=NaiveOLS(T, Y).fit(data),
            itt=ITT(Z, Y).fit(data),
            first_stage=FirstStage(Z, T, self._threshold).fit(data),
            wald=wald_ratio(data, Y, T, Z),
            treatment=T,
            outcome=Y,
            instrument=Z,
        )
        logger.info(
            f"2SLS {Y} ~ {T} | {Z}: LATE={iv.effect:.4f} (SE {iv.std_err:.4f}), "
            f"naive={iv.unadjusted_effect:.4f}, ITT={iv.itt_effect:.4f}"
        )
        return iv


def _fit_2sls(
    data: pd.DataFrame,
    treatment: str,
    outcome: str,
    instrument: str,
    controls: list[str] | None = None,
):
    """
    Fit statsmodels' IV2SLS with ``[const, treatment, controls]`` as regressors
    and ``[const, instrument, controls]`` as instruments.

    The instrument matrix takes the regressor column names so the result's
    params are indexed by the treatment name.
    """
    controls = list(controls or [])
    X = sm.add_constant(data[[treatment] + controls], prepend=True, has_constant="add")
    Z_mat = sm.add_constant(data[[instrument] + controls], prepend=True, has_constant="add")
    Z_mat.columns = X.columns
    return _IV2SLS(endog=data[outcome], exog=X, instrument=Z_mat).fit()
