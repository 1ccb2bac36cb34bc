from __future__ import annotations

import logging

import numpy as np
import pandas as pd
import statsmodels.formula.api as smf

from ..config import F_THRESHOLD, INSTRUMENT, TREATMENT
from ..refutations._check import RefutationCheck

logger = logging.getLogger(__name__)


class FirstStageResult:
    """
    The relevance regression ``treatment ~ instrument``.

    A strong first stage is what gives 2SLS something to work with. The
    F-statistic tests ``H0: instrument coefficient = 0``; with a single
    instrument it is the square of the coefficient's t-statistic.
    """

    def __init__(self, result, instrument: str, treatment: str, threshold: float) -> None:
        self._result = result
        self._instrument = instrument
        self._treatment = treatment
        self._threshold = threshold

    @property
    def coefficient(self) -> float:
        """Change in the treatment probability (or level) per unit of instrument."""
        return float(self._result.params[self._instrument])

    @property
    def std_err(self) -> float:
        return float(self._result.bse[self._instrument])

    @property
    def f_stat(self) -> float:
        """F-statistic for the excluded instrument."""
        f_test = self._result.f_test(f"{self._instrument} = 0")
        return float(np.squeeze(f_test.fvalue))

    @property
    def f_pvalue(self) -> float:
        return float(np.squeeze(self._result.f_test(f"{self._instrument} = 0").pvalue))

    @property
    def rsquared(self) -> float:
        return float(self._result.rsquared)

    @property
    def threshold(self) -> float:
        return self._threshold

    @property
    def is_strong(self) -> bool:
        """Rule of thumb: the instrument is strong when F exceeds the threshold (10)."""
        return self.f_stat > self._threshold

    @property
    def statsmodels_result(self):
        """The underlying statsmodels OLS result, for full diagnostics."""
        return self._result

    def check(self) -> RefutationCheck:
        """The relevance verdict as a ``RefutationCheck``."""
        f_stat = self.f_stat
        detail = f"F = {f_stat:.2f}  (threshold: F > {self._threshold:.0f})"
        if not self.is_strong:
            detail += (
                "  Weak instrument detected: the instrument explains little "
                "variation in treatment. IV estimates may be severely biased "
                "toward OLS and confidence intervals unreliable."
            )
        return RefutationCheck(
            name="First-stage F-statistic", passed=self.is_strong, detail=detail
        )

    def summary(self) -> str:
        verdict = "strong" if self.is_strong else "WEAK"
        lines = [
            "",
            f"First stage (relevance): {self._instrument} → {self._treatment}",
            "─" * 50,
            f"  Coefficient          : {self.coefficient:>10.4f}",
            f"  Std. error           : {self.std_err:>10.4f}",
            f"  F-statistic          : {self.f_stat:>10.2f}",
            f"  R-squared            : {self.rsquared:>10.4f}",
            f"  Instrument           : {verdict:>10}  (rule of thumb: F > {self._threshold:.0f})",
            "",
        ]
        return "\n".join(lines)

    def __repr__(self) -> str:
        return self.summary()


class FirstStage:
    """
    Relevance check: regress the treatment on the instrument by OLS.

    Example::

        fs = FirstStage(instrument="sms", treatment="net_use").fit(df)
        print(fs.f_stat, fs.is_strong)
    """

    def __init__(
        self,
        instrument: str = INSTRUMENT,
        treatment: str = TREATMENT,
        threshold: float = F_THRESHOLD,
    ) -> None:
        if instrument == treatment:
            raise ValueError("Instrument and treatment must be different variables.")
        if threshold <= 0:
            raise ValueError(f"threshold must be positive, got {threshold}.")
        self._instrument = instrument
        self._treatment = treatment
        self._threshold = threshold

    def fit(self, data: pd.DataFrame) -> FirstStageResult:
        """
        Fit ``treatment ~ instrument``.

        Raises
        ------
        ``ValueError``
            If the instrument or treatment column is missing.
        """
        for label, var in [("Instrument", self._instrument), ("Treatment", self._treatment)]:
            if var not in data.columns:
                raise ValueError(f"{label} column '{var}' not found in dataframe.")

        result = smf.ols(f"{self._treatment} ~ {self._instrument}", data=data).fit()
        fs = FirstStageResult(result, self._instrument, self._treatment, self._threshold)
        logger.debug(
            f"First stage {self._treatment} ~ {self._instrument}: "
            f"coef={fs.coefficient:.4f}, F={fs.f_stat:.2f}"
        )
        return fs
