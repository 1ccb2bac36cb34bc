from __future__ import annotations

import pandas as pd
import statsmodels.formula.api as smf

from ..refutations._check import Assumption


def fit_simple_ols(data: pd.DataFrame, outcome: str, regressor: str):
    """``outcome ~ regressor`` by OLS, after checking both columns exist."""
    for label, var in [("Outcome", outcome), ("Regressor", regressor)]:
        if var not in data.columns:
            raise ValueError(f"{label} column '{var}' not found in dataframe.")
    if outcome == regressor:
        raise ValueError("Outcome and regressor must be different variables.")
    return smf.ols(f"{outcome} ~ {regressor}", data=data).fit()


class SimpleRegressionResult:
    """
    Shared accessors for a one-regressor OLS fit ``outcome ~ regressor``.

    Subclasses set ``_title`` and ``_estimand`` for the summary header and
    ``_assumptions`` for the causal reading of the slope.
    """

    _title = "Regression"
    _estimand = ""
    _assumptions: list[Assumption] = []

    def __init__(self, result, regressor: str, outcome: str) -> None:
        self._result = result
        self._regressor = regressor
        self._outcome = outcome

    @property
    def effect(self) -> float:
        """Slope on the regressor: difference in mean outcome between the 1 and 0 groups."""
        return float(self._result.params[self._regressor])

    @property
    def intercept(self) -> float:
        """Mean outcome in the regressor = 0 group."""
        return float(self._result.params["Intercept"])

    @property
    def std_err(self) -> float:
        return float(self._result.bse[self._regressor])

    @property
    def tvalue(self) -> float:
        return float(self._result.tvalues[self._regressor])

    @property
    def conf_int(self) -> tuple[float, float]:
        """95% confidence interval for the slope."""
        ci = self._result.conf_int()
        return (float(ci.loc[self._regressor, 0]), float(ci.loc[self._regressor, 1]))

    @property
    def pvalue(self) -> float:
        return float(self._result.pvalues[self._regressor])

    @property
    def rsquared(self) -> float:
        return float(self._result.rsquared)

    @property
    def nobs(self) -> int:
        return int(self._result.nobs)

    @property
    def assumptions(self) -> list[Assumption]:
        """Assumptions required to read the slope causally."""
        return list(self._assumptions)

    @property
    def statsmodels_result(self):
        """The underlying statsmodels OLS result, for full diagnostics."""
        return self._result

    def summary(self) -> str:
        lo, hi = self.conf_int
        lines = [
            "",
            f"{self._title}: {self._regressor} → {self._outcome}",
            f"  Estimand: {self._estimand}",
            "─" * 50,
            f"  Estimate             : {self.effect:>10.4f}",
            "",
            f"  Std. error           : {self.std_err:>10.4f}",
            f"  t-statistic          : {self.tvalue:>10.2f}",
            f"  95% CI               : [{lo:.4f}, {hi:.4f}]",
            f"  p-value              : {self.pvalue:>10.4f}",
            f"  R-squared            : {self.rsquared:>10.4f}",
            "",
            "  Assumptions",
            "  " + "┄" * 48,
        ]
        for a in self._assumptions:
            lines.append(f"  {a.fmt_tag()}  {a.name}")
        lines.append("")
        return "\n".join(lines)

    def __repr__(self) -> str:
        return self.summary()
