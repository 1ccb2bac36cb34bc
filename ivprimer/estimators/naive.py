from __future__ import annotations

import logging

import pandas as pd

from ..config import OUTCOME, TREATMENT
from ..refutations._check import Assumption
from ._regression import SimpleRegressionResult, fit_simple_ols

logger = logging.getLogger(__name__)

NAIVE_ASSUMPTIONS: list[Assumption] = [
    Assumption("No unobserved confounding: net users and non-users are otherwise comparable", testable=False),
]


class NaiveResult(SimpleRegressionResult):
    """
    The naive comparison of outcomes between treated and untreated units.

    Net users chose to use a net. Whatever drove that choice (health
    awareness, wealth) also drives malaria risk, so this slope mixes the
    effect of the net with the difference between the kinds of people who
    use one. It is shown only as the contrast to ITT and LATE.
    """

    _title = "Naive OLS"
    _estimand = "none (treated vs untreated difference in means)"
    _assumptions = NAIVE_ASSUMPTIONS

    def executive_summary(self) -> str:
        """Narrative explanation of the estimate and why it is biased."""
        from .._explain import explain_naive
        return explain_naive(self)


class NaiveOLS:
    """
    Regress the outcome on the treatment actually received.

    Example::

        naive = NaiveOLS(treatment="net_use", outcome="malaria").fit(df)
        print(naive.summary())
    """

    def __init__(self, treatment: str = TREATMENT, outcome: str = OUTCOME) -> None:
        if treatment == outcome:
            raise ValueError("Treatment and outcome must be different variables.")
        self._treatment = treatment
        self._outcome = outcome

    def fit(self, data: pd.DataFrame) -> NaiveResult:
        result = fit_simple_ols(data, self._outcome, self._treatment)
        naive = NaiveResult(result, self._treatment, self._outcome)
        logger.debug(f"Naive {self._outcome} ~ {self._treatment}: {naive.effect:.4f}")
        return naive
