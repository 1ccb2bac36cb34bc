from __future__ import annotations

import logging

import pandas as pd

from ..config import INSTRUMENT, OUTCOME
from ..refutations._check import Assumption
from ._regression import SimpleRegressionResult, fit_simple_ols

logger = logging.getLogger(__name__)

ITT_ASSUMPTIONS: list[Assumption] = [
    Assumption("Random assignment of the encouragement", testable=False),
    Assumption("Stable Unit Treatment Value Assumption (SUTVA)", testable=False),
]


class ITTResult(SimpleRegressionResult):
    """
    The intent-to-treat effect: the effect of being *assigned* the
    encouragement, whether or not the unit then took up the treatment.

    Because assignment is random this is unbiased for the effect of the
    programme as rolled out. Non-compliance dilutes it relative to the
    effect of the treatment itself.
    """

    _title = "Intent-to-treat (ITT)"
    _estimand = "ITT (effect of assignment)"
    _assumptions = ITT_ASSUMPTIONS

    def executive_summary(self) -> str:
        """Narrative explanation of what the ITT does and does not measure."""
        from .._explain import explain_itt
        return explain_itt(self)


class ITT:
    """
    Regress the outcome on the randomly assigned instrument.

    Example::

        itt = ITT(instrument="sms", outcome="malaria").fit(df)
        print(itt.summary())
    """

    def __init__(self, instrument: str = INSTRUMENT, outcome: str = OUTCOME) -> None:
        if instrument == outcome:
            raise ValueError("Instrument and outcome must be different variables.")
        self._instrument = instrument
        self._outcome = outcome

    def fit(self, data: pd.DataFrame) -> ITTResult:
        result = fit_simple_ols(data, self._outcome, self._instrument)
        itt = ITTResult(result, self._instrument, self._outcome)
        logger.debug(f"ITT {self._outcome} ~ {self._instrument}: {itt.effect:.4f}")
        return itt
