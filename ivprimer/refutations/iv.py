from __future__ import annotations

import numpy as np
import pandas as pd

from ._check import RefutationCheck, RefutationReport

_RCC_SEED = 54321
_RCC_COL = "_rcc"


def _check_random_common_cause(
    data: pd.DataFrame,
    treatment: str,
    outcome: str,
    instrument: str,
    original_effect: float,
    original_se: float,
) -> RefutationCheck:
    """
    Add a random noise column as an extra control and re-run 2SLS.

    The column is pure noise, so the estimate should not move by more than
    one standard error. A larger shift means the estimate is fragile.
    """
    from ..estimators.iv import _fit_2sls

    rng = np.random.default_rng(_RCC_SEED)

    col = _RCC_COL
    while col in data.columns:
        col = "_" + col

    augmented = data.copy()
    augmented[col] = rng.normal(size=len(data))

    result = _fit_2sls(augmented, treatment, outcome, instrument, controls=[col])
    new_effect = float(result.params[treatment])

    shift = abs(new_effect - original_effect)
    passed = shift <= original_se

    detail = f"estimate shifted by {shift:.4f}  ({'≤' if passed else '>'} 1 SE = {original_se:.4f})"
    if not passed:
        detail += "  Adding a random common cause destabilised the estimate."
    return RefutationCheck(name="Random common cause", passed=passed, detail=detail)


def _check_monotonicity(
    data: pd.DataFrame,
    treatment: str,
    instrument: str,
) -> RefutationCheck:
    """
    Take-up among the encouraged must exceed take-up among the rest.

    Monotonicity itself is untestable, but a complier share at or below zero
    means the instrument does not push treatment in the assumed direction
    and the LATE has no complier population to describe.
    """
    from ..compliance import ComplianceTable

    table = ComplianceTable.from_data(data, instrument=instrument, treatment=treatment)
    share = table.complier_share
    passed = share > 0
    detail = (
        f"estimated complier share = {share:.1%}  "
        f"(take-up {table.take_up(1):.1%} when encouraged vs {table.take_up(0):.1%} otherwise)"
    )
    if not passed:
        detail += (
            "  The instrument does not raise take-up, which is inconsistent "
            "with a positive share of compliers and no defiers."
        )
    return RefutationCheck(name="Monotonicity (complier share)", passed=passed, detail=detail)


class IVRefutationReport(RefutationReport):
    """
    Results of diagnostic checks run against an IV (2SLS) estimation.

    Obtain via ``IVResult.refute(data)``.

    Example::

        result = IV2SLS(treatment="net_use", outcome="malaria", instrument="sms").fit(df)
        print(result.refute(df).summary())
    """

    def __init__(
        self,
        checks: list[RefutationCheck],
        treatment: str,
        outcome: str,
        instrument: str,
    ) -> None:
        super().__init__(checks, treatment, outcome)
        self._instrument = instrument

    def _header_lines(self) -> list[str]:
        return [
            f"IV Refutation Report: {self._treatment} → {self._outcome}",
            f"  Instrument: {self._instrument}",
        ]
