from .first_stage import FirstStage, FirstStageResult
from .naive import NaiveOLS, NaiveResult
from .itt import ITT, ITTResult
from .iv import IV2SLS, IVResult, wald_ratio

__all__ = [
    "FirstStage", "FirstStageResult",
    "NaiveOLS", "NaiveResult",
    "ITT", "ITTResult",
    "IV2SLS", "IVResult", "wald_ratio",
]
