from .config import TutorialConfig
from .dataset import load_malaria_data, simulate_encouragement
from .compliance import ComplianceTable
from .estimators.first_stage import FirstStage, FirstStageResult
from .estimators.naive import NaiveOLS, NaiveResult
from .estimators.itt import ITT, ITTResult
from .estimators.iv import IV2SLS, IVResult, wald_ratio
from .refutations import IVRefutationReport, RefutationCheck
from .refutations._check import Assumption
from .simulation import (
    compare_instrument_strength,
    monte_carlo,
    simulate_instrument_data,
    simulate_invalid_instrument,
)
from .report import TutorialDocument
from ._exceptions import DatasetError

__version__ = "0.1.0"

__all__ = [
    "TutorialConfig",
    "load_malaria_data", "simulate_encouragement",
    "ComplianceTable",
    "FirstStage", "FirstStageResult",
    "NaiveOLS", "NaiveResult",
    "ITT", "ITTResult",
    "IV2SLS", "IVResult", "wald_ratio",
    "IVRefutationReport", "RefutationCheck", "Assumption",
    "compare_instrument_strength", "monte_carlo",
    "simulate_instrument_data", "simulate_invalid_instrument",
    "TutorialDocument",
    "DatasetError",
]
