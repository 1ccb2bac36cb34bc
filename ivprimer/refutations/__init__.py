from .iv import IVRefutationReport
from ._check import Assumption, RefutationCheck, RefutationReport

__all__ = ["IVRefutationReport", "Assumption", "RefutationCheck", "RefutationReport"]
