"""Early prediction of pediatric NIV failure from a bedside snapshot."""

from .core.orchestrator import assess
from .schemas import ClinicalSnapshot, RiskAssessment

__version__ = "0.1.0"

__all__ = ["ClinicalSnapshot", "RiskAssessment", "__version__", "assess"]
