"""
Quote acceptance engine for freight marketplace loads.

This module contains:
- Gate: Budget and vehicle-class eligibility checks
- Signals: Price, ETA, fleet rating and vehicle match scorers
- Composite: Weighted score breakdowns
- Competition: Sole-bidder vs. competitive scoring
- Decision: Winner selection and feedback
- Engine: The evaluate() entry point
- Locking: Per-load serialisation of evaluations
"""

from .base import BaseEvaluator, EvaluationRecord
from .competition import CompetitionContext, ScoringMode
from .composite import CompositeEvaluator, build_breakdown
from .engine import AcceptanceResult, QuoteAcceptanceEngine
from .gate import EligibilityGate, GateRejection
from .locking import LoadSerializer, SerializedAcceptanceService

__all__ = [
    "AcceptanceResult",
    "BaseEvaluator",
    "CompetitionContext",
    "CompositeEvaluator",
    "EligibilityGate",
    "EvaluationRecord",
    "GateRejection",
    "LoadSerializer",
    "QuoteAcceptanceEngine",
    "ScoringMode",
    "SerializedAcceptanceService",
    "build_breakdown",
]
