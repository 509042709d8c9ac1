"""
Base evaluator class for marketplace decision engines.

Provides common functionality:
- Configuration loading
- Structured logging
- Decision audit trail and export
"""

import json
from abc import ABC, abstractmethod
from collections import Counter
from datetime import datetime
from typing import Any, Optional

import structlog
from pydantic import BaseModel

from src.core.config import ConfigManager, get_config


class EvaluationRecord(BaseModel):
    """
    Structured audit entry for an engine decision.

    Used to explain outcomes after the fact.
    """

    timestamp: datetime
    engine_name: str
    decision_type: str
    input_data: dict[str, Any]
    reasoning: str
    confidence: float  # composite score, 0.0 to 1.0
    output_data: dict[str, Any]
    signals_used: list[str]
    execution_time_seconds: float


class BaseEvaluator(ABC):
    """
    Base class for decision engines.

    Provides:
    - Configuration loading
    - Decision logging
    - Decision export
    """

    def __init__(
        self,
        engine_name: str,
        config_manager: Optional[ConfigManager] = None,
        logger: Optional[structlog.BoundLogger] = None,
    ) -> None:
        """
        Initialize the base evaluator.

        Args:
            engine_name: Name of the engine (e.g., "quote_acceptance")
            config_manager: Optional config manager (defaults to global instance)
            logger: Optional structured logger
        """
        self.engine_name = engine_name
        self.config_manager = config_manager or get_config()
        self.logger = logger or structlog.get_logger(engine_name=engine_name)

        # Decision history (for auditing and explanations)
        self.decision_history: list[EvaluationRecord] = []

    def log_decision(self, record: EvaluationRecord) -> None:
        """
        Record a settled quote for transparency and auditing.

        Args:
            record: EvaluationRecord for the submitted quote
        """
        self.decision_history.append(record)
        self.logger.info(
            "quote_decision_recorded",
            decision_type=record.decision_type,
            quote_id=record.input_data.get("quote_id"),
            load_id=record.input_data.get("load_id"),
            accepted=record.output_data.get("accepted", False),
            composite=record.confidence,
            feedback=record.reasoning,
            execution_time=record.execution_time_seconds,
        )

    def decision_summary(self) -> dict[str, int]:
        """Count recorded decisions by type (gate_rejection, acceptance, rejection)."""
        return dict(Counter(r.decision_type for r in self.decision_history))

    def export_decisions(self, filepath: str, decision_type: Optional[str] = None) -> int:
        """
        Export the decision history to a JSON file.

        Args:
            filepath: Path to output JSON file
            decision_type: Only export decisions of this type

        Returns:
            Number of decisions written
        """
        records = [
            r for r in self.decision_history
            if decision_type is None or r.decision_type == decision_type
        ]
        with open(filepath, "w") as f:
            json.dump(
                {
                    "engine_name": self.engine_name,
                    "summary": self.decision_summary(),
                    "decisions": [r.model_dump(mode="json") for r in records],
                },
                f,
                indent=2,
                default=str,
            )

        self.logger.info(
            "decisions_exported", filepath=filepath, decision_type=decision_type, count=len(records)
        )
        return len(records)

    @abstractmethod
    def execute(self, *args: Any, **kwargs: Any) -> Any:
        """
        Execute the engine's primary function.

        Returns:
            Engine-specific output
        """
        pass

    def __repr__(self) -> str:
        """String representation of the engine."""
        return (
            f"{self.__class__.__name__}(engine_name='{self.engine_name}', "
            f"decisions={len(self.decision_history)})"
        )
