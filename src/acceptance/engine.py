"""
Quote Acceptance Engine - decides which carrier quote wins a load.

This engine:
- Rejects quotes outside the poster's budget or accepted vehicle classes
- Re-scores every pending quote for the load on price, ETA, fleet rating and vehicle match
- Accepts the top quote when it clears the sole-bidder or competitive threshold
- Writes status, score breakdown and feedback for every quote it settles

Callers must serialise evaluations per load (see src.acceptance.locking):
evaluating one quote rewrites the status of every other pending quote on the
same load.
"""

from datetime import datetime, timezone
from time import time
from typing import Any, Callable, Optional

import structlog
from pydantic import BaseModel

from src.acceptance.base import BaseEvaluator, EvaluationRecord
from src.acceptance.competition import ScoringMode, select_mode
from src.acceptance.composite import CompositeEvaluator, ScoredQuote
from src.acceptance.decision import (
    OUTBID_FEEDBACK,
    Decision,
    acceptance_feedback,
    decide,
    rejection_feedback,
)
from src.acceptance.gate import EligibilityGate, GateRejection
from src.core.config import AcceptanceConfig
from src.data.models.load import Load, LoadStatus
from src.data.models.quote import Quote, QuoteStatus, ScoreBreakdown
from src.data.repository import JobMarketRepository
from src.tools.price_recommender import PriceRecommender

SIGNALS = ["price", "eta", "fleet_rating", "vehicle_match"]


class AcceptanceResult(BaseModel):
    """Outcome reported for the submitted quote."""

    quote_id: str
    accepted: bool
    breakdown: ScoreBreakdown
    feedback: str
    mode: Optional[ScoringMode] = None  # None when rejected by the eligibility gate


class QuoteAcceptanceEngine(BaseEvaluator):
    """
    Deterministic quote acceptance decisions for marketplace loads.

    Scores four signals with fixed weights (price 0.40, ETA 0.25, fleet
    rating 0.15, vehicle match 0.20) and accepts the top pending quote when
    its composite reaches 0.60 as a sole bidder or 0.70 in competition.
    """

    def __init__(
        self,
        repository: JobMarketRepository,
        recommender: Optional[PriceRecommender] = None,
        clock: Optional[Callable[[], datetime]] = None,
        acceptance_config: Optional[AcceptanceConfig] = None,
        **kwargs: Any,
    ) -> None:
        """
        Initialize the acceptance engine.

        Args:
            repository: Store for loads, quotes and fleet profiles
            recommender: Benchmark price source; without one price scores fall back to 0.7
            clock: Returns the evaluation instant (defaults to UTC now)
            acceptance_config: Thresholds and defaults (defaults to config.yaml)
        """
        super().__init__(engine_name="quote_acceptance", **kwargs)

        self.repository = repository
        self.recommender = recommender
        self.clock = clock or (lambda: datetime.now(timezone.utc))
        self.settings = acceptance_config or self.config_manager.get_acceptance_config()
        self.gate = EligibilityGate(default_vehicle_type=self.settings.default_vehicle_type)

    def evaluate(self, quote_id: str) -> Optional[AcceptanceResult]:
        """
        Evaluate a submitted quote and settle the load when there is a winner.

        Args:
            quote_id: Quote that was just submitted

        Returns:
            AcceptanceResult for the submitted quote, or None when there is
            nothing to decide (unknown or already evaluated quote, missing or
            closed load, no pending quotes)
        """
        start_time = time()

        quote = self.repository.get_quote(quote_id)
        if quote is None or quote.status != QuoteStatus.SENT:
            self.logger.info("quote_not_evaluable", quote_id=quote_id,
                             status=quote.status.value if quote else None)
            return None

        load = self.repository.get_load(quote.load_id)
        if load is None:
            self.logger.warning("load_not_found", quote_id=quote_id, load_id=quote.load_id)
            return None
        if not load.is_open():
            self.logger.warning("load_not_open", quote_id=quote_id, load_id=load.load_id,
                                load_status=load.status.value)
            return None

        with structlog.contextvars.bound_contextvars(load_id=load.load_id, quote_id=quote_id):
            rejection = self.gate.check(load, quote)
            if rejection is not None:
                result = self._reject_at_gate(quote, load, rejection)
                self._record("gate_rejection", quote, result, start_time, reason=rejection.reason)
                return result

            pending = self._eligible_pending(load, quote_id)
            if not pending:
                return None

            selection = select_mode(pending, self.settings)
            self.logger.info(
                "scoring_quotes",
                lane=load.lane,
                pending=len(pending),
                mode=selection.mode.value,
                threshold=selection.threshold,
            )

            evaluator = CompositeEvaluator(
                load=load,
                recommendation=self._recommendation(load),
                fleet_ratings=self._fleet_ratings(pending),
                now=self.clock(),
                config=self.settings,
            )
            scored = evaluator.score_all(pending, selection.context)

            decision = decide(scored, quote_id, selection)
            if decision is None:
                return None

            self._log_scores(decision)
            result = self._apply(decision, load)
            self._record(
                "acceptance" if result.accepted else "rejection",
                quote,
                result,
                start_time,
                mode=selection.mode.value,
                pool_size=len(pending),
            )
            return result

    def execute(self, quote_id: str) -> Optional[AcceptanceResult]:
        """Execute an evaluation (delegates to evaluate)."""
        return self.evaluate(quote_id)

    def _eligible_pending(self, load: Load, submitting_quote_id: str) -> list[Quote]:
        """
        Sent quotes for the load that pass the eligibility gate.

        Rival quotes that fail the gate are rejected here, so only eligible
        quotes can be ranked or accepted.
        """
        eligible = []
        for q in self.repository.get_quotes_by_load(load.load_id):
            if q.status != QuoteStatus.SENT:
                continue
            rejection = None if q.quote_id == submitting_quote_id else self.gate.check(load, q)
            if rejection is not None:
                self._reject_at_gate(q, load, rejection)
                continue
            eligible.append(q)
        return eligible

    def _reject_at_gate(self, quote: Quote, load: Load, rejection: GateRejection) -> AcceptanceResult:
        """Reject an ineligible quote without scoring it."""
        self.logger.info(
            "quote_gate_rejected",
            gated_quote_id=quote.quote_id,
            reason=rejection.reason,
            quoted_price=quote.quoted_price,
            max_budget=load.max_budget,
            offered_vehicle=quote.vehicle(self.settings.default_vehicle_type).value,
            acceptable_vehicles=[v.value for v in load.acceptable_vehicle_types or []],
        )
        breakdown = ScoreBreakdown.zero()
        self.repository.update_quote_status(quote.quote_id, QuoteStatus.REJECTED)
        self.repository.set_quote_score_breakdown(quote.quote_id, breakdown)
        self.repository.set_quote_feedback(quote.quote_id, rejection.feedback)
        return AcceptanceResult(
            quote_id=quote.quote_id,
            accepted=False,
            breakdown=breakdown,
            feedback=rejection.feedback,
        )

    def _recommendation(self, load: Load):
        if self.recommender is None:
            return None
        rec = self.recommender.recommend_price(
            load.load_id, load.required_vehicle_type, self.settings.neutral_fleet_rating
        )
        if rec is None:
            self.logger.warning("price_recommendation_missing", fallback_price_score=0.7)
        return rec

    def _fleet_ratings(self, quotes: list[Quote]) -> dict[str, float]:
        """Read each fleet's rating once; simulated fleets get the neutral rating."""
        ratings: dict[str, float] = {}
        for q in quotes:
            fleet_id = q.associated_fleet_id
            if fleet_id in ratings:
                continue
            if fleet_id.startswith(self.settings.simulated_fleet_prefix):
                ratings[fleet_id] = self.settings.neutral_fleet_rating
            else:
                ratings[fleet_id] = self.repository.get_fleet_profile(fleet_id).rating
        return ratings

    def _apply(self, decision: Decision, load: Load) -> AcceptanceResult:
        """Write the outcome to the repository and build the submitted quote's result."""
        submitting = decision.submitting

        if not decision.has_winner:
            feedback = rejection_feedback(decision)
            self._settle(submitting, QuoteStatus.REJECTED, feedback)
            return self._result(submitting, False, feedback, decision)

        winner = decision.winner
        winner_feedback = acceptance_feedback(decision)
        self._settle(winner, QuoteStatus.ACCEPTED, winner_feedback)
        self.repository.update_load_status(load.load_id, LoadStatus.IN_TRANSIT)
        self.repository.increment_fleet_jobs_completed(winner.quote.associated_fleet_id)

        feedback = winner_feedback
        for loser in decision.losers:
            if loser is submitting:
                feedback = rejection_feedback(decision)
                self._settle(loser, QuoteStatus.REJECTED, feedback)
            else:
                self._settle(loser, QuoteStatus.REJECTED, OUTBID_FEEDBACK)

        self.logger.info(
            "load_settled",
            winner_quote_id=winner.quote.quote_id,
            winner_fleet_id=winner.quote.associated_fleet_id,
            winner_fleet_name=winner.quote.fleet_quoter_name,
            composite=winner.breakdown.composite_score,
            rejected=len(decision.losers),
        )
        return self._result(submitting, decision.accepted, feedback, decision)

    def _settle(self, scored: ScoredQuote, status: QuoteStatus, feedback: str) -> None:
        quote_id = scored.quote.quote_id
        self.repository.set_quote_score_breakdown(quote_id, scored.breakdown)
        self.repository.set_quote_feedback(quote_id, feedback)
        self.repository.update_quote_status(quote_id, status)

    @staticmethod
    def _result(scored: ScoredQuote, accepted: bool, feedback: str, decision: Decision) -> AcceptanceResult:
        return AcceptanceResult(
            quote_id=scored.quote.quote_id,
            accepted=accepted,
            breakdown=scored.breakdown,
            feedback=feedback,
            mode=decision.selection.mode,
        )

    def _log_scores(self, decision: Decision) -> None:
        for s in decision.ranked:
            b = s.breakdown
            won = decision.has_winner and s is decision.winner
            self.logger.info(
                "quote_scored",
                scored_quote_id=s.quote.quote_id,
                price=b.price_score,
                eta=b.eta_score,
                rating=b.fleet_rating_score,
                vehicle=b.vehicle_match,
                composite=b.composite_score,
                threshold=decision.selection.threshold,
                verdict="ACCEPTED" if won else "REJECTED",
            )

    def _record(
        self, decision_type: str, quote: Quote, result: AcceptanceResult, start_time: float, **extra: Any
    ) -> None:
        self.log_decision(
            EvaluationRecord(
                timestamp=datetime.now(),
                engine_name=self.engine_name,
                decision_type=decision_type,
                input_data={
                    "quote_id": quote.quote_id,
                    "load_id": quote.load_id,
                    "quoted_price": quote.quoted_price,
                    **extra,
                },
                reasoning=result.feedback,
                confidence=result.breakdown.composite_score,
                output_data={
                    "accepted": result.accepted,
                    "breakdown": result.breakdown.model_dump(),
                },
                signals_used=[] if decision_type == "gate_rejection" else SIGNALS,
                execution_time_seconds=time() - start_time,
            )
        )


def main() -> None:
    """Example usage of the quote acceptance engine."""
    from src.core.logging import configure_logging
    from src.data.models.load import Location, VehicleType
    from src.data.repository import InMemoryJobMarketRepository
    from src.tools.price_recommender import RuleBasedPriceRecommender

    configure_logging()

    repository = InMemoryJobMarketRepository(default_rating=4.2)
    repository.add_load(
        Load(
            load_id="LOAD-001",
            load_poster_name="Midlands Retail",
            origin=Location(city="Birmingham"),
            destination=Location(city="London"),
            distance_km=163.5,
            required_vehicle_type=VehicleType.RIGID_18T,
        )
    )
    for quote_id, fleet_id, fleet_name, price, eta in [
        ("Q-001", "fleet-001", "Severn Haulage", 350.0, 90),
        ("Q-002", "sim-fleet-002", "Sim Carrier", 400.0, 120),
    ]:
        repository.add_quote(
            Quote(
                quote_id=quote_id,
                load_id="LOAD-001",
                quoted_price=price,
                associated_fleet_id=fleet_id,
                fleet_quoter_name=fleet_name,
                requested_vehicle_type=VehicleType.RIGID_18T,
                offered_vehicle_type=VehicleType.RIGID_18T,
                eta_to_collection=eta,
                adr_certified=True,
            )
        )

    engine = QuoteAcceptanceEngine(
        repository=repository,
        recommender=RuleBasedPriceRecommender(repository),
    )
    result = engine.evaluate("Q-002")

    print("\n" + "=" * 80)
    print("QUOTE ACCEPTANCE RESULTS")
    print("=" * 80)
    if result is None:
        print("Nothing to decide.")
        return
    print(f"Load: LOAD-001 ({repository.get_load('LOAD-001').lane})")
    print(f"Quote: {result.quote_id} ({result.mode.value if result.mode else 'gate'})")
    print(f"Accepted: {result.accepted}")
    print(f"Composite: {result.breakdown.composite_score:.4f}")
    print(f"  price={result.breakdown.price_score:.2f} eta={result.breakdown.eta_score:.2f} "
          f"rating={result.breakdown.fleet_rating_score:.2f} vehicle={result.breakdown.vehicle_match:.2f}")
    print(f"\nFeedback: {result.feedback}")
    for quote_id in ("Q-001", "Q-002"):
        print(f"  {quote_id}: {repository.get_quote(quote_id).status.value}")
    print("\n" + "=" * 80)


if __name__ == "__main__":
    main()
