"""
Winner selection and plain-English feedback for evaluated quotes.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Sequence

from src.acceptance.competition import ModeSelection, ScoringMode
from src.acceptance.composite import ScoredQuote, meets_threshold
from src.data.models.quote import ScoreBreakdown

OUTBID_FEEDBACK = "Outbid by a better quote"


@dataclass
class Decision:
    """Outcome of ranking the pending pool for one submitted quote."""

    ranked: list[ScoredQuote]
    submitting: ScoredQuote
    selection: ModeSelection

    @property
    def winner(self) -> ScoredQuote:
        """Candidate winner: the top composite score."""
        return self.ranked[0]

    @property
    def has_winner(self) -> bool:
        """Whether the candidate winner clears the mode's threshold."""
        return meets_threshold(self.winner.breakdown, self.selection.threshold)

    @property
    def accepted(self) -> bool:
        return self.has_winner and self.winner.quote.quote_id == self.submitting.quote.quote_id

    @property
    def losers(self) -> list[ScoredQuote]:
        return [s for s in self.ranked if s is not self.winner]


def rank(scored: Sequence[ScoredQuote]) -> list[ScoredQuote]:
    """Sort by composite, highest first. Ties keep their input order."""
    return sorted(scored, key=lambda s: s.breakdown.composite_score, reverse=True)


def decide(
    scored: Sequence[ScoredQuote], submitting_quote_id: str, selection: ModeSelection
) -> Optional[Decision]:
    """Rank the pool and locate the submitted quote; None if it was not scored."""
    submitting = next((s for s in scored if s.quote.quote_id == submitting_quote_id), None)
    if submitting is None or not scored:
        return None
    return Decision(ranked=rank(scored), submitting=submitting, selection=selection)


def _pct(value: float) -> int:
    return int(Decimal(str(value * 100)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def weak_signals(breakdown: ScoreBreakdown) -> list[str]:
    """Name each signal that held the quote back."""
    notes = []
    if breakdown.price_score < 0.5:
        notes.append("your price was too high compared to other bids")
    elif breakdown.price_score < 0.7:
        notes.append("your price could be more competitive")
    if breakdown.eta_score < 0.5:
        notes.append("your estimated arrival time was too late")
    if breakdown.fleet_rating_score < 0.5:
        notes.append("your fleet rating needs improvement")
    if breakdown.vehicle_match < 0.7:
        notes.append("your vehicle wasn't the ideal match for this load")
    return notes


def acceptance_feedback(decision: Decision) -> str:
    """Congratulation message for the accepted quote."""
    breakdown = decision.winner.breakdown
    score_pct = _pct(breakdown.composite_score)
    if decision.selection.mode == ScoringMode.SOLE_BIDDER:
        return (
            f"Congratulations! Your quote was accepted as the sole bid with a score of "
            f"{score_pct}%. Your pricing was rated {_pct(breakdown.price_score)}% competitive."
        )
    return (
        f"Congratulations! Your quote was selected as the best out of "
        f"{len(decision.ranked)} competing bids. You scored {score_pct}% overall, "
        f"beating the next closest quote."
    )


def rejection_feedback(decision: Decision) -> str:
    """Explain why the submitted quote lost, naming its weakest signals."""
    mine = decision.submitting
    my_pct = _pct(mine.breakdown.composite_score)
    notes = weak_signals(mine.breakdown)

    if decision.has_winner:
        winner = decision.winner
        winner_pct = _pct(winner.breakdown.composite_score)
        price_diff = mine.quote.quoted_price - winner.quote.quoted_price
        if price_diff > 0:
            text = (
                f"Your quote was outbid. The winning bid was £{price_diff:.2f} cheaper. "
                f"You scored {my_pct}% vs the winner's {winner_pct}%."
            )
        else:
            text = (
                f"Your quote was outbid. Despite competitive pricing, the winning bid scored "
                f"higher overall ({winner_pct}% vs your {my_pct}%)."
            )
        if notes:
            text += f" Areas to improve: {'; '.join(notes)}."
        return text

    threshold_pct = _pct(decision.selection.threshold)
    if notes:
        return (
            f"Your quote scored {my_pct}%, below the {threshold_pct}% threshold. "
            f"Key issues: {'; '.join(notes)}."
        )
    return (
        f"Your quote scored {my_pct}%, just below the {threshold_pct}% acceptance threshold. "
        f"A slightly lower price or faster ETA could push you over."
    )
