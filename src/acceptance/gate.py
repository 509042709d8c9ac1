"""Hard eligibility checks (ZOPA gates) applied before any scoring."""

from dataclasses import dataclass
from typing import Optional

from src.data.models.load import Load, VehicleType
from src.data.models.quote import Quote


@dataclass
class GateRejection:
    """Why a quote fell outside the zone of possible agreement."""

    reason: str  # "over_budget" | "vehicle_not_accepted"
    feedback: str


def _gbp(amount: float) -> str:
    return f"£{amount:.2f}"


class EligibilityGate:
    """Instant-rejection checks on budget ceiling and accepted vehicle classes."""

    def __init__(self, default_vehicle_type: VehicleType = VehicleType.RIGID_18T) -> None:
        self.default_vehicle_type = default_vehicle_type

    def check(self, load: Load, quote: Quote) -> Optional[GateRejection]:
        """Return a GateRejection, or None when the quote may be scored."""
        if load.max_budget is not None and quote.quoted_price > load.max_budget:
            budget = _gbp(load.max_budget)
            return GateRejection(
                reason="over_budget",
                feedback=(
                    f"Your quote of {_gbp(quote.quoted_price)} exceeds the poster's maximum "
                    f"budget of {budget}. To be considered, your price needs to be at or "
                    f"below {budget}."
                ),
            )

        offered = quote.vehicle(self.default_vehicle_type)
        if load.has_vehicle_preferences and offered not in load.acceptable_vehicle_types:
            accepted = ", ".join(v.label for v in load.acceptable_vehicle_types)
            return GateRejection(
                reason="vehicle_not_accepted",
                feedback=(
                    f"Your {offered.label} is not accepted for this job. "
                    f"The poster only accepts: {accepted}."
                ),
            )

        return None
