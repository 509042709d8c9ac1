"""
Load data model - represents a freight job posted on the marketplace.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, computed_field


class LoadStatus(str, Enum):
    """Load status enumeration."""

    DRAFT = "draft"
    POSTED = "posted"
    IN_TRANSIT = "in_transit"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class VehicleType(str, Enum):
    """Vehicle capacity classes, declared smallest to largest."""

    SMALL_VAN = "small_van"
    MEDIUM_VAN = "medium_van"
    LARGE_VAN = "large_van"
    LUTON = "luton"
    RIGID_7_5T = "rigid_7_5t"
    RIGID_18T = "rigid_18t"
    RIGID_26T = "rigid_26t"
    ARTICULATED = "articulated"

    @property
    def rank(self) -> int:
        """Position in the capacity ordering (0 = smallest)."""
        return list(VehicleType).index(self)

    @property
    def label(self) -> str:
        """Human readable name, e.g. 'rigid 18t'."""
        return self.value.replace("_", " ")


class Location(BaseModel):
    """Collection or delivery point."""

    city: str
    town: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    def __str__(self) -> str:
        """String representation."""
        return f"{self.town}, {self.city}" if self.town else self.city


class Load(BaseModel):
    """
    Represents a freight load posted by a shipper.

    Quotes are evaluated against the load's budget, vehicle requirements and
    collection window.
    """

    # Identification
    load_id: str = Field(..., description="Unique load identifier")
    load_poster_name: Optional[str] = Field(None, description="Shipper or poster name")

    # Status
    status: LoadStatus = Field(LoadStatus.POSTED, description="Current load status")

    # Locations
    origin: Location = Field(..., description="Collection location")
    destination: Location = Field(..., description="Delivery location")
    distance_km: float = Field(..., ge=0, description="Collection to delivery distance")

    # Timing
    collection_time: Optional[datetime] = Field(None, description="Requested collection instant")
    collection_window_minutes: Optional[int] = Field(
        None, ge=0, description="Lateness tolerated after collection_time"
    )

    # Vehicle requirements
    required_vehicle_type: VehicleType = Field(
        VehicleType.RIGID_18T, description="Vehicle class the poster asked for"
    )
    acceptable_vehicle_types: Optional[list[VehicleType]] = Field(
        None, description="Accepted vehicle classes, most preferred first"
    )

    # Commercial
    max_budget: Optional[float] = Field(None, gt=0, description="Poster's absolute price ceiling (GBP)")

    # Special requirements
    adr_required: bool = Field(False, description="Requires ADR (hazardous goods) certification")

    @computed_field
    @property
    def has_vehicle_preferences(self) -> bool:
        """Whether the poster restricted the accepted vehicle classes."""
        return bool(self.acceptable_vehicle_types)

    @property
    def lane(self) -> str:
        """Lane description, e.g. 'Birmingham → London'."""
        return f"{self.origin} → {self.destination}"

    def is_open(self) -> bool:
        """Whether the load still accepts quotes."""
        return self.status == LoadStatus.POSTED
