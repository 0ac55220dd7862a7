"""Stair type records: materials, flight dimensions and typologies.

Everything here is a frozen value object, validated once when it is created
and safe to share between any number of stairs.
"""
import math
from dataclasses import dataclass, replace
from enum import Enum

from stair_errors import ParameterOutOfRange


@dataclass(frozen=True)
class Material:
    name: str
    color: tuple = (0.8, 0.8, 0.8)
    opacity: float = 1.0


DEFAULT_MATERIAL = Material("default", (0.8, 0.8, 0.8), 1.0)
CONCRETE = Material("concrete", (0.62, 0.62, 0.60), 1.0)


class StairTypology(Enum):
    """Topological pattern of flights and landings.

    All identifiers are recognized; only STRAIGHT_RUN, QUARTER_TURN and
    HALF_TURN can be built.
    """
    STRAIGHT_RUN = "StraightRunStair"
    TWO_STRAIGHT_RUN = "TwoStraightRunStair"
    QUARTER_WINDING = "QuarterWindingStair"
    QUARTER_TURN = "QuarterTurnStair"
    HALF_WINDING = "HalfWindingStair"
    HALF_TURN = "HalfTurnStair"
    TWO_QUARTER_WINDING = "TwoQuarterWindingStair"
    TWO_QUARTER_TURN = "TwoQuarterTurnStair"
    THREE_QUARTER_WINDING = "ThreeQuarterWindingStair"
    THREE_QUARTER_TURN = "ThreeQuarterTurnStair"
    SPIRAL = "SpiralStair"
    DOUBLE_RETURN = "DoubleReturnStair"
    CURVED_RUN = "CurvedRunStair"
    TWO_CURVED_RUN = "TwoCurvedRunStair"
    OTHER = "OtherOperation"


def _check_positive(field, value):
    if not isinstance(value, (int, float)) or not math.isfinite(value) or value <= 0:
        raise ParameterOutOfRange(field, value, f"{field} must be a positive number, got {value!r}")


@dataclass(frozen=True)
class StairFlightSpec:
    """Dimensions of one straight flight.

    Args:
        riser_height: Vertical distance from tread to tread.
        tread_length: Horizontal distance from tread front to tread front.
        waist_thickness: Slab thickness measured perpendicular to the slope.
        flight_width: Overall width of the flight.
        nosing_length: Overhang of a tread past the riser below, < tread_length.
    """
    riser_height: float
    tread_length: float
    waist_thickness: float
    flight_width: float
    nosing_length: float = 0.0

    def __post_init__(self):
        _check_positive("riser_height", self.riser_height)
        _check_positive("tread_length", self.tread_length)
        _check_positive("waist_thickness", self.waist_thickness)
        _check_positive("flight_width", self.flight_width)
        nosing = self.nosing_length
        if not isinstance(nosing, (int, float)) or not math.isfinite(nosing) or nosing < 0:
            raise ParameterOutOfRange("nosing_length", nosing,
                                      f"nosing_length must be >= 0, got {nosing!r}")
        if nosing >= self.tread_length:
            raise ParameterOutOfRange(
                "nosing_length", nosing,
                f"nosing_length {nosing!r} must be shorter than tread_length {self.tread_length!r}")


@dataclass(frozen=True)
class StairType:
    """Template shared by stairs: flight dimensions plus material."""
    name: str
    riser_height: float
    tread_length: float
    waist_thickness: float
    flight_width: float
    nosing_length: float = 0.0
    material: Material = DEFAULT_MATERIAL

    def __post_init__(self):
        self.flight_spec()

    def flight_spec(self) -> StairFlightSpec:
        return StairFlightSpec(
            riser_height=self.riser_height,
            tread_length=self.tread_length,
            waist_thickness=self.waist_thickness,
            flight_width=self.flight_width,
            nosing_length=self.nosing_length,
        )

    def with_riser_height(self, riser_height) -> "StairType":
        return replace(self, riser_height=riser_height)
