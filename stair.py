"""Multi-flight Stair Builder.
Generates a stair assembly (flights + landings) from walking lines and a
stair type, for the typologies:
- Straight run (1 flight)
- Quarter turn (2 flights + quarterspace landing)
- Half turn (2 flights + halfspace landing)

Usage:
    python stair.py [--typology HalfTurnStair] [--height 3.0] [--width 1.0]
"""
import math
import argparse
from build123d import *

from landing import LandingMethod, build_landing
from regulations.building_regs import PartKValidator
from stair_errors import InvalidArgument, ParameterOutOfRange, UnsupportedTypology
from stair_flight import StairFlight
from stair_geometry import WORLD_UP, WalkingLine, horizontal
from stair_type import DEFAULT_MATERIAL, StairFlightSpec, StairType, StairTypology

# Default Configuration (metres)
DEFAULT_CONFIG = {
    "typology": StairTypology.HALF_TURN.value,
    "height": 3.0,
    "riser_height": 0.18,
    "tread_length": 0.28,
    "waist_thickness": 0.15,
    "flight_width": 1.0,
    "nosing_length": 0.0,
    "space": 0.1,
    "origin": (0.0, 0.0, 0.0),
    "direction": (1.0, 0.0, 0.0),
    "turn": "left",
    "landing_method": LandingMethod.PROJECTION.value,
    "walking_lines": None,
}

# Number of walking lines each buildable typology consumes
TYPOLOGY_ARITY = {
    StairTypology.STRAIGHT_RUN: 1,
    StairTypology.QUARTER_TURN: 2,
    StairTypology.HALF_TURN: 2,
}


def _riser_split(height, riser_height):
    """Return (riser_count, actual_riser_height) for a total rise.
    Rounding error is absorbed uniformly by every riser.
    """
    if not math.isfinite(height) or height <= 0:
        raise ParameterOutOfRange("height", height, f"height must be positive, got {height!r}")
    ratio = height / riser_height
    riser_count = max(1, math.ceil(ratio - 1e-9 * max(1.0, ratio)))
    return riser_count, height / riser_count


def _plan_direction(direction):
    d = horizontal(Vector(direction))
    if d.length <= 1e-9:
        raise ParameterOutOfRange("direction", direction, "direction must have a horizontal component")
    return d.normalized()


class Stair:
    """A stair: one or two flights plus the landing between them.

    Args:
        typology: StairTypology member or its string value.
        walking_lines: Walking lines, bottom flight first. The second line is
            given at the foot elevation; it is raised by the first flight's
            height before the second flight is built.
        stair_type: Shared StairType (dimensions + material).
        spec: Explicit StairFlightSpec, instead of a stair type.
        placement: Optional build123d Location applied to every element.
        material: Overrides the stair type's material.
        landing_method: LandingMethod (or its value) for two-flight stairs.
    """

    def __init__(self, typology, walking_lines, stair_type=None, spec=None,
                 placement=None, material=None,
                 landing_method=LandingMethod.PROJECTION):
        self.typology = StairTypology(typology)
        self.walking_lines = tuple(walking_lines)
        if (stair_type is None) == (spec is None):
            raise InvalidArgument("Pass exactly one of stair_type or spec.")
        self.stair_type = stair_type
        self.spec = stair_type.flight_spec() if stair_type is not None else spec
        if not isinstance(self.spec, StairFlightSpec):
            raise InvalidArgument(f"spec must be a StairFlightSpec, got {type(self.spec).__name__}")
        if material is None:
            material = stair_type.material if stair_type is not None else DEFAULT_MATERIAL
        self.material = material
        self.placement = placement
        self.landing_method = LandingMethod(landing_method)

        self.check_input()

        builders = {
            StairTypology.STRAIGHT_RUN: self._build_straight_run,
            StairTypology.QUARTER_TURN: self._build_two_flights,
            StairTypology.HALF_TURN: self._build_two_flights,
        }
        print(f"Building: {self.typology.value}, R={self.spec.riser_height:.4f}, "
              f"T={self.spec.tread_length}, W={self.spec.flight_width}")
        flights, landings = builders[self.typology]()

        # Only publish once everything is built
        self._flights = tuple(flights)
        self._landings = tuple(landings)

    def check_input(self):
        """Reject unimplemented typologies and walking line count mismatches."""
        if self.typology not in TYPOLOGY_ARITY:
            raise UnsupportedTypology(f"{self.typology.value} is not implemented.")
        expected = TYPOLOGY_ARITY[self.typology]
        actual = len(self.walking_lines)
        if actual != expected:
            raise InvalidArgument(
                f"{self.typology.value} needs exactly {expected} walking line(s), got {actual}.")

    def _flight(self, walking_line, index):
        flight = StairFlight(walking_line, self.spec, placement=self.placement,
                             material=self.material, name=f"flight_{index}")
        print(f"  Flight {index}: {flight.number_of_treads} treads, height {flight.height():.3f}")
        return flight

    def _build_straight_run(self):
        return [self._flight(self.walking_lines[0], 1)], []

    def _build_two_flights(self):
        flight1 = self._flight(self.walking_lines[0], 1)
        walking_line2 = self.walking_lines[1].offset(WORLD_UP * flight1.height())
        flight2 = self._flight(walking_line2, 2)

        landing = build_landing(flight1, flight2, method=self.landing_method,
                                placement=self.placement, name="landing_1")
        print(f"  Landing: {len(landing.points)} vertices, area {landing.area():.3f}, "
              f"z={landing.elevation:.3f}")
        return [flight1, flight2], [landing]

    # --- Convenience constructors ---
    @classmethod
    def straight_run(cls, origin, direction, height, stair_type=None, spec=None, **kwargs):
        """Single flight rising `height` from `origin` along `direction`."""
        base_spec = _base_spec(stair_type, spec)
        riser_count, actual = _riser_split(height, base_spec.riser_height)
        d = _plan_direction(direction)
        start = Vector(origin)
        line = WalkingLine(start, start + d * (riser_count * base_spec.tread_length))
        stair_type, spec = _with_riser_height(stair_type, spec, actual)
        return cls(StairTypology.STRAIGHT_RUN, [line], stair_type=stair_type, spec=spec, **kwargs)

    @classmethod
    def half_turn(cls, origin, direction, height, space, stair_type=None, spec=None, **kwargs):
        """Two opposed flights separated by `space`, rising `height` in total."""
        base_spec = _base_spec(stair_type, spec)
        if not math.isfinite(space) or space < 0:
            raise ParameterOutOfRange("space", space, f"space must be >= 0, got {space!r}")
        riser_count, actual = _riser_split(height, base_spec.riser_height)
        flight1_count = math.ceil(riser_count / 2)
        flight2_count = riser_count - flight1_count
        tread = base_spec.tread_length

        d = _plan_direction(direction)
        start = Vector(origin)
        line1 = WalkingLine(start, start + d * (flight1_count * tread))
        start2 = line1.end + WORLD_UP.cross(d) * (base_spec.flight_width + space)
        line2 = WalkingLine(start2, start2 - d * (flight2_count * tread))

        stair_type, spec = _with_riser_height(stair_type, spec, actual)
        return cls(StairTypology.HALF_TURN, [line1, line2], stair_type=stair_type, spec=spec, **kwargs)

    @classmethod
    def quarter_turn(cls, origin, direction, height, stair_type=None, spec=None,
                     turn="left", **kwargs):
        """Two flights at right angles around a square landing."""
        if turn not in ("left", "right"):
            raise InvalidArgument(f"turn must be 'left' or 'right', got {turn!r}")
        base_spec = _base_spec(stair_type, spec)
        riser_count, actual = _riser_split(height, base_spec.riser_height)
        flight1_count = math.ceil(riser_count / 2)
        flight2_count = riser_count - flight1_count
        tread = base_spec.tread_length
        half_w = base_spec.flight_width / 2

        d = _plan_direction(direction)
        side = WORLD_UP.cross(d)
        if turn == "right":
            side = -side
        start = Vector(origin)
        line1 = WalkingLine(start, start + d * (flight1_count * tread))
        start2 = line1.end + d * half_w + side * half_w
        line2 = WalkingLine(start2, start2 + side * (flight2_count * tread))

        stair_type, spec = _with_riser_height(stair_type, spec, actual)
        return cls(StairTypology.QUARTER_TURN, [line1, line2], stair_type=stair_type, spec=spec, **kwargs)

    # --- Aggregate ---
    @property
    def flights(self):
        return self._flights

    @property
    def landings(self):
        return self._landings

    @property
    def elements(self):
        """Flights bottom to top, then landings."""
        return self._flights + self._landings

    @property
    def riser_height(self) -> float:
        return self.spec.riser_height

    @property
    def tread_length(self) -> float:
        return self.spec.tread_length

    def height(self) -> float:
        return sum(f.height() for f in self._flights)

    def part(self):
        """All element solids as one build123d Compound."""
        return Compound(children=[e.solid for e in self.elements])

    def compliance_issues(self):
        return PartKValidator.check_staircase(self.riser_height, self.tread_length)


def _base_spec(stair_type, spec):
    if (stair_type is None) == (spec is None):
        raise InvalidArgument("Pass exactly one of stair_type or spec.")
    return stair_type.flight_spec() if stair_type is not None else spec


def _with_riser_height(stair_type, spec, riser_height):
    if stair_type is not None:
        return stair_type.with_riser_height(riser_height), None
    if spec is None:
        raise InvalidArgument("Pass exactly one of stair_type or spec.")
    return None, StairFlightSpec(riser_height, spec.tread_length, spec.waist_thickness,
                                 spec.flight_width, spec.nosing_length)


def build_stair(config):
    """Build a Stair from a config dict (missing keys come from DEFAULT_CONFIG)."""
    cfg = DEFAULT_CONFIG.copy()
    cfg.update({k: v for k, v in config.items() if v is not None})
    typology = StairTypology(cfg["typology"])

    spec = StairFlightSpec(
        riser_height=cfg["riser_height"],
        tread_length=cfg["tread_length"],
        waist_thickness=cfg["waist_thickness"],
        flight_width=cfg["flight_width"],
        nosing_length=cfg["nosing_length"],
    )
    options = {"landing_method": cfg["landing_method"]}

    if cfg.get("walking_lines"):
        lines = [WalkingLine(tuple(s), tuple(e)) for s, e in cfg["walking_lines"]]
        return Stair(typology, lines, spec=spec, **options)
    if typology is StairTypology.STRAIGHT_RUN:
        return Stair.straight_run(cfg["origin"], cfg["direction"], cfg["height"], spec=spec, **options)
    if typology is StairTypology.QUARTER_TURN:
        return Stair.quarter_turn(cfg["origin"], cfg["direction"], cfg["height"], spec=spec,
                                  turn=cfg["turn"], **options)
    if typology is StairTypology.HALF_TURN:
        return Stair.half_turn(cfg["origin"], cfg["direction"], cfg["height"], cfg["space"],
                               spec=spec, **options)
    raise UnsupportedTypology(f"{typology.value} is not implemented.")


if __name__ == "__main__":
    from ocp_vscode import show, set_port
    set_port(3939)

    parser = argparse.ArgumentParser()
    parser.add_argument("--typology", default=DEFAULT_CONFIG["typology"],
                        choices=[t.value for t in TYPOLOGY_ARITY])
    parser.add_argument("--height", type=float, default=DEFAULT_CONFIG["height"])
    parser.add_argument("--riser", type=float, default=DEFAULT_CONFIG["riser_height"])
    parser.add_argument("--tread", type=float, default=DEFAULT_CONFIG["tread_length"])
    parser.add_argument("--waist", type=float, default=DEFAULT_CONFIG["waist_thickness"])
    parser.add_argument("--width", type=float, default=DEFAULT_CONFIG["flight_width"])
    parser.add_argument("--nosing", type=float, default=DEFAULT_CONFIG["nosing_length"])
    parser.add_argument("--space", type=float, default=DEFAULT_CONFIG["space"])
    parser.add_argument("--turn", choices=["left", "right"], default=DEFAULT_CONFIG["turn"])
    parser.add_argument("--landing", choices=[m.value for m in LandingMethod],
                        default=DEFAULT_CONFIG["landing_method"])
    args = parser.parse_args()

    config = DEFAULT_CONFIG.copy()
    config.update({
        "typology": args.typology,
        "height": args.height,
        "riser_height": args.riser,
        "tread_length": args.tread,
        "waist_thickness": args.waist,
        "flight_width": args.width,
        "nosing_length": args.nosing,
        "space": args.space,
        "turn": args.turn,
        "landing_method": args.landing,
    })

    stair = build_stair(config)
    for issue in stair.compliance_issues():
        print(f"  [!] {issue}")

    bb = stair.part().bounding_box()
    print(f"BBox: X={bb.min.X:.3f}..{bb.max.X:.3f}, Y={bb.min.Y:.3f}..{bb.max.Y:.3f}, Z={bb.min.Z:.3f}..{bb.max.Z:.3f}")

    show(*[e.solid for e in stair.elements], names=[e.name for e in stair.elements])
