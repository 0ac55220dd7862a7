"""Stepped cross-section of a straight flight.

The profile lives in the flight's local XY plane: X runs along the walking
line, Y is up. It is the sawtooth of (nosed) treads and risers closed by a
waist line parallel to the pitch, mitered vertically into the top landing
and horizontally into the floor at the base.
"""
import math
from dataclasses import dataclass
from build123d import Vector


@dataclass(frozen=True)
class FlightProfile:
    points: tuple              # closed polygon as (x, y) tuples, sweep winding
    top_point: tuple           # last tread front, the flight's top edge
    landing_thickness: float   # vertical miter length at the top
    base_thickness: float      # horizontal miter length at the base


def waist_miters(riser_height, tread_length, waist_thickness):
    """Return (landing_thickness, base_thickness) for a waist slab.

    The waist is offset perpendicular to one step's diagonal. Where it meets
    the top landing its vertical extent is waist / cos(alpha); where it meets
    the floor its horizontal extent is waist / sin(beta).
    """
    riser = Vector(0, riser_height, 0)
    tread = Vector(tread_length, 0, 0)
    run = riser + tread
    run_thickness = run.cross(Vector(0, 0, 1)).normalized() * waist_thickness

    alpha = math.radians(run_thickness.get_angle(Vector(0, -1, 0)))
    landing_thickness = run_thickness.length / math.cos(alpha)

    beta = math.radians((-run).get_angle(Vector(1, 0, 0)))
    base_thickness = run_thickness.length / math.sin(beta)
    return landing_thickness, base_thickness


def build_flight_profile(number_of_risers, riser_height, tread_length,
                         waist_thickness, nosing_length=0.0):
    """Build the closed 2D profile of a flight with the given step counts."""
    pts = []
    for i in range(number_of_risers):
        # Tread front (riser foot, set back by the nosing) then riser top
        pts.append((i * tread_length + nosing_length, i * riser_height))
        pts.append((i * tread_length, (i + 1) * riser_height))

    top = (number_of_risers * tread_length, number_of_risers * riser_height)
    pts.append(top)

    landing_t, base_t = waist_miters(riser_height, tread_length, waist_thickness)
    pts.append((top[0], top[1] - landing_t))
    pts.append((base_t, 0.0))

    pts.reverse()
    return FlightProfile(
        points=tuple(pts),
        top_point=top,
        landing_thickness=landing_t,
        base_thickness=base_t,
    )
