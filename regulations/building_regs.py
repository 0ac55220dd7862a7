import math


class PartKValidator:
    """Validator for UK Building Regulations Part K (Stairs)."""

    # Part K limits for private dwellings, in mm
    RISE_RANGE = (150.0, 220.0)
    GOING_RANGE = (220.0, 300.0)
    MAX_PITCH = 42.0
    TRG_RANGE = (550.0, 700.0)

    @staticmethod
    def check_staircase(rise: float, going: float) -> list[str]:
        """
        Validate the steps of a stair flight.

        Args:
            rise: Individual riser height (m)
            going: Individual tread length (m)

        Returns:
            List of issues; empty when compliant. Values are reported in mm.
        """
        issues = []

        rise_mm = rise * 1000.0
        going_mm = going * 1000.0
        pitch = math.degrees(math.atan2(rise_mm, going_mm))
        trg = 2 * rise_mm + going_mm

        lo, hi = PartKValidator.RISE_RANGE
        if not (lo <= rise_mm <= hi):
            issues.append(f"Riser height {rise_mm:.1f}mm is outside compliant range [{lo:.0f}, {hi:.0f}]")

        lo, hi = PartKValidator.GOING_RANGE
        if not (lo <= going_mm <= hi):
            issues.append(f"Stair going {going_mm:.1f}mm is outside compliant range [{lo:.0f}, {hi:.0f}]")

        if pitch > PartKValidator.MAX_PITCH + 0.1:  # Allow a tiny margin for rounding
            issues.append(f"Pitch {pitch:.1f}° exceeds maximum {PartKValidator.MAX_PITCH:.0f}°")

        lo, hi = PartKValidator.TRG_RANGE
        if not (lo <= trg <= hi):
            issues.append(f"2R + G calculation ({trg:.1f}) is outside compliant range [{lo:.0f}, {hi:.0f}]")

        return issues
