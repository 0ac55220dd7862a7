import io
import csv


def element_kind(element):
    """'landing' for slabs, 'flight' for stair flights."""
    return "flight" if hasattr(element, "number_of_treads") else "landing"


def generate_csv(stair):
    """
    Calculates a quantity takeoff for a stair, grouped by material.

    Args:
        stair: A built Stair.

    Returns:
        str: A formatted CSV string with one row per material.
    """
    # results[material_name] = {flights, landings, volume_m3, landing_area_m2}
    results = {}

    for element in stair.elements:
        mat_name = element.material.name
        if mat_name not in results:
            results[mat_name] = {
                "flights": 0,
                "landings": 0,
                "volume_m3": 0.0,
                "landing_area_m2": 0.0,
            }
        res = results[mat_name]
        res["volume_m3"] += element.solid.volume
        if element_kind(element) == "flight":
            res["flights"] += 1
        else:
            res["landings"] += 1
            res["landing_area_m2"] += element.area()

    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(["Material", "Flights", "Landings", "Total Volume (m3)", "Landing Area (m2)"])

    # Sort materials for consistent output
    for mat_name in sorted(results.keys()):
        res = results[mat_name]
        writer.writerow([
            mat_name,
            res["flights"],
            res["landings"],
            f"{res['volume_m3']:.3f}",
            f"{res['landing_area_m2']:.3f}",
        ])

    return output.getvalue()


if __name__ == "__main__":
    from stair import build_stair, DEFAULT_CONFIG
    print(generate_csv(build_stair(DEFAULT_CONFIG)))
