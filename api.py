"""FastAPI backend for the Stair Studio.
Runs build123d server-side and serves self-contained GLB files plus a
manifest of stair elements (flights and landings). Also exports flight
profiles and landing outlines as DXF, and the whole stair as STEP.
"""
import os
import io
import json
import struct
import base64
import tempfile
import ezdxf
from typing import Optional
from fastapi import FastAPI, HTTPException
from fastapi.responses import Response, JSONResponse
from pydantic import BaseModel
from build123d import export_gltf, export_step, Unit

from quantities import element_kind, generate_csv
from stair import build_stair, DEFAULT_CONFIG
from stair_errors import StairError

app = FastAPI()

CATEGORY_ORDER = ["flights", "landings"]


class StairConfig(BaseModel):
    typology: str = DEFAULT_CONFIG["typology"]
    height: float = DEFAULT_CONFIG["height"]
    riser_height: float = DEFAULT_CONFIG["riser_height"]
    tread_length: float = DEFAULT_CONFIG["tread_length"]
    waist_thickness: float = DEFAULT_CONFIG["waist_thickness"]
    flight_width: float = DEFAULT_CONFIG["flight_width"]
    nosing_length: float = DEFAULT_CONFIG["nosing_length"]
    space: float = DEFAULT_CONFIG["space"]
    origin: tuple[float, float, float] = DEFAULT_CONFIG["origin"]
    direction: tuple[float, float, float] = DEFAULT_CONFIG["direction"]
    turn: str = DEFAULT_CONFIG["turn"]
    landing_method: str = DEFAULT_CONFIG["landing_method"]
    walking_lines: Optional[list[list[tuple[float, float, float]]]] = None


def _build(config: StairConfig):
    """Build the stair, turning construction errors into HTTP 400."""
    try:
        return build_stair(config.dict())
    except (StairError, ValueError) as e:
        print(f"[API] Rejected config: {e}")
        raise HTTPException(status_code=400, detail=str(e))


def _categories(stair):
    """Elements grouped in CATEGORY_ORDER as (name, [elements])."""
    groups = {"flights": list(stair.flights), "landings": list(stair.landings)}
    return [(cat, groups[cat]) for cat in CATEGORY_ORDER if groups[cat]]


def _inject_materials_into_gltf(gltf_json, category_counts, part_face_counts, part_materials):
    """Create glTF materials from the element materials and assign by mesh index.

    OCCT's RWGltf_CafWriter exports a single Compound as one Mesh with many primitives (one per face).
    This function splits that single mesh into one mesh per element based on part_face_counts.
    """
    if not category_counts or not part_face_counts:
        return

    # 1. One glTF material per element
    materials = []
    for mat in part_materials:
        r, g, b = mat.color
        gmat = {
            "name": mat.name,
            "pbrMetallicRoughness": {
                "baseColorFactor": [r, g, b, mat.opacity],
                "metallicFactor": 0.05,
                "roughnessFactor": 0.8,
            },
        }
        if mat.opacity < 1.0:
            gmat["alphaMode"] = "BLEND"
            gmat["doubleSided"] = True
        materials.append(gmat)
    gltf_json["materials"] = materials

    # 2. Split monolithic mesh into individual element meshes
    meshes = gltf_json.get("meshes", [])
    if not meshes:
        return

    original_primitives = meshes[0].get("primitives", [])
    new_meshes = []
    new_nodes = []

    prim_idx = 0
    part_idx = 0
    for cat_name, count in category_counts:
        for _ in range(count):
            face_count = part_face_counts[part_idx]
            part_prims = original_primitives[prim_idx : prim_idx + face_count]
            for prim in part_prims:
                prim["material"] = part_idx

            new_meshes.append({"primitives": part_prims, "name": f"{cat_name}_mesh_{part_idx}"})
            new_nodes.append({"mesh": part_idx, "name": f"part_{part_idx}"})
            prim_idx += face_count
            part_idx += 1

    gltf_json["meshes"] = new_meshes
    gltf_json["nodes"] = new_nodes
    if "scenes" in gltf_json and len(gltf_json["scenes"]) > 0:
        gltf_json["scenes"][0]["nodes"] = list(range(len(new_nodes)))


def pack_glb(gltf_path, category_counts=None, part_face_counts=None, part_materials=None):
    """Read .gltf + .bin → self-contained GLB bytes."""
    with open(gltf_path, "r") as f:
        gltf_json = json.load(f)

    bin_path = gltf_path.rsplit(".", 1)[0] + ".bin"
    bin_data = b""
    if os.path.exists(bin_path):
        with open(bin_path, "rb") as f:
            bin_data = f.read()
        if "buffers" in gltf_json:
            for buf in gltf_json["buffers"]:
                if "uri" in buf:
                    del buf["uri"]
                buf["byteLength"] = len(bin_data)

    if category_counts and part_face_counts and part_materials:
        _inject_materials_into_gltf(gltf_json, category_counts, part_face_counts, part_materials)

    json_bytes = json.dumps(gltf_json, separators=(",", ":")).encode("utf-8")
    json_bytes += b" " * ((4 - len(json_bytes) % 4) % 4)
    bin_data += b"\x00" * ((4 - len(bin_data) % 4) % 4)

    total_length = 12 + 8 + len(json_bytes) + 8 + len(bin_data)

    glb = bytearray()
    glb += struct.pack("<I", 0x46546C67)  # 'glTF'
    glb += struct.pack("<I", 2)
    glb += struct.pack("<I", total_length)
    glb += struct.pack("<I", len(json_bytes))
    glb += struct.pack("<I", 0x4E4F534A)  # 'JSON'
    glb += json_bytes
    glb += struct.pack("<I", len(bin_data))
    glb += struct.pack("<I", 0x004E4942)  # 'BIN'
    glb += bin_data
    return bytes(glb)


def _manifest_entry(element, mesh_index):
    bbox = element.solid.bounding_box()
    entry = {
        "name": element.name,
        "kind": element_kind(element),
        "mesh_index": mesh_index,
        "material": element.material.name,
        "volume_m3": round(element.solid.volume, 6),
        "bbox": {
            "min": [round(bbox.min.X, 4), round(bbox.min.Y, 4), round(bbox.min.Z, 4)],
            "max": [round(bbox.max.X, 4), round(bbox.max.Y, 4), round(bbox.max.Z, 4)],
            "size": [round(bbox.size.X, 4), round(bbox.size.Y, 4), round(bbox.size.Z, 4)],
        },
    }
    if entry["kind"] == "flight":
        entry["treads"] = element.number_of_treads
        entry["height"] = round(element.height(), 6)
    else:
        entry["area_m2"] = round(element.area(), 6)
        entry["elevation"] = round(element.elevation, 6)
    return entry


@app.get("/defaults")
async def get_defaults():
    return DEFAULT_CONFIG


@app.post("/generate")
async def generate_stair(config: StairConfig):
    stair = _build(config)
    try:
        gltf_path = os.path.join(tempfile.gettempdir(), "stair_output.gltf")

        all_parts, materials, manifest_categories = [], [], []
        mesh_index = 0
        for cat_name, elements in _categories(stair):
            cat_manifest = {"name": cat_name, "elements": []}
            for element in elements:
                all_parts.append(element.solid)
                materials.append(element.material)
                cat_manifest["elements"].append(_manifest_entry(element, mesh_index))
                mesh_index += 1
            manifest_categories.append(cat_manifest)

        print(f"[API] Exporting {len(all_parts)} elements...")
        export_gltf(stair.part(), gltf_path, unit=Unit.M)

        category_counts = [(c["name"], len(c["elements"])) for c in manifest_categories]
        part_face_counts = [len(p.faces()) for p in all_parts]
        glb_bytes = pack_glb(gltf_path, category_counts=category_counts,
                             part_face_counts=part_face_counts, part_materials=materials)

        return JSONResponse({
            "typology": stair.typology.value,
            "glb": base64.b64encode(glb_bytes).decode("ascii"),
            "manifest": {
                "categories": manifest_categories,
                "height": round(stair.height(), 6),
                "riser_height": round(stair.riser_height, 6),
            },
            "issues": stair.compliance_issues(),
        })

    except Exception as e:
        import traceback
        traceback.print_exc()
        raise HTTPException(status_code=500, detail=str(e))


@app.post("/quantities")
async def get_quantities(config: StairConfig):
    """Material quantity takeoff as CSV."""
    stair = _build(config)
    return Response(
        content=generate_csv(stair),
        media_type="text/csv",
        headers={"Content-Disposition": "attachment; filename=stair_quantities.csv"},
    )


@app.post("/export/step")
async def export_step_file(config: StairConfig):
    """Exports the whole stair (all flights and landings) as one STEP file."""
    stair = _build(config)
    try:
        with tempfile.NamedTemporaryFile(suffix=".step", delete=False) as tmp:
            tmp_path = tmp.name
        try:
            export_step(stair.part(), tmp_path)
            with open(tmp_path, "rb") as f:
                content = f.read()
        finally:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)

        return Response(
            content=content,
            media_type="application/step",
            headers={"Content-Disposition": f"attachment; filename=stair_{stair.typology.value}.step"},
        )
    except Exception as e:
        print(f"[API] STEP Export Error: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@app.post("/export/dxf")
async def export_dxf_file(config: StairConfig):
    """Generates a DXF with each flight's side profile and each landing's plan outline."""
    stair = _build(config)
    try:
        doc = ezdxf.new()
        doc.layers.add("PROFILES", color=7)
        doc.layers.add("LANDINGS", color=3)
        doc.layers.add("LABELS", color=1)
        msp = doc.modelspace()

        spacing = 1.0
        x_offset = 0.0
        for flight in stair.flights:
            path_points = [(x + x_offset, y) for x, y in flight.profile.points]
            path_points.append(path_points[0])  # Close loop
            msp.add_lwpolyline(path_points, dxfattribs={"layer": "PROFILES"})
            msp.add_text(flight.name, dxfattribs={"layer": "LABELS", "height": 0.1}) \
                .set_placement((x_offset, -0.3))
            x_offset += flight.profile.top_point[0] + spacing

        # Landings in plan, below the profiles
        for landing in stair.landings:
            pts = list(landing.points)
            pts.append(pts[0])
            msp.add_lwpolyline(pts, dxfattribs={"layer": "LANDINGS"})
            first_x, first_y = landing.points[0]
            msp.add_text(landing.name, dxfattribs={"layer": "LABELS", "height": 0.1}) \
                .set_placement((first_x, first_y))

        dxf_buffer = io.StringIO()
        doc.write(dxf_buffer)
        return Response(
            content=dxf_buffer.getvalue(),
            media_type="application/dxf",
            headers={"Content-Disposition": f"attachment; filename=stair_{stair.typology.value}.dxf"},
        )

    except Exception as e:
        import traceback
        traceback.print_exc()
        raise HTTPException(status_code=500, detail=str(e))


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
