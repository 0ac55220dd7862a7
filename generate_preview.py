
import sys
import os
from build123d import *

# Add current dir to path to find the builders
sys.path.append(os.getcwd())
from stair import build_stair, DEFAULT_CONFIG

def generate_2d_image(path="stair_preview.svg"):
    print("Building stair geometry...")
    stair = build_stair(DEFAULT_CONFIG)

    print("Projecting to 2D...")
    # Rotate the model for an isometric-style view
    view_stair = stair.part().rotate(Axis.X, 45).rotate(Axis.Z, 45)

    exporter = ExportSVG(scale=100)
    exporter.add_shape(view_stair)
    exporter.write(path)
    print(f"Saved preview to {path}")

if __name__ == "__main__":
    try:
        generate_2d_image()
    except Exception as e:
        print(f"Error: {e}")
        import traceback
        traceback.print_exc()
