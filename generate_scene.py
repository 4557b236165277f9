#!/usr/bin/env python
"""
Reconstruct box geometry from a scene.3d.v1 document.

Usage:
    python generate_scene.py scene.json output.json [key=value ...]
    python generate_scene.py scene.json  # outputs to scene.boxes.json

Options (same keys as the viewer query string):
    align=flush|centered   inset=none|auto|epsilon|<metres>
    mode=optimized|literal grid=0|1

Example:
    python generate_scene.py layouts/studio.json layouts/studio.boxes.json align=centered inset=auto
"""

import sys
from pathlib import Path

from scene3d.core.config import Config
from scene3d.pipeline import load_scene


def main():
    args = [a for a in sys.argv[1:] if "=" not in a or a.startswith("http")]
    params = dict(a.split("=", 1) for a in sys.argv[1:] if "=" in a and not a.startswith("http"))

    if len(args) < 1:
        print("Usage: python generate_scene.py scene.json [output.json] [key=value ...]")
        print()
        print("Examples:")
        print("  python generate_scene.py layouts/studio.json")
        print("  python generate_scene.py layouts/studio.json out.json align=centered inset=0.1")
        sys.exit(1)

    scene_file = args[0]

    if len(args) >= 2:
        output_file = args[1]
    else:
        output_file = str(Path(scene_file).with_suffix(".boxes.json"))

    print("=" * 60)
    print("scene3d - Lattice to Box Reconstruction")
    print("=" * 60)
    print(f"Input:  {scene_file}")
    print(f"Output: {output_file}")
    print()

    try:
        config = Config()
        options = config.options_from_params(params)

        print("[1/2] Reconstructing geometry...")
        result = load_scene(scene_file, options=options, config=config)
        print(f"      [OK] Floors: {len(result.floors)} (from {len(result.clusters)} clusters)")
        print(f"      [OK] Walls:  {len(result.walls)} (from {len(result.runs)} runs)")
        print(f"      [OK] Parity: {result.parity.status.value}")
        for mismatch in result.parity.mismatches:
            print(f"           - {mismatch}")
        print()

        print("[2/2] Writing descriptors...")
        Path(output_file).write_text(result.model_dump_json(indent=2), encoding="utf-8")
        print("      [OK] Wrote JSON")
        print()

        size = result.bounds.content.size()
        print("=" * 60)
        print("SUCCESS!")
        print("=" * 60)
        print(f"Content: {size.x:.2f} m x {size.z:.2f} m")
        print(f"Options: align={options.wall_alignment.value} seam={options.seam_mode.value} "
              f"mode={options.reconstruction.value}")

    except Exception as e:
        print()
        print("=" * 60)
        print("ERROR!")
        print("=" * 60)
        print(f"Failed to reconstruct scene: {e}")
        print()
        print("Common issues:")
        print("  - Missing units.cellMeters or meta.axes -> Re-export the layout")
        print("  - Axes not ending in _XY_ground -> Only ground-plane layouts are supported")
        print("  - File not found -> Check file path is correct")
        sys.exit(1)


if __name__ == "__main__":
    main()
