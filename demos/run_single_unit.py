#!/usr/bin/env python3
"""
RUN_SINGLE_UNIT: Analyze One Conical Kresling Unit
==================================================

This demo walks through the mechanics of a single unit:
1. Define the geometry (n, a, b, c, beta)
2. Derive radii, valley crease and stiffnesses
3. Find the stable states and the bistability phase
4. Estimate the energy barrier (fixed saddle and ridge search)
5. Plot the energy landscape
6. Export the crease pattern and a 3D view

Run with:
    python demos/run_single_unit.py
    python demos/run_single_unit.py --a 0.5        # monostable unit

Outputs:
    artifacts/unit_landscape.png  - Energy vs height
    artifacts/unit_pattern.svg    - Flat crease pattern
    artifacts/unit_pattern.png    - Crease pattern chart
    artifacts/unit_3d.html        - Interactive 3D view (deployed state)
    artifacts/unit_summary.json   - Parameters, stable states, phase
"""

import argparse
import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from kresling import InvalidParameterError, KreslingUnit
from kresling.export import crease_pattern_svg, unit_summary_json, unit_summary_text, write_text
from kresling.pattern import crease_pattern
from kresling.viz import plot_crease_pattern, plot_energy_landscape, plot_unit_3d


def print_header(text: str):
    """Print a formatted section header."""
    print("\n" + "=" * 70)
    print(f"  {text}")
    print("=" * 70)


def main():
    parser = argparse.ArgumentParser(description='Analyze a single conical Kresling unit')
    parser.add_argument('--n', type=int, default=6, help='Number of cells (default: 6)')
    parser.add_argument('--a', type=float, default=1.0, help='Top polygon edge (default: 1.0)')
    parser.add_argument('--b', type=float, default=2.0, help='Bottom polygon edge (default: 2.0)')
    parser.add_argument('--c', type=float, default=3.0, help='Mountain crease length (default: 3.0)')
    parser.add_argument('--beta', type=float, default=1.5, help='Sector angle in radians (default: 1.5)')
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format='%(levelname)s %(name)s: %(message)s')

    print_header("KRESLING UNIT ANALYSIS")

    # =========================================================================
    # STEP 1: GEOMETRY
    # =========================================================================
    print_header("STEP 1: Geometry")

    try:
        unit = KreslingUnit(n=args.n, a=args.a, b=args.b, c=args.c, beta=args.beta)
    except InvalidParameterError as e:
        print(f"\n  Invalid geometry: {e}")
        return 1

    print(f"""
    Cells:            n = {unit.n}
    Top edge:         a = {unit.a}
    Bottom edge:      b = {unit.b}
    Mountain crease:  c = {unit.c}
    Sector angle:     beta = {unit.beta} rad

    Top radius:       r = {unit.r:.4f}
    Bottom radius:    R = {unit.R:.4f}
    Valley crease:    d = {unit.d:.4f}
    Stiffnesses:      km = {unit.km:.4f}, kv = {unit.kv:.4f}
    """)

    # =========================================================================
    # STEP 2: STABILITY
    # =========================================================================
    print_header("STEP 2: Stable States")

    print(unit_summary_text(unit))

    if unit.is_bistable():
        print_header("STEP 3: Energy Barrier")
        approx = unit.compute_energy_barrier()
        ridge = unit.compute_energy_barrier(method="ridge")
        print(f"""
    Fixed-saddle estimate:  {approx:.6f}
    Ridge of the landscape: {ridge:.6f}
    """)
    else:
        print("\n  Unit is monostable: no barrier to report.")

    # =========================================================================
    # STEP 4: OUTPUTS
    # =========================================================================
    print_header("STEP 4: Outputs")

    plot_energy_landscape(unit, "artifacts/unit_landscape.png",
                          title=f"Energy Landscape (n={unit.n}, beta={unit.beta})")
    print("  Energy landscape: artifacts/unit_landscape.png")

    try:
        pattern = crease_pattern(unit.params)
        plot_crease_pattern(pattern, "artifacts/unit_pattern.png")
        write_text(crease_pattern_svg(unit.params), "artifacts/unit_pattern.svg")
        print("  Crease pattern:   artifacts/unit_pattern.svg")
    except InvalidParameterError as e:
        print(f"  Crease pattern skipped: {e}")

    plot_unit_3d(unit, outpath="artifacts/unit_3d.html", show=False)
    print("  3D view:          artifacts/unit_3d.html")

    write_text(unit_summary_json(unit), "artifacts/unit_summary.json")
    print("  Summary:          artifacts/unit_summary.json")

    print_header("DONE")
    return 0


if __name__ == "__main__":
    sys.exit(main())
