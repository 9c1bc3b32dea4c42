#!/usr/bin/env python3
"""
RUN_ENERGY_PROGRAMMING: Multi-Layer Stack with a Programmed Folding Order
=========================================================================

Stacking units with increasing energy barriers makes the stack fold one
layer at a time, bottom first. This demo:
1. Sets per-layer targets (deployed/folded heights, barriers)
2. Builds the layer parameter table
3. Computes the stack energy landscape and stable heights
4. Samples the folding sequence and exports 3D frames
5. Exports the parameter table as CSV and the crease patterns as SVG

Run with:
    python demos/run_energy_programming.py
    python demos/run_energy_programming.py --layers 3 --cells 8

Outputs:
    artifacts/kresling_energy_design_<L>x<N>.csv  - Layer parameter table
    artifacts/stack_energy.png                    - Stack energy landscape
    artifacts/stack_pattern.svg                   - Crease patterns, one row per layer
    artifacts/stack_fold_<k>.html                 - Folding sequence frames
"""

import argparse
import logging
import os
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from kresling import InvalidParameterError
from kresling.export import crease_pattern_svg, design_filename, energy_design_csv, write_text
from kresling.stacking import (
    build_layer_units,
    default_layer_targets,
    design_table,
    folding_sequence_frame,
    optimize_layer_parameters,
    stack_energy_landscape,
    stack_stable_heights,
    stack_vertex_coordinates,
)
from kresling.viz import create_stack_figure, plot_stack_energy


def print_header(text: str):
    """Print a formatted section header."""
    print("\n" + "=" * 70)
    print(f"  {text}")
    print("=" * 70)


def main():
    parser = argparse.ArgumentParser(description='Program the folding order of a Kresling stack')
    parser.add_argument('--layers', type=int, default=2, help='Number of layers (default: 2)')
    parser.add_argument('--cells', type=int, default=6, help='Cells per layer (default: 6)')
    parser.add_argument('--frames', type=int, default=5, help='Folding frames to export (default: 5)')
    parser.add_argument('--outdir', type=str, default='artifacts', help='Output directory')
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format='%(levelname)s %(name)s: %(message)s')

    print_header("KRESLING ENERGY PROGRAMMING")

    # =========================================================================
    # STEP 1: TARGETS AND PARAMETERS
    # =========================================================================
    print_header("STEP 1: Layer Parameters")

    targets = default_layer_targets(args.layers)
    designs = optimize_layer_parameters(targets, num_cells=args.cells)
    units = build_layer_units(designs, num_cells=args.cells)

    table = design_table(designs, units)
    print(table.round(4).to_string(index=False))

    # =========================================================================
    # STEP 2: ENERGY LANDSCAPE
    # =========================================================================
    print_header("STEP 2: Stack Energy")

    landscape = stack_energy_landscape(designs, units)
    heights = stack_stable_heights(designs)
    print("  Stable heights (bottom layer folds first):")
    for k, h in enumerate(heights):
        print(f"    {k} layer(s) folded: H = {h:.4f}")

    plot_stack_energy(designs, landscape, os.path.join(args.outdir, "stack_energy.png"))

    # =========================================================================
    # STEP 3: FOLDING SEQUENCE
    # =========================================================================
    print_header("STEP 3: Folding Sequence")

    for k in range(args.frames):
        progress = k / max(args.frames - 1, 1)
        frame = folding_sequence_frame(designs, units, progress)
        rings = stack_vertex_coordinates(units, frame)
        fig = create_stack_figure(rings, title=f"Folding progress {progress:.0%}")
        outpath = os.path.join(args.outdir, f"stack_fold_{k}.html")
        fig.write_html(outpath)
        summary = ", ".join(f"h{i + 1}={s.h:.3f}" for i, s in enumerate(frame))
        print(f"  {progress:5.0%}  {summary}  -> {outpath}")

    # =========================================================================
    # STEP 4: EXPORT
    # =========================================================================
    print_header("STEP 4: Export")

    csv_path = write_text(energy_design_csv(designs),
                          os.path.join(args.outdir, design_filename(args.layers, args.cells)))
    print(f"  Parameter table: {csv_path}")

    try:
        svg_path = write_text(crease_pattern_svg([u.params for u in units]),
                              os.path.join(args.outdir, "stack_pattern.svg"))
        print(f"  Crease patterns: {svg_path}")
    except InvalidParameterError as e:
        print(f"  Crease patterns skipped: {e}")

    print_header("DONE")


if __name__ == "__main__":
    main()
