#!/usr/bin/env python3
"""
RUN_SURFACE_APPROXIMATION: Approximate a Surface of Revolution
==============================================================

Slices a target surface into layers and fits one conical Kresling unit per
layer, so that the deployed stack follows the surface.

Run with:
    python demos/run_surface_approximation.py --surface hyperboloid
    python demos/run_surface_approximation.py --surface cone --layers 4 --cells 8

Outputs:
    artifacts/surface_<name>.csv                       - Layer table
    artifacts/surface_<name>.html                      - Surface + stack (3D)
    artifacts/kresling_pattern_<name>_<L>x<N>.svg      - Crease patterns
"""

import argparse
import logging
import os
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from kresling import CONFIG, InvalidParameterError
from kresling.export import crease_pattern_svg, pattern_filename, surface_layers_csv, write_text
from kresling.surfaces import approximate_surface, surface_layer_units, surface_stack_rings
from kresling.viz import create_surface_figure


def print_header(text: str):
    """Print a formatted section header."""
    print("\n" + "=" * 70)
    print(f"  {text}")
    print("=" * 70)


def main():
    parser = argparse.ArgumentParser(description='Approximate a surface of revolution with Kresling units')
    parser.add_argument('--surface', choices=CONFIG.surfaces, default='hyperboloid',
                        help='Target surface (default: hyperboloid)')
    parser.add_argument('--layers', type=int, default=5, help='Number of layers (default: 5)')
    parser.add_argument('--cells', type=int, default=6, help='Cells per layer (default: 6)')
    parser.add_argument('--outdir', type=str, default='artifacts', help='Output directory')
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format='%(levelname)s %(name)s: %(message)s')

    print_header(f"SURFACE APPROXIMATION: {args.surface.upper()}")

    # =========================================================================
    # STEP 1: LAYER GEOMETRY
    # =========================================================================
    print_header("STEP 1: Layers")

    layers = approximate_surface(args.surface, num_layers=args.layers, num_cells=args.cells)
    print(f"  {'Layer':>5} {'a':>8} {'b':>8} {'c':>8} {'beta':>8} {'phi1':>8} {'phi2':>8}")
    for layer in layers:
        phi1 = f"{layer.phi1:8.4f}" if layer.phi1 is not None else f"{'-':>8}"
        phi2 = f"{layer.phi2:8.4f}" if layer.phi2 is not None else f"{'-':>8}"
        print(f"  {layer.layer:>5} {layer.a:8.4f} {layer.b:8.4f} {layer.c:8.4f} {layer.beta:8.4f} {phi1} {phi2}")

    bistable = sum(layer.is_bistable for layer in layers)
    print(f"\n  {bistable} of {len(layers)} layers have a closed-form stable pair")

    # =========================================================================
    # STEP 2: 3D VIEW
    # =========================================================================
    print_header("STEP 2: 3D View")

    rings = surface_stack_rings(layers, num_cells=args.cells)
    fig = create_surface_figure(args.surface, rings)
    html_path = os.path.join(args.outdir, f"surface_{args.surface}.html")
    os.makedirs(args.outdir, exist_ok=True)
    fig.write_html(html_path)
    print(f"  Saved: {html_path}")

    # =========================================================================
    # STEP 3: EXPORT
    # =========================================================================
    print_header("STEP 3: Export")

    csv_path = write_text(surface_layers_csv(layers), os.path.join(args.outdir, f"surface_{args.surface}.csv"))
    print(f"  Layer table:     {csv_path}")

    units = surface_layer_units(layers, num_cells=args.cells)
    try:
        svg_path = write_text(
            crease_pattern_svg([u.params for u in units]),
            os.path.join(args.outdir, pattern_filename(args.surface, args.layers, args.cells)),
        )
        print(f"  Crease patterns: {svg_path}")
    except InvalidParameterError as e:
        print(f"  Crease patterns skipped: {e}")

    print_header("DONE")


if __name__ == "__main__":
    main()
