#!/usr/bin/env python3
"""
RUN_PHASE_SWEEP: Where Does Bistability Live?
=============================================

Two views of the design space:
1. A random sweep of unit geometries (n, a, b, c, beta)
2. A structured beta vs c phase map on top of the reference unit

Run with:
    python demos/run_phase_sweep.py
    python demos/run_phase_sweep.py --n 500 --seed 7

Outputs:
    artifacts/phase_sweep.csv  - All evaluated variants
    artifacts/phase_map.csv    - beta vs c grid
    artifacts/phase_map.png    - Phase diagram
"""

import argparse
import logging
import os
import sys
from pathlib import Path

import numpy as np

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from kresling import Phase
from kresling.explore import phase_map, run_phase_sweep
from kresling.viz import plot_phase_map


def print_header(text: str):
    """Print a formatted section header."""
    print("\n" + "=" * 70)
    print(f"  {text}")
    print("=" * 70)


def main():
    parser = argparse.ArgumentParser(
        description='Sweep Kresling geometries and map their stability phases',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python demos/run_phase_sweep.py
  python demos/run_phase_sweep.py --n 500 --seed 7 --grid 40
        """
    )
    parser.add_argument('--n', type=int, default=200, help='Number of random variants (default: 200)')
    parser.add_argument('--seed', type=int, default=42, help='Random seed (default: 42)')
    parser.add_argument('--grid', type=int, default=30, help='Phase map resolution per axis (default: 30)')
    parser.add_argument('--outdir', type=str, default='artifacts', help='Output directory')
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format='%(levelname)s %(name)s: %(message)s')
    os.makedirs(args.outdir, exist_ok=True)

    # =========================================================================
    # STEP 1: RANDOM SWEEP
    # =========================================================================
    print_header("STEP 1: Random Sweep")

    df = run_phase_sweep(n=args.n, seed=args.seed)
    ok = df[df['ok'] == True]
    print(f"\n  Evaluated: {len(df)}   Valid: {len(ok)}   Failed: {len(df) - len(ok)}")
    for phase in Phase.ALL:
        count = int((ok['phase'] == phase).sum())
        print(f"    {phase:<26} {count:>5}  ({100.0 * count / max(len(ok), 1):.1f}%)")

    bistable = ok[ok['is_bistable'] == True]
    if len(bistable):
        print(f"\n  Stroke of bistable units: mean {bistable['stroke'].mean():.3f}, "
              f"max {bistable['stroke'].max():.3f}")

    sweep_path = os.path.join(args.outdir, "phase_sweep.csv")
    df.to_csv(sweep_path, index=False)
    print(f"  Saved: {sweep_path}")

    # =========================================================================
    # STEP 2: PHASE MAP
    # =========================================================================
    print_header("STEP 2: Phase Map (beta vs c)")

    betas = np.linspace(0.2, np.pi - 0.2, args.grid)
    cs = np.linspace(0.5, 5.0, args.grid)
    grid = phase_map(betas, cs, show_progress=True)

    print(grid['phase'].value_counts().to_string())

    map_path = os.path.join(args.outdir, "phase_map.csv")
    grid.to_csv(map_path, index=False)
    plot_phase_map(grid, os.path.join(args.outdir, "phase_map.png"))
    print(f"  Saved: {map_path}")

    print_header("DONE")


if __name__ == "__main__":
    main()
