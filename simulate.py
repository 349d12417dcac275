#!/usr/bin/env python3
"""
Simulation Wrapper for Budget-Constrained GeoSteiner Optimization

Runs the complete pipeline:
    1. Generate random terminal coordinates with battery levels
    2. Compute Full Steiner Trees (FSTs) using efst (plus a dumpfst listing)
    3. Solve budget-constrained multi-objective SMT using bb
    4. Generate an HTML visualization of the solution

Usage:
    python3 simulate.py -n N -b BUDGET [-s SEED] [-o OUTDIR] [-v]
    python3 simulate.py -t TERMINALS -f FSTS -r SOLUTION -w OUTPUT [-v]
"""

import argparse
import os
import sys
import time

from config import (DEFAULT_OUTPUT_DIR, FSTS_DUMP_FILE, FSTS_FILE, HTML_FILE,
                    PLOT_FILE, SOLUTION_FILE, SimulationError)
from generate_terminals import generate_terminals
from mip_gap import parse_final_mip_gap
from plot_network import plot_network
from render_report import create_rich_visualization
from run_solvers import generate_fst_dump, generate_fsts, run_html_helper, solve_smt

EPILOG = """\
Examples:
  # Full simulation
  python3 simulate.py -n 10 -b 1500000 -s 12345 -o my_simulation -v

  # Visualization only
  python3 simulate.py -t terminals.txt -f fsts.txt -r solution.txt -w viz.html -v

Full simulation pipeline stages:
  1. Generate random terminals with battery levels
  2. Compute Full Steiner Trees (FSTs) using efst
  3. Solve budget-constrained SMT using bb
  4. Generate HTML visualization
"""


def build_parser():
    parser = argparse.ArgumentParser(
        prog="simulate",
        description="Automated Budget-Constrained GeoSteiner Simulation Pipeline",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    full = parser.add_argument_group("full simulation mode")
    full.add_argument("-n", dest="n_terminals", type=int, default=0,
                      help="Number of terminals to generate (must be > 0)")
    full.add_argument("-b", dest="budget", type=int, default=0,
                      help="Budget constraint for SMT optimization")
    full.add_argument("-s", dest="seed", type=int, default=0,
                      help="Random seed for terminal generation (default: current time)")
    full.add_argument("-o", dest="output_dir", default=DEFAULT_OUTPUT_DIR,
                      help=f"Output directory (default: {DEFAULT_OUTPUT_DIR})")

    viz = parser.add_argument_group("visualization-only mode")
    viz.add_argument("-t", dest="viz_terminals", help="Terminals file (coordinates and battery levels)")
    viz.add_argument("-f", dest="viz_fsts", help="FSTs file (Full Steiner Tree data)")
    viz.add_argument("-r", dest="viz_solution", help="Solution file (bb solver output)")
    viz.add_argument("-w", dest="viz_output", help="Output HTML file for visualization")

    parser.add_argument("-v", dest="verbose", action="store_true", help="Enable verbose output")
    return parser


def create_directory(dir_path, verbose=False):
    if os.path.exists(dir_path):
        if not os.path.isdir(dir_path):
            raise SimulationError(f"{dir_path} exists but is not a directory")
        if verbose:
            print(f"   Directory {dir_path} already exists")
        return

    try:
        os.makedirs(dir_path)
    except OSError as e:
        raise SimulationError(f"Cannot create directory {dir_path}: {e}")

    if verbose:
        print(f"   Created directory: {dir_path}")


def run_full_simulation(n_terminals, budget, seed, output_dir, verbose=False):
    print("🌐 GeoSteiner Budget-Constrained SMT Simulation")
    print("=" * 48)
    print(f"Terminals:     {n_terminals}")
    print(f"Budget:        {budget}")
    print(f"Seed:          {seed}")
    print(f"Output Dir:    {output_dir}")
    print(f"Verbose:       {'Yes' if verbose else 'No'}")
    print("=" * 48 + "\n")

    create_directory(output_dir, verbose)

    fsts_file = os.path.join(output_dir, FSTS_FILE)
    dump_file = os.path.join(output_dir, FSTS_DUMP_FILE)
    solution_file = os.path.join(output_dir, SOLUTION_FILE)
    html_file = os.path.join(output_dir, HTML_FILE)
    plot_file = os.path.join(output_dir, PLOT_FILE)

    print(f"📍 Step 1: Generating {n_terminals} random terminals...")
    terminals_file = generate_terminals(n_terminals, output_dir, seed, verbose)
    print(f"   ✅ Terminals saved to: {terminals_file}\n")

    print("🌳 Step 2: Computing Full Steiner Trees...")
    generate_fsts(terminals_file, fsts_file, verbose)
    print(f"   ✅ FSTs saved to: {fsts_file}")

    print("📋 Step 2b: Generating readable FST dump...")
    generate_fst_dump(fsts_file, dump_file, verbose)
    print(f"   ✅ FST dump saved to: {dump_file}\n")

    print(f"🎯 Step 3: Solving budget-constrained SMT (budget={budget})...")
    solve_smt(fsts_file, solution_file, budget, verbose=verbose)
    print(f"   ✅ Solution saved to: {solution_file}")

    gap = parse_final_mip_gap(solution_file)
    if gap is not None:
        print(f"   📊 Final MIP Gap: {gap * 100.0:.4f}% ({gap:.6f})")
    else:
        print("   ⚠️  Could not parse MIP gap from solution")
    print()

    print("📊 Step 4: Generating rich HTML visualization...")
    model = create_rich_visualization(terminals_file, fsts_file, solution_file, html_file,
                                      budget=budget, verbose=verbose)
    plot_network(model['terminals'], model['selected_fsts'], model['gap'], plot_file)
    print(f"   ✅ Rich visualization saved to: {html_file}")
    print(f"   ✅ Network figure saved to: {plot_file}\n")

    print("🎉 Simulation completed successfully!")
    print(f"📁 All outputs available in: {output_dir}/")
    print(f"🌐 Open {html_file} in a web browser to view results")
    return html_file


def run_visualization_only(terminals_file, fsts_file, solution_file, html_file, verbose=False):
    for label, path in [("Terminals", terminals_file), ("FSTs", fsts_file), ("Solution", solution_file)]:
        if not os.path.exists(path):
            raise SimulationError(f"{label} file not found: {path}")

    if verbose:
        print("📊 Generating visualization from existing files...")

    if run_html_helper(terminals_file, fsts_file, solution_file, html_file, verbose=verbose):
        if verbose:
            print("   ✅ Interactive HTML visualization generated")
        return html_file

    model = create_rich_visualization(terminals_file, fsts_file, solution_file, html_file,
                                      verbose=verbose)
    plot_file = os.path.splitext(html_file)[0] + ".png"
    plot_network(model['terminals'], model['selected_fsts'], model['gap'], plot_file)
    if verbose:
        print(f"   ✅ Network figure saved to: {plot_file}")
    return html_file


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    viz_files = [args.viz_terminals, args.viz_fsts, args.viz_solution, args.viz_output]
    try:
        if any(viz_files):
            if not all(viz_files):
                print("Error: Visualization mode requires all four files:", file=sys.stderr)
                print("  -t <terminals_file>\n  -f <fsts_file>\n  -r <solution_file>\n  -w <output_html_file>",
                      file=sys.stderr)
                parser.print_usage(sys.stderr)
                return 1

            print("🎨 GeoSteiner Visualization Generator")
            print("=" * 37)
            print(f"Terminals:  {args.viz_terminals}")
            print(f"FSTs:       {args.viz_fsts}")
            print(f"Solution:   {args.viz_solution}")
            print(f"Output:     {args.viz_output}")
            print(f"Verbose:    {'Yes' if args.verbose else 'No'}")
            print("=" * 37 + "\n")

            run_visualization_only(*viz_files, verbose=args.verbose)
            print("🎉 Visualization generated successfully!")
            print(f"🌐 Open {args.viz_output} in a web browser to view results")
            return 0

        if args.n_terminals <= 0:
            print("Error: Number of terminals (-n) must be positive", file=sys.stderr)
            parser.print_usage(sys.stderr)
            return 1
        if args.budget <= 0:
            print("Error: Budget (-b) must be positive", file=sys.stderr)
            parser.print_usage(sys.stderr)
            return 1

        seed = args.seed if args.seed != 0 else int(time.time())
        run_full_simulation(args.n_terminals, args.budget, seed, args.output_dir, args.verbose)
        return 0

    except SimulationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
