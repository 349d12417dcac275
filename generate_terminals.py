#!/usr/bin/env python3
"""
Generate random terminals with battery levels
Usage: python3 generate_terminals.py <num_terminals> <output_directory> [seed]
"""

import os
import sys
import time

import numpy as np

from config import TERMINALS_FILE, SimulationError


def random_battery_level(rng):
    """Battery level drawn from a low / normal / high mixture (20% / 60% / 20%)"""
    r = rng.random()
    if r < 0.2:
        return 10.0 + rng.random() * 30.0
    elif r < 0.8:
        return 40.0 + rng.random() * 40.0
    return 80.0 + rng.random() * 20.0


def generate_terminals(n_terminals, output_dir, seed, verbose=False):
    """Write n_terminals random 'x y battery' lines to <output_dir>/terminals.txt"""
    terminals_file = os.path.join(output_dir, TERMINALS_FILE)
    rng = np.random.default_rng(seed)

    if verbose:
        print(f"   Generating terminals with seed {seed}:")

    try:
        with open(terminals_file, 'w') as f:
            for i in range(n_terminals):
                x = rng.random()
                y = rng.random()
                battery = random_battery_level(rng)
                f.write(f"{x:.6f} {y:.6f} {battery:.1f}\n")

                if verbose:
                    print(f"   Terminal {i}: ({x:.3f}, {y:.3f}) battery={battery:.1f}%")
    except OSError as e:
        raise SimulationError(f"Cannot create terminals file: {terminals_file} ({e})")

    if verbose:
        print(f"   Saved {n_terminals} terminals to {terminals_file}")

    return terminals_file


def main():
    if len(sys.argv) not in (3, 4):
        print("Usage: python3 generate_terminals.py <num_terminals> <output_directory> [seed]")
        sys.exit(1)

    n_terminals = int(sys.argv[1])
    output_dir = sys.argv[2]
    seed = int(sys.argv[3]) if len(sys.argv) == 4 else int(time.time())

    try:
        path = generate_terminals(n_terminals, output_dir, seed, verbose=True)
    except SimulationError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    print(f"✅ Terminals saved to: {path}")


if __name__ == "__main__":
    main()
