#!/usr/bin/env python3
"""
Parse the pipeline's input-side files: the terminals file and the dumpfst output
Usage: python3 parse_inputs.py <terminals_file> [fsts_dump_file]
"""

import os
import re
import sys

from config import FSTS_DUMP_FILE, MAX_FST_TERMINALS, MAX_FSTS, MAX_TERMINALS

INT_PREFIX_RE = re.compile(r'-?\d+')


def parse_terminals(terminals_file, max_terminals=MAX_TERMINALS, verbose=False):
    """
    Parse 'x y battery' lines into terminal dicts, index = line order.

    Returns None when the file cannot be read. Malformed lines are skipped;
    lines past max_terminals are dropped with a warning.
    """
    terminals = []
    dropped = 0
    try:
        with open(terminals_file, 'r') as f:
            for line in f:
                parts = line.strip().split()
                if len(parts) < 3:
                    continue
                try:
                    x, y, battery = float(parts[0]), float(parts[1]), float(parts[2])
                except ValueError:
                    continue

                if len(terminals) >= max_terminals:
                    dropped += 1
                    continue

                terminals.append({
                    'id': len(terminals),
                    'x': x,
                    'y': y,
                    'battery': battery,
                    'covered': True,
                })
    except OSError as e:
        print(f"Error reading {terminals_file}: {e}")
        return None

    if dropped:
        print(f"Warning: {dropped} terminals beyond the limit of {max_terminals} were ignored",
              file=sys.stderr)
    if verbose:
        print(f"   Parsed {len(terminals)} terminals from {terminals_file}")

    return terminals


def parse_dump_line(line, num_terminals=MAX_TERMINALS):
    """Terminal indices on one dump line; bad or out-of-range tokens are skipped"""
    terminals = []
    for token in line.split():
        if len(terminals) >= MAX_FST_TERMINALS:
            break
        m = INT_PREFIX_RE.match(token)
        if not m:
            continue
        term = int(m.group(0))
        if 0 <= term < num_terminals:
            terminals.append(term)
    return terminals


def parse_fsts_from_dump(dump_file, num_terminals=MAX_TERMINALS, max_fsts=MAX_FSTS, verbose=False):
    """
    Parse dumpfst output: one FST per line as whitespace-separated terminal ids.
    Example: " 4 1 0" means the FST connects terminals 4, 1 and 0.

    DEBUG lines and blank lines are skipped. FST ids count accepted lines from 0.
    Returns [] when the file cannot be read.
    """
    fsts = []
    dropped = 0
    try:
        with open(dump_file, 'r', errors='replace') as f:
            for line in f:
                line = line.strip()
                if not line or 'DEBUG' in line:
                    continue

                terminals = parse_dump_line(line, num_terminals)
                if len(terminals) < 2:
                    continue

                if len(fsts) >= max_fsts:
                    dropped += 1
                    continue

                fsts.append({
                    'id': len(fsts),
                    'terminals': terminals,
                    'terminal_count': len(terminals),
                    # dumpfst carries no coordinates: the junction itself
                    # only comes from the solver's plot
                    'num_steiner_points': 1 if len(terminals) > 2 else 0,
                    'steiner_points': [],
                    'selected': False,
                    'cost': None,
                })
    except OSError as e:
        print(f"Error reading {dump_file}: {e}")
        return []

    if dropped:
        print(f"Warning: {dropped} FSTs beyond the limit of {max_fsts} were ignored", file=sys.stderr)
    if verbose:
        print(f"   Found {len(fsts)} total FSTs in {dump_file}")
        for fst in fsts[:5]:
            print(f"   FST {fst['id']}: " + ' '.join(f"T{t}" for t in fst['terminals']))

    return fsts


def dump_file_for(fsts_file):
    """The dumpfst output lives next to the FST file"""
    return os.path.join(os.path.dirname(fsts_file), FSTS_DUMP_FILE)


def main():
    if len(sys.argv) not in (2, 3):
        print("Usage: python3 parse_inputs.py <terminals_file> [fsts_dump_file]")
        sys.exit(1)

    terminals = parse_terminals(sys.argv[1], verbose=True)
    if not terminals:
        print("Error: Could not parse terminals file")
        sys.exit(1)

    for term in terminals:
        print(f"Terminal {term['id']:2d}: ({term['x']:.3f}, {term['y']:.3f}) {term['battery']:6.1f}%")

    if len(sys.argv) == 3:
        for fst in parse_fsts_from_dump(sys.argv[2], num_terminals=len(terminals)):
            kind = "Y-junction" if fst['num_steiner_points'] else "Direct"
            print(f"FST {fst['id']:3d}: {','.join(map(str, fst['terminals'])):<20} {kind}")


if __name__ == "__main__":
    main()
