#!/usr/bin/env python3
"""
Extract the final MIP gap from a bb / CPLEX solution log.

The log has no fixed summary line, so the gap is recovered heuristically.
Each line is offered to the matchers in MATCHERS, in order. A matcher returns
a gap or None, and any non-None result replaces the current gap (last match
wins, including across matchers on the same line).

    1. "Best bound = B , Best integer = I"     gap = |I - B| / |I|
    2. "MIP gap = G%"                          gap = G / 100
    3. "... MIP optimal ... tolerance (G%)"    gap = G / 100
    4. "New best: ... Z = V"                   remembers V only
    5. "Best branch is ... Z0 = a, Z1 = b"     gap = |max - min| / |min|

Negative and non-finite values are not gaps; they never replace an earlier
result.

If nothing set a gap but both a "New best" value and a branch pair were seen,
the gap is estimated as |max(a, b) - V| / |V|.

Usage: python3 mip_gap.py <solution_file>
"""

import math
import re
import sys

NUMBER = r'[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?'

BEST_BOUND_RE = re.compile(r'\s*Best\s+bound\s*=\s*(' + NUMBER + r')\s*,\s*Best\s+integer\s*=\s*(' + NUMBER + r')')
MIP_GAP_RE = re.compile(r'\s*MIP\s+gap\s*=\s*(' + NUMBER + r')')
LEADING_NUMBER_RE = re.compile(r'\s*(' + NUMBER + r')')
Z_RE = re.compile(r'Z\s*=\s*(' + NUMBER + r')')
Z0_RE = re.compile(r'Z0\s*=\s*(' + NUMBER + r')')
Z1_RE = re.compile(r'Z1\s*=\s*(' + NUMBER + r')')


def relative_gap(bound, incumbent):
    """|bound - incumbent| / |incumbent|, or None when undefined"""
    if incumbent is None or bound is None or incumbent == 0:
        return None
    gap = abs(bound - incumbent) / abs(incumbent)
    return gap if math.isfinite(gap) else None


def match_best_bound(line, state):
    m = BEST_BOUND_RE.match(line)
    if not m:
        return None
    state['best_bound'] = float(m.group(1))
    state['incumbent'] = float(m.group(2))
    return relative_gap(state['best_bound'], state['incumbent'])


def match_mip_gap(line, state):
    m = MIP_GAP_RE.match(line)
    if not m:
        return None
    return float(m.group(1)) / 100.0


def match_mip_optimal(line, state):
    if 'MIP optimal' not in line or 'tolerance' not in line:
        return None
    paren = line.find('(')
    if paren < 0:
        return None
    m = LEADING_NUMBER_RE.match(line, paren + 1)
    if not m:
        return None
    return float(m.group(1)) / 100.0


def match_new_best(line, state):
    # Only records the incumbent; the gap comes from a branch line later
    if 'New best:' not in line or 'Z =' not in line:
        return None
    m = Z_RE.match(line, line.find('Z ='))
    if m:
        state['latest_best_z'] = float(m.group(1))
    return None


def match_best_branch(line, state):
    if 'Best branch is' not in line or 'Z0 =' not in line or 'Z1 =' not in line:
        return None
    m0 = Z0_RE.search(line)
    m1 = Z1_RE.search(line)
    if not m0 or not m1:
        return None
    z0 = float(m0.group(1))
    z1 = float(m1.group(1))
    state['latest_branch'] = (z0, z1)
    state['incumbent'] = min(z0, z1)
    state['best_bound'] = max(z0, z1)
    return relative_gap(state['best_bound'], state['incumbent'])


# Order matters: later matchers overwrite earlier ones on the same line.
MATCHERS = [
    match_best_bound,
    match_mip_gap,
    match_mip_optimal,
    match_new_best,
    match_best_branch,
]


def usable_gap(value):
    return value is not None and math.isfinite(value) and value >= 0


def new_state():
    return {
        'best_bound': None,
        'incumbent': None,
        'latest_best_z': None,
        'latest_branch': None,
    }


def scan_gap(lines):
    """Run MATCHERS over an iterable of lines; returns (gap or None, state)"""
    state = new_state()
    gap = None

    for line in lines:
        for matcher in MATCHERS:
            value = matcher(line, state)
            if usable_gap(value):
                gap = value

    # Fallback: last "New best" value against the last branch pair
    if gap is None and state['latest_best_z'] is not None and state['latest_branch'] is not None:
        gap = relative_gap(max(state['latest_branch']), state['latest_best_z'])
    return gap, state


def parse_final_mip_gap(solution_file, verbose=False):
    """Return the final relative MIP gap from solution_file, or None if unavailable"""
    try:
        with open(solution_file, 'r', errors='replace') as f:
            gap, state = scan_gap(f)
    except OSError as e:
        if verbose:
            print(f"Error reading {solution_file}: {e}")
        return None

    if verbose:
        if gap is None:
            print(f"   No MIP gap information found in {solution_file}")
        else:
            print(f"   MIP gap registers: best_bound={state['best_bound']}, incumbent={state['incumbent']}")
    return gap


def format_gap(gap):
    """Render a gap as 'P% (D)' or 'Not available'"""
    if gap is None:
        return "Not available"
    return f"{gap * 100.0:.4f}% ({gap:.6f})"


def main():
    if len(sys.argv) != 2:
        print("Usage: python3 mip_gap.py <solution_file>")
        sys.exit(1)

    gap = parse_final_mip_gap(sys.argv[1], verbose=True)
    print(f"MIP Gap: {format_gap(gap)}")


if __name__ == "__main__":
    main()
