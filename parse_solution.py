#!/usr/bin/env python3
"""
Parse the bb solution log: terminal coverage, the selected FSTs drawn in the
PostScript plot, and the per-FST cost / budget debug lines.

Usage: python3 parse_solution.py <solution_file> <num_terminals>
"""

import re
import sys

from config import MAX_FST_TERMINALS, MAX_SELECTED_FSTS

NUMBER = r'[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?'

# "% DEBUG LP_VARS: not_covered[3] = 0.000000 (terminal 3)"
NOT_COVERED_RE = re.compile(r'not_covered\[(\d+)\]\s*=\s*(' + NUMBER + r')')

# "% fs13: 10 5 7"
FST_HEADER_RE = re.compile(r'%\s*fs(\d+):(.*)')

# "0.4321 0.5678 3 T S" - segment from a Steiner point to terminal 3
STEINER_SEGMENT_RE = re.compile(r'(' + NUMBER + r')\s+(' + NUMBER + r')\s+(-?\d+)\s+T\s+S\b')

# "OBJ[0]: tree=0.407 (scaled=6.912), battery_sum_cost=-0.672000, obj=6.240114"
OBJ_RE = re.compile(r'OBJ\[(\d+)\]:\s+tree=(' + NUMBER + r')\s+\(scaled=(' + NUMBER + r')\),\s+'
                    r'battery_sum_cost=(' + NUMBER + r'),\s+obj=(' + NUMBER + r')')

SEEKING_HEADER = 'SEEKING_HEADER'
SEEKING_GEOMETRY = 'SEEKING_GEOMETRY'


def read_lines(solution_file):
    """All lines of the log, or None if it cannot be read"""
    try:
        with open(solution_file, 'r', errors='replace') as f:
            return f.readlines()
    except OSError as e:
        print(f"Error reading {solution_file}: {e}")
        return None


def parse_solution_coverage(solution_file, num_terminals, verbose=False):
    """
    Covered flag per terminal from the last not_covered[i] value in the log.
    A terminal is covered when its final value is below 0.5; terminals never
    mentioned are covered.
    """
    final_not_covered = [0.0] * num_terminals

    lines = read_lines(solution_file)
    if lines is None:
        return [True] * num_terminals

    # Several LP iterations may be dumped: keep the last value per terminal
    for line in lines:
        for m in NOT_COVERED_RE.finditer(line):
            terminal_id = int(m.group(1))
            if terminal_id < num_terminals:
                final_not_covered[terminal_id] = float(m.group(2))

    coverage = [value < 0.5 for value in final_not_covered]
    if verbose:
        print(f"   Coverage: {sum(coverage)}/{num_terminals} terminals covered")
    return coverage


def apply_coverage(terminals, coverage):
    for term in terminals:
        if term['id'] < len(coverage):
            term['covered'] = coverage[term['id']]
    return terminals


def parse_fst_header(line):
    """(fst_id, terminals) for a '% fs<id>:' line, else None"""
    m = FST_HEADER_RE.match(line.strip())
    if not m:
        return None

    terminals = []
    for token in m.group(2).split():
        if len(terminals) >= MAX_FST_TERMINALS:
            break
        try:
            terminals.append(int(token))
        except ValueError:
            break
    return int(m.group(1)), terminals


def parse_steiner_segment(line):
    """(x, y) of a 'x y i T S' plot line, else None"""
    m = STEINER_SEGMENT_RE.match(line.strip())
    if not m:
        return None
    return float(m.group(1)), float(m.group(2))


def is_plot_boundary(line):
    return '% fs' in line or 'EndPlot' in line or parse_fst_header(line) is not None


def scan_selected_fsts(lines, max_fsts=MAX_SELECTED_FSTS):
    """
    Two-state scan over the log lines.

    SEEKING_HEADER looks for '% fs<id>: t1 t2 ...'. After a header with at
    least one terminal the scan switches to SEEKING_GEOMETRY, where the first
    'x y i T S' line gives the FST's Steiner point. The next header or an
    EndPlot line ends the lookahead; the scan resumes *at* that line so
    adjacent headers are not skipped.
    """
    fsts = []
    state = SEEKING_HEADER
    current = None
    i = 0

    while i < len(lines):
        line = lines[i]

        if state == SEEKING_HEADER:
            if len(fsts) >= max_fsts:
                break
            header = parse_fst_header(line)
            if header is not None and header[1]:
                fst_id, terminals = header
                current = {
                    'id': fst_id,
                    'terminals': terminals,
                    'terminal_count': len(terminals),
                    'num_steiner_points': 0,
                    'steiner_points': [],
                    'selected': True,
                    'cost': None,
                }
                fsts.append(current)
                state = SEEKING_GEOMETRY
            i += 1
            continue

        # SEEKING_GEOMETRY
        point = parse_steiner_segment(line)
        if point is not None:
            if not current['steiner_points']:
                current['steiner_points'].append(point)
                current['num_steiner_points'] = 1
            i += 1
        elif is_plot_boundary(line):
            # rewind: leave i on this line for the header search
            state = SEEKING_HEADER
            current = None
        else:
            i += 1

    return fsts


def parse_fsts_from_solution(solution_file, max_fsts=MAX_SELECTED_FSTS, verbose=False):
    """Selected FSTs (with Steiner points where plotted) from the solution log"""
    lines = read_lines(solution_file)
    if lines is None:
        return []

    fsts = scan_selected_fsts(lines, max_fsts)

    if verbose:
        print(f"   Parsed {len(fsts)} selected FSTs from PostScript solution")
        for fst in fsts:
            msg = f"   FST {fst['id']}: terminals {' '.join(map(str, fst['terminals']))}"
            if fst['steiner_points']:
                sx, sy = fst['steiner_points'][0]
                msg += f" with Steiner point at ({sx:.3f}, {sy:.3f})"
            print(msg)

    return fsts


def parse_selected_fst_ids(solution_file, max_fsts=MAX_SELECTED_FSTS, verbose=False):
    """Ids of every '% fs<id>:' header, in log order"""
    lines = read_lines(solution_file)
    if lines is None:
        return []

    selected_ids = []
    for line in lines:
        if len(selected_ids) >= max_fsts:
            break
        header = parse_fst_header(line)
        if header is not None:
            selected_ids.append(header[0])

    if verbose:
        print(f"   Selected FST IDs from PostScript: {' '.join(map(str, selected_ids))}")
    return selected_ids


def mark_selected_fsts(all_fsts, selected_ids, verbose=False):
    """Set 'selected' on the dump universe by id"""
    wanted = set(selected_ids)
    for fst in all_fsts:
        fst['selected'] = fst['id'] in wanted
        if fst['selected'] and verbose:
            print(f"   Marking FST {fst['id']} as selected")
    return all_fsts


def parse_fst_costs(solution_file):
    """Normalized tree and battery costs for each FST from the OBJ[i] debug lines"""
    fst_costs = {}
    lines = read_lines(solution_file)
    if lines is None:
        return fst_costs

    for line in lines:
        m = OBJ_RE.search(line)
        if not m:
            continue
        fst_costs[int(m.group(1))] = {
            'tree_raw': float(m.group(2)),
            'tree_scaled': float(m.group(3)),
            'battery_cost': float(m.group(4)),
            'objective': float(m.group(5)),
        }

    return fst_costs


def apply_fst_costs(all_fsts, fst_costs):
    for fst in all_fsts:
        if fst['id'] in fst_costs:
            fst['cost'] = fst_costs[fst['id']]['objective']
    return all_fsts


def parse_budget_info(solution_file):
    """Budget information from the DEBUG BUDGET lines of the solution file"""
    budget_info = {}
    lines = read_lines(solution_file)
    if lines is None:
        return budget_info
    content = ''.join(lines)

    budget_match = (re.search(r'DEBUG BUDGET: Budget limit: (' + NUMBER + ')', content)
                    or re.search(r'DEBUG BUDGET: Using environment budget=(' + NUMBER + ')', content))
    if budget_match:
        budget_info['budget_limit'] = float(budget_match.group(1))

    max_tree_match = re.search(r'DEBUG BUDGET: max_tree_cost = (' + NUMBER + ')', content)
    if max_tree_match:
        budget_info['max_tree_cost'] = float(max_tree_match.group(1))

    constraint_match = re.search(r'DEBUG BUDGET: Constraint: Σ \(norm_cost \* (\d+)\) \* x\[i\] ≤ (\d+)', content)
    if constraint_match:
        budget_info['scale_factor'] = int(constraint_match.group(1))
        budget_info['budget_rhs'] = int(constraint_match.group(2))

    return budget_info


def main():
    if len(sys.argv) != 3:
        print("Usage: python3 parse_solution.py <solution_file> <num_terminals>")
        sys.exit(1)

    solution_file = sys.argv[1]
    num_terminals = int(sys.argv[2])

    coverage = parse_solution_coverage(solution_file, num_terminals)
    selected = parse_fsts_from_solution(solution_file)

    print(f"Selected {len(selected)} FSTs:")
    for fst in selected:
        print(f"  fs{fst['id']}: terminals {fst['terminals']}")

    uncovered = [i for i, covered in enumerate(coverage) if not covered]
    print(f"\nTotal covered: {num_terminals - len(uncovered)}/{num_terminals}")
    if uncovered:
        print(f"Uncovered terminals: {uncovered}")
    else:
        print("All terminals covered!")


if __name__ == "__main__":
    main()
