#!/usr/bin/env python3
"""
Render a solved GeoSteiner instance as a single self-contained HTML page:
an SVG drawing of the selected FSTs and terminals, solution metrics, a
legend, constraint checks, the FST table and the model formulation.

Usage: python3 render_report.py <terminals_file> <fsts_file> <solution_file> <output_html>
"""

import sys
from html import escape

from config import (BATTERY_BANDS, CANVAS_HEIGHT, CANVAS_MARGIN, CANVAS_WIDTH,
                    SimulationError)
from mip_gap import format_gap, parse_final_mip_gap
from parse_inputs import dump_file_for, parse_fsts_from_dump, parse_terminals
from parse_solution import (apply_coverage, apply_fst_costs, mark_selected_fsts,
                            parse_budget_info, parse_fst_costs,
                            parse_fsts_from_solution, parse_selected_fst_ids,
                            parse_solution_coverage)

EDGE_COLOR = "#3498db"
STEINER_FILL = "#5d6d7e"
STEINER_STROKE = "#34495e"

STYLE = """\
        body { font-family: 'Segoe UI', Arial, sans-serif; margin: 20px; background: #f8f9fa; }
        .container { max-width: 1400px; margin: 0 auto; background: white; padding: 30px; border-radius: 10px; box-shadow: 0 4px 6px rgba(0,0,0,0.1); }
        h1 { color: #2c3e50; text-align: center; margin-bottom: 30px; }
        .network-container { display: flex; gap: 30px; margin: 30px 0; }
        .network-svg { flex: 2; border: 2px solid #ddd; border-radius: 8px; background: #fafafa; }
        .sidebar { flex: 1; }
        .terminal-label { font-size: 14px; font-weight: bold; fill: #333; }
        .battery-text { font-size: 12px; fill: #666; }
        .metrics, .legend { background: #f8f9fa; padding: 20px; margin: 20px 0; border-radius: 8px; border-left: 4px solid #3498db; }
        .section { background: #fff; margin: 30px 0; padding: 25px; border-radius: 8px; border: 1px solid #e1e8ed; }
        .constraint-check { padding: 10px; margin: 8px 0; border-radius: 5px; background: #f8f9fa; border-left: 3px solid #28a745; }
        .constraint-warning { border-left-color: #e67e22; }
        table { width: 100%; border-collapse: collapse; }
        td { padding: 8px; border-bottom: 1px solid #eee; }
        .fst-table th, .fst-table td { padding: 10px; border: 1px solid #ddd; }
        .fst-table thead { background: #f8f9fa; }
        .fst-selected { background: #e8f5e8; }
        .fst-selected td.fst-id { background: #28a745; color: white; font-weight: bold; }
        .legend-item { display: flex; align-items: center; margin: 10px 0; }
        .legend-symbol { width: 20px; height: 20px; margin-right: 10px; border-radius: 50%; }
        .covered-terminal { background: #00ff00; border: 2px solid #333; }
        .uncovered-terminal { background: none; border: 2px dashed #999; }
        .selected-fst { background: #007bff; border-radius: 0; height: 6px; }
        .steiner-point { background: #6c757d; }"""


def scale_coordinates(x, y):
    """Map the unit square onto the canvas (y axis flipped, origin top-left)"""
    scaled_x = CANVAS_MARGIN + x * (CANVAS_WIDTH - 2 * CANVAS_MARGIN)
    scaled_y = CANVAS_MARGIN + (1.0 - y) * (CANVAS_HEIGHT - 2 * CANVAS_MARGIN)
    return scaled_x, scaled_y


def get_battery_color(battery):
    for threshold, color, _ in BATTERY_BANDS:
        if battery >= threshold:
            return color
    return BATTERY_BANDS[-1][1]


def _line(x1, y1, x2, y2):
    return (f'<line x1="{x1:.1f}" y1="{y1:.1f}" x2="{x2:.1f}" y2="{y2:.1f}" '
            f'stroke="{EDGE_COLOR}" stroke-width="6" opacity="0.7"/>')


def fst_edges(fst, terminals):
    """
    Canvas segments for one FST: spokes from its Steiner point when it has
    one, otherwise consecutive terminal pairs. Unknown terminals are skipped.
    """
    n = len(terminals)
    ids = [t for t in fst['terminals'] if 0 <= t < n]

    if fst['steiner_points']:
        sx, sy = scale_coordinates(*fst['steiner_points'][0])
        return [(sx, sy) + scale_coordinates(terminals[t]['x'], terminals[t]['y']) for t in ids]

    edges = []
    for t1, t2 in zip(fst['terminals'], fst['terminals'][1:]):
        if 0 <= t1 < n and 0 <= t2 < n:
            edges.append(scale_coordinates(terminals[t1]['x'], terminals[t1]['y'])
                         + scale_coordinates(terminals[t2]['x'], terminals[t2]['y']))
    return edges


def render_svg(terminals, selected_fsts):
    out = [f'<svg width="{CANVAS_WIDTH}" height="{CANVAS_HEIGHT}" '
           f'viewBox="0 0 {CANVAS_WIDTH} {CANVAS_HEIGHT}" class="network-svg">']

    # Edges first so terminals are drawn on top
    for fst in selected_fsts:
        for edge in fst_edges(fst, terminals):
            out.append("    " + _line(*edge))
        if fst['steiner_points']:
            sx, sy = scale_coordinates(*fst['steiner_points'][0])
            out.append(f'    <circle cx="{sx:.1f}" cy="{sy:.1f}" r="5" fill="{STEINER_FILL}" '
                       f'stroke="{STEINER_STROKE}" stroke-width="1"/>')

    for term in terminals:
        x, y = scale_coordinates(term['x'], term['y'])
        color = get_battery_color(term['battery'])
        if term['covered']:
            out.append(f'    <circle cx="{x:.1f}" cy="{y:.1f}" r="8" fill="{color}" stroke="#333" stroke-width="2"/>')
        else:
            out.append(f'    <circle cx="{x:.1f}" cy="{y:.1f}" r="8" fill="{color}" stroke="#999" '
                       f'stroke-width="3" stroke-dasharray="5,3"/>')
        out.append(f'    <text x="{x:.1f}" y="{y - 20:.1f}" text-anchor="middle" class="terminal-label">{term["id"]}</text>')
        out.append(f'    <text x="{x:.1f}" y="{y + 25:.1f}" text-anchor="middle" class="battery-text">{term["battery"]:.1f}%</text>')
        if not term['covered']:
            out.append(f'    <text x="{x:.1f}" y="{y - 5:.1f}" text-anchor="middle" font-size="9" '
                       f'fill="#e74c3c" font-weight="bold">✗</text>')

    out.append('</svg>')
    return out


def count_components(selected_fsts):
    """Connected components formed by the selected FSTs (over their terminals)"""
    parent = {}

    def find(a):
        while parent[a] != a:
            parent[a] = parent[parent[a]]
            a = parent[a]
        return a

    for fst in selected_fsts:
        for t in fst['terminals']:
            parent.setdefault(t, t)
        for t in fst['terminals'][1:]:
            ra, rb = find(fst['terminals'][0]), find(t)
            if ra != rb:
                parent[ra] = rb

    return len({find(t) for t in parent})


def total_selected_cost(all_fsts):
    costs = [fst['cost'] for fst in all_fsts if fst['selected'] and fst['cost'] is not None]
    return sum(costs) if costs else None


def _fmt_number(value):
    if value is None:
        return "Not available"
    if float(value).is_integer():
        return f"{value:,.0f}"
    return f"{value:,.3f}"


def render_html(terminals, all_fsts, selected_fsts, gap, files, budget=None):
    """Assemble the report page; `files` maps 'terminals'/'fsts'/'solution' to paths"""
    n = len(terminals)
    covered_count = sum(1 for t in terminals if t['covered'])
    coverage_rate = 100.0 * covered_count / n if n else 0.0
    uncovered = [t['id'] for t in terminals if not t['covered']]
    num_selected = sum(1 for fst in all_fsts if fst['selected'])
    total_cost = total_selected_cost(all_fsts)
    budget_str = _fmt_number(budget)

    out = []
    w = out.append

    w('<!DOCTYPE html>')
    w('<html lang="en">')
    w('<head>')
    w('    <meta charset="UTF-8">')
    w('    <meta name="viewport" content="width=device-width, initial-scale=1.0">')
    w('    <title>GeoSteiner Network Optimization - Budget-Constrained Solution</title>')
    w('    <style>')
    w(STYLE)
    w('    </style>')
    w('</head>')
    w('<body>')
    w('    <div class="container">')
    w('        <h1>🌐 GeoSteiner Network Optimization - Budget-Constrained Solution</h1>')

    w('        <div class="network-container">')
    out.extend("            " + line for line in render_svg(terminals, selected_fsts))

    # Sidebar: metrics and legend
    w('            <div class="sidebar">')
    w('                <div class="metrics">')
    w('                    <h3>📊 Solution Metrics</h3>')
    w('                    <table>')
    w(f'                        <tr><td><strong>Selected FSTs:</strong></td><td>{num_selected} of {len(all_fsts)}</td></tr>')
    w(f'                        <tr><td><strong>Total Terminals:</strong></td><td>{n}</td></tr>')
    w(f'                        <tr><td><strong>Covered Terminals:</strong></td><td>{covered_count}</td></tr>')
    w(f'                        <tr><td><strong>Uncovered Terminals:</strong></td><td>{n - covered_count}</td></tr>')
    w(f'                        <tr><td><strong>Coverage Rate:</strong></td><td>{coverage_rate:.1f}%</td></tr>')
    w(f'                        <tr><td><strong>Total Cost:</strong></td><td>{_fmt_number(total_cost)}</td></tr>')
    w(f'                        <tr><td><strong>Budget:</strong></td><td>{budget_str}</td></tr>')
    w(f'                        <tr><td><strong>MIP Gap:</strong></td><td>{format_gap(gap)}</td></tr>')
    w('                    </table>')
    w('                </div>')

    w('                <div class="legend">')
    w('                    <h3>🎯 Legend</h3>')
    for css, label in [("covered-terminal", "Covered Terminal"),
                       ("uncovered-terminal", "Uncovered Terminal"),
                       ("steiner-point", "Steiner Point"),
                       ("selected-fst", "Selected FST Edge")]:
        w('                    <div class="legend-item">')
        w(f'                        <div class="legend-symbol {css}"></div>')
        w(f'                        <span>{label}</span>')
        w('                    </div>')
    for _, color, label in BATTERY_BANDS:
        w('                    <div class="legend-item">')
        w(f'                        <div class="legend-symbol" style="background: {color};"></div>')
        w(f'                        <span>Battery {label}</span>')
        w('                    </div>')
    w('                </div>')
    w('            </div>')
    w('        </div>')

    w('        <div class="metrics">')
    w('            <h3>📁 Input Files</h3>')
    w('            <table>')
    for key, label in [('terminals', 'Terminals'), ('fsts', 'FSTs'), ('solution', 'Solution')]:
        w(f'                <tr><td><strong>{label}:</strong></td><td><code>{escape(str(files.get(key, "")))}</code></td></tr>')
    w('            </table>')
    w('        </div>')

    # Constraint verification
    spanning_lhs = sum(len(fst['terminals']) - 1 for fst in selected_fsts) + len(uncovered)
    components = count_components(selected_fsts)

    w('        <div class="section">')
    w('            <h2>📈 Constraint Verification</h2>')
    if uncovered:
        names = ' '.join(f"T{t}" for t in uncovered)
        w('            <div class="constraint-check constraint-warning">')
        w(f'                <strong>⚠️ Terminal Coverage:</strong> {covered_count} out of {n} terminals covered ({names} uncovered)')
    else:
        w('            <div class="constraint-check">')
        w(f'                <strong>✅ Terminal Coverage:</strong> All {n} terminals covered')
    w('            </div>')
    w('            <div class="constraint-check">')
    w(f'                <strong>Budget Constraint:</strong> Σ tree_cost[i] × x[i] ≤ {budget_str}')
    w('            </div>')
    if spanning_lhs == n - 1:
        w('            <div class="constraint-check">')
        w(f'                <strong>✅ Spanning Constraint:</strong> Σ(|FST|-1)×x + Σnot_covered = {spanning_lhs} ✓')
    else:
        w('            <div class="constraint-check constraint-warning">')
        w(f'                <strong>⚠️ Spanning Constraint:</strong> Σ(|FST|-1)×x + Σnot_covered = {spanning_lhs} (expected {n - 1})')
    w('            </div>')
    if components <= 1:
        w('            <div class="constraint-check">')
        w('                <strong>✅ Network Connectivity:</strong> All FSTs form one connected component')
    else:
        w('            <div class="constraint-check constraint-warning">')
        w(f'                <strong>⚠️ Network Connectivity:</strong> Selected FSTs form {components} components')
    w('            </div>')
    w('        </div>')

    # FST details
    w('        <div class="section">')
    w('            <h2>📊 FST Details</h2>')
    w('            <table class="fst-table">')
    w('                <thead>')
    w('                    <tr><th>FST ID</th><th>Terminals</th><th>Steiner Points</th><th>Type</th><th>Cost</th></tr>')
    w('                </thead>')
    w('                <tbody>')
    for fst in all_fsts:
        css = ' class="fst-selected"' if fst['selected'] else ''
        terminals_str = ', '.join(f"T{t}" for t in fst['terminals'])
        kind = "Y-junction" if fst['num_steiner_points'] > 0 else "Direct"
        cost = f"{fst['cost']:.3f}" if fst['cost'] is not None else "N/A"
        w(f'                    <tr{css}><td class="fst-id">{fst["id"]}</td><td>{terminals_str}</td>'
          f'<td>{fst["num_steiner_points"]}</td><td>{kind}</td><td>{cost}</td></tr>')
    w('                </tbody>')
    w('            </table>')
    w('        </div>')

    w('        <div class="section">')
    w('            <h2>🔧 Technical Implementation Details</h2>')
    w('            <h3>Objective Function:</h3>')
    w('            <p><strong>Minimize:</strong> Σ(tree_cost[i] + α×battery_cost[i])×x[i] + β×Σnot_covered[j]</p>')
    w('            <h3>Constraint Formulation:</h3>')
    w('            <ul>')
    w(f'                <li><strong>Budget Constraint:</strong> Σ tree_cost[i] × x[i] ≤ {budget_str}</li>')
    w(f'                <li><strong>Modified Spanning Constraint:</strong> Σ(|FST[i]| - 1) × x[i] + Σnot_covered[j] = {n - 1}</li>')
    w('                <li><strong>Soft Cutset Constraint 1:</strong> not_covered[j] ≤ 1 - x[i] ∀(i,j) where FST i contains terminal j</li>')
    w('                <li><strong>Soft Cutset Constraint 2:</strong> Σᵢ x[i] ≤ n·(1 - not_covered[j]) ∀j, where n = |{FSTs covering terminal j}|</li>')
    w('                <li><strong>Binary Constraints:</strong> x[i] ∈ {0,1}, not_covered[j] ∈ [0,1]</li>')
    w('            </ul>')
    w('        </div>')

    w('    </div>')
    w('</body>')
    w('</html>')
    return '\n'.join(out) + '\n'


def load_solution_model(terminals_file, fsts_file, solution_file, verbose=False):
    """Parse and cross-reference all inputs into the model the renderers draw"""
    terminals = parse_terminals(terminals_file, verbose=verbose)
    if not terminals:
        raise SimulationError(f"Could not parse terminals file: {terminals_file}")

    coverage = parse_solution_coverage(solution_file, len(terminals), verbose=verbose)
    apply_coverage(terminals, coverage)

    all_fsts = parse_fsts_from_dump(dump_file_for(fsts_file), num_terminals=len(terminals), verbose=verbose)
    selected_ids = parse_selected_fst_ids(solution_file, verbose=verbose)
    mark_selected_fsts(all_fsts, selected_ids, verbose=verbose)
    apply_fst_costs(all_fsts, parse_fst_costs(solution_file))

    return {
        'terminals': terminals,
        'all_fsts': all_fsts,
        'selected_ids': selected_ids,
        'selected_fsts': parse_fsts_from_solution(solution_file, verbose=verbose),
        'gap': parse_final_mip_gap(solution_file, verbose=verbose),
        'budget_info': parse_budget_info(solution_file),
    }


def create_rich_visualization(terminals_file, fsts_file, solution_file, html_file,
                              budget=None, verbose=False):
    """Write the HTML report; returns the parsed model"""
    if verbose:
        print("   Creating rich SVG network visualization")

    model = load_solution_model(terminals_file, fsts_file, solution_file, verbose=verbose)
    if budget is None:
        budget = model['budget_info'].get('budget_limit')

    files = {'terminals': terminals_file, 'fsts': fsts_file, 'solution': solution_file}
    page = render_html(model['terminals'], model['all_fsts'], model['selected_fsts'],
                       model['gap'], files, budget=budget)

    try:
        with open(html_file, 'w', encoding='utf-8') as f:
            f.write(page)
    except OSError as e:
        raise SimulationError(f"Cannot create HTML file: {html_file} ({e})")

    if verbose:
        print("   ✅ Rich SVG visualization created")
    return model


def main():
    if len(sys.argv) != 5:
        print("Usage: python3 render_report.py <terminals_file> <fsts_file> <solution_file> <output_html>")
        sys.exit(1)

    try:
        create_rich_visualization(*sys.argv[1:5], verbose=True)
    except SimulationError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    print(f"✅ Visualization saved to: {sys.argv[4]}")


if __name__ == "__main__":
    main()
