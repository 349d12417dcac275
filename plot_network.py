#!/usr/bin/env python3
"""
Static (PNG/PDF) rendering of a solved network with matplotlib
Usage: python3 plot_network.py <terminals_file> <fsts_file> <solution_file> [output_file]
"""

import sys

import matplotlib.patches as mpatches
import matplotlib.pyplot as plt
import numpy as np

from config import BATTERY_BANDS, SimulationError
from mip_gap import format_gap
from render_report import get_battery_color, load_solution_model


def fst_segments(fst, terminals):
    """Unit-square segments for one FST (spokes from the Steiner point, else a chain)"""
    n = len(terminals)
    points = {t['id']: (t['x'], t['y']) for t in terminals}

    if fst['steiner_points']:
        sp = fst['steiner_points'][0]
        return [(sp, points[t]) for t in fst['terminals'] if 0 <= t < n]

    return [(points[a], points[b]) for a, b in zip(fst['terminals'], fst['terminals'][1:])
            if 0 <= a < n and 0 <= b < n]


def plot_network(terminals, selected_fsts, gap, output_file='network.png'):
    """Draw the selected FSTs over the terminals, plus a battery bar chart"""

    fig, (ax1, ax2) = plt.subplots(1, 2, figsize=(16, 8))

    ax1.set_title('Budget-Constrained Steiner Network\nwith Battery-Aware Terminal Coverage',
                  fontsize=14, fontweight='bold')

    for fst in selected_fsts:
        for (x1, y1), (x2, y2) in fst_segments(fst, terminals):
            ax1.plot([x1, x2], [y1, y2], color='#3498db', linewidth=3, alpha=0.7, zorder=1)
        if fst['steiner_points']:
            sx, sy = fst['steiner_points'][0]
            ax1.plot(sx, sy, 'o', color='#5d6d7e', markersize=6, zorder=2)

    for term in terminals:
        x, y = term['x'], term['y']
        circle = plt.Circle((x, y), 0.015, facecolor=get_battery_color(term['battery']),
                            edgecolor='#333' if term['covered'] else '#999',
                            linestyle='-' if term['covered'] else '--',
                            linewidth=2, zorder=3)
        ax1.add_patch(circle)
        ax1.annotate(f"T{term['id']}\n({term['battery']:.1f})", (x, y),
                     xytext=(5, 5), textcoords='offset points', fontsize=8)

    ax1.set_xlim(-0.05, 1.05)
    ax1.set_ylim(-0.05, 1.05)
    ax1.set_aspect('equal')
    ax1.set_xlabel('X Coordinate')
    ax1.set_ylabel('Y Coordinate')
    ax1.grid(True, alpha=0.3)
    ax1.text(0.02, 0.02, f"MIP Gap: {format_gap(gap)}", transform=ax1.transAxes, fontsize=10,
             bbox=dict(boxstyle="round,pad=0.3", facecolor='lightyellow', alpha=0.8))

    legend_elements = [mpatches.Patch(facecolor=color, label=label) for _, color, label in BATTERY_BANDS]
    legend_elements.append(mpatches.Patch(facecolor='white', edgecolor='#999', linestyle='--', label='Uncovered'))
    ax1.legend(handles=legend_elements, loc='upper right', fontsize=8)

    # Battery levels per terminal
    ax2.set_title('Terminal Battery Levels', fontsize=14, fontweight='bold')
    if terminals:
        ids = np.array([t['id'] for t in terminals])
        levels = np.array([t['battery'] for t in terminals])
        bars = ax2.bar(ids, levels, color=[get_battery_color(b) for b in levels], alpha=0.8)
        for bar, term in zip(bars, terminals):
            if not term['covered']:
                bar.set_hatch('//')
                bar.set_edgecolor('#999')
        ax2.axhline(y=levels.mean(), color='red', linestyle='--', alpha=0.7,
                    label=f'Average: {levels.mean():.1f}%')
        ax2.set_xticks(ids)
        ax2.set_xticklabels([f'T{i}' for i in ids], rotation=90, fontsize=8)
        ax2.legend()
    ax2.set_ylim(0, 100)
    ax2.set_xlabel('Terminal')
    ax2.set_ylabel('Battery (%)')
    ax2.grid(True, alpha=0.3)

    fig.tight_layout()
    fig.savefig(output_file, bbox_inches='tight', dpi=150)
    plt.close(fig)
    return output_file


def main():
    if len(sys.argv) not in (4, 5):
        print("Usage: python3 plot_network.py <terminals_file> <fsts_file> <solution_file> [output_file]")
        sys.exit(1)

    output_file = sys.argv[4] if len(sys.argv) == 5 else 'network.png'
    try:
        model = load_solution_model(sys.argv[1], sys.argv[2], sys.argv[3])
    except SimulationError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    plot_network(model['terminals'], model['selected_fsts'], model['gap'], output_file)
    print(f"Visualization saved to: {output_file}")


if __name__ == "__main__":
    main()
