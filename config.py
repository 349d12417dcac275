#!/usr/bin/env python3
"""
Configuration for the battery-aware GeoSteiner simulation pipeline.

Capacity limits are policy choices rather than hard requirements of the
file formats: they bound how much of each input is rendered. Anything past a
limit is dropped with a warning.

Tool locations and the solver timeout may be overridden from the environment:

    GEOSTEINER_BIN_DIR   directory holding efst, dumpfst and bb (default: .)
    GEOSTEINER_EFST      explicit path to efst
    GEOSTEINER_DUMPFST   explicit path to dumpfst
    GEOSTEINER_BB        explicit path to bb
    GEOSTEINER_TIMEOUT   solver wall-clock limit in seconds (default: 300)
"""

import os


class SimulationError(Exception):
    """Unrecoverable pipeline condition (reported by simulate.main)."""


def _env_or_default(key, default, type_fn=None):
    """Get value from environment variable or use default."""
    val = os.getenv(key)
    if val is not None and val != "":
        return type_fn(val) if type_fn is not None else val
    return default


# Capacity policy
MAX_TERMINALS = 50          # terminals read from the terminal file
MAX_FSTS = 100              # candidate trees read from the dump
MAX_FST_TERMINALS = 10      # terminal indices kept per tree
MAX_SELECTED_FSTS = 50      # selected trees read from the solver log

# External tools
BIN_DIR = _env_or_default("GEOSTEINER_BIN_DIR", ".")
EFST = _env_or_default("GEOSTEINER_EFST", os.path.join(BIN_DIR, "efst"))
DUMPFST = _env_or_default("GEOSTEINER_DUMPFST", os.path.join(BIN_DIR, "dumpfst"))
BB = _env_or_default("GEOSTEINER_BB", os.path.join(BIN_DIR, "bb"))
SOLVER_TIMEOUT = _env_or_default("GEOSTEINER_TIMEOUT", 300, float)
BUDGET_ENV_VAR = "GEOSTEINER_BUDGET"
HTML_HELPER = "html_generator.py"

# Exit codes reported for non-normal subprocess outcomes (coreutils convention)
TIMEOUT_EXIT_CODE = 124
MISSING_EXIT_CODE = 127

# Output file names
DEFAULT_OUTPUT_DIR = "simulation_output"
TERMINALS_FILE = "terminals.txt"
FSTS_FILE = "fsts.txt"
FSTS_DUMP_FILE = "fsts_dump.txt"
SOLUTION_FILE = "solution.txt"
HTML_FILE = "visualization.html"
PLOT_FILE = "network.png"

# SVG canvas
CANVAS_WIDTH = 800
CANVAS_HEIGHT = 600
CANVAS_MARGIN = 50

# Battery colour bands, highest threshold first
BATTERY_BANDS = [
    (80.0, "#27ae60", "High (80-100%)"),
    (60.0, "#52c41a", "Good (60-80%)"),
    (40.0, "#f39c12", "Medium (40-60%)"),
    (20.0, "#e67e22", "Low (20-40%)"),
    (float("-inf"), "#e74c3c", "Critical (<20%)"),
]
