#!/usr/bin/env python3
"""
Run the external GeoSteiner tools (efst, dumpfst, bb) as blocking subprocesses.

Each tool reads its input file on stdin and writes its output file on stdout.
Failures are classified and reported but never raised: a timed-out or failed
tool leaves a partial (or empty) output file which the parsers tolerate.
"""

import os
import subprocess
import sys

from config import (BB, BUDGET_ENV_VAR, DUMPFST, EFST, HTML_HELPER,
                    MISSING_EXIT_CODE, SOLVER_TIMEOUT, TIMEOUT_EXIT_CODE)


def classify_exit(returncode, timed_out=False):
    """Map a subprocess outcome to ok / timeout / missing / failed"""
    if timed_out or returncode == TIMEOUT_EXIT_CODE:
        return 'timeout'
    if returncode == 0:
        return 'ok'
    if returncode == MISSING_EXIT_CODE:
        return 'missing'
    return 'failed'


def build_environment(extra_env=None):
    env = os.environ.copy()
    if extra_env:
        env.update(extra_env)
    return env


def run_tool(command, input_file, output_file, env=None, timeout=None,
             merge_stderr=False, verbose=False):
    """
    Run `command` with stdin from input_file and stdout into output_file.

    Returns a dict with the command, return code, timeout flag and status
    (see classify_exit). A timeout kills the child and reports code 124.
    """
    if isinstance(command, str):
        command = [command]

    if verbose:
        print(f"   Executing: {' '.join(command)} < {input_file} > {output_file}")

    returncode = None
    timed_out = False
    try:
        with open(input_file, 'r') as fin, open(output_file, 'w') as fout:
            stderr = subprocess.STDOUT if merge_stderr else subprocess.DEVNULL
            try:
                proc = subprocess.run(command, stdin=fin, stdout=fout, stderr=stderr,
                                      env=env, timeout=timeout)
                returncode = proc.returncode
            except subprocess.TimeoutExpired:
                timed_out = True
                returncode = TIMEOUT_EXIT_CODE
            except (FileNotFoundError, PermissionError) as e:
                print(f"Warning: cannot execute {command[0]}: {e}", file=sys.stderr)
                returncode = MISSING_EXIT_CODE
    except OSError as e:
        print(f"Warning: cannot run {command[0]}: {e}", file=sys.stderr)
        returncode = -1

    return {
        'command': command,
        'returncode': returncode,
        'timed_out': timed_out,
        'status': classify_exit(returncode, timed_out),
    }


def _report(result, what, verbose):
    status = result['status']
    if status == 'ok':
        if verbose:
            print(f"   {what} completed successfully")
    elif status == 'timeout':
        print(f"Warning: {what} timed out, continuing with partial output", file=sys.stderr)
    else:
        print(f"Warning: {what} returned exit code {result['returncode']}", file=sys.stderr)


def generate_fsts(terminals_file, fsts_file, verbose=False):
    """Compute Full Steiner Trees with efst"""
    result = run_tool(EFST, terminals_file, fsts_file, verbose=verbose)
    _report(result, "FST generation", verbose)
    return result


def generate_fst_dump(fsts_file, dump_file, verbose=False):
    """Produce the readable one-tree-per-line dump with dumpfst"""
    result = run_tool(DUMPFST, fsts_file, dump_file, verbose=verbose)
    _report(result, "FST dump generation", verbose)
    return result


def solve_smt(fsts_file, solution_file, budget, timeout=SOLVER_TIMEOUT, verbose=False):
    """Solve the budget-constrained SMT with bb; stdout and stderr go to solution_file"""
    env = build_environment({BUDGET_ENV_VAR: str(budget)})
    if verbose:
        print(f"   Setting {BUDGET_ENV_VAR}={budget}")
        print(f"   Timeout: {timeout:g}s")

    result = run_tool(BB, fsts_file, solution_file, env=env, timeout=timeout,
                      merge_stderr=True, verbose=verbose)
    _report(result, "SMT solver", verbose)
    return result


def run_html_helper(terminals_file, fsts_file, solution_file, html_file,
                    helper=HTML_HELPER, verbose=False):
    """Run an external html_generator.py if one is present; True on success"""
    if not os.path.exists(helper):
        return False

    command = [sys.executable, helper,
               "--terminals", terminals_file,
               "--fsts", fsts_file,
               "--solution", solution_file,
               "--output", html_file]
    if verbose:
        print("   Running Python HTML generator")

    try:
        proc = subprocess.run(command, stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL)
    except OSError as e:
        print(f"Warning: cannot run {helper}: {e}", file=sys.stderr)
        return False

    if proc.returncode != 0 and verbose:
        print(f"   Warning: {helper} failed (exit code {proc.returncode})")
    return proc.returncode == 0
