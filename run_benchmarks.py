#!/usr/bin/env python3
"""
Benchmark runner script for B-trees.

Thin wrapper around ``asv`` that selects benchmark groups for the insert
and lookup suites in ``benchmarks/``.
"""

import argparse
import subprocess
import sys
from pathlib import Path


def run_command(cmd, description=""):
    """Run a command and report whether it succeeded."""
    print(f"\n{description}")
    print(f"Running: {' '.join(cmd)}")
    try:
        result = subprocess.run(cmd, check=True, capture_output=True, text=True)
    except subprocess.CalledProcessError as e:
        print(f"Error: {e}")
        if e.stderr:
            print(f"stderr: {e.stderr}")
        return False
    if result.stdout:
        print(result.stdout)
    return True


def build_run_command(args):
    """Translate parsed arguments into an ``asv run`` invocation."""
    cmd = [sys.executable, '-m', 'asv', 'run']
    if args.machine:
        cmd.extend(['--machine', args.machine])
    if args.verbose:
        cmd.append('--verbose')
    if args.quick:
        cmd.append('--quick')

    if args.insert:
        cmd.extend(['-b', 'BTreeInsertBenchmarks'])
    if args.lookup:
        cmd.extend(['-b', 'BTreeLookupBenchmarks'])
    return cmd


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Run ASV benchmarks for B-trees",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python run_benchmarks.py --setup       # Record machine info (run once)
  python run_benchmarks.py --quick       # One pass per benchmark
  python run_benchmarks.py --insert      # Insert benchmarks only
  python run_benchmarks.py --lookup      # Lookup benchmarks only
  python run_benchmarks.py --report      # Build and serve the HTML report
        """
    )
    parser.add_argument('--setup', action='store_true', help='Record ASV machine info')
    parser.add_argument('--quick', action='store_true', help='Run each benchmark once')
    parser.add_argument('--insert', action='store_true', help='Run insert benchmarks only')
    parser.add_argument('--lookup', action='store_true', help='Run lookup benchmarks only')
    parser.add_argument('--report', action='store_true', help='Generate HTML report from existing results')
    parser.add_argument('--show', action='store_true', help='Show latest results in terminal')
    parser.add_argument('--verbose', action='store_true', help='Verbose output')
    parser.add_argument('--machine', type=str, help='Machine name for results')
    args = parser.parse_args(argv)

    if not Path('asv.conf.json').exists():
        print("Error: asv.conf.json not found. Please run from project root.")
        return 1

    asv = [sys.executable, '-m', 'asv']
    if args.setup:
        return 0 if run_command(asv + ['machine', '--yes'], "Configuring ASV machine info") else 1
    if args.report:
        if not run_command(asv + ['publish'], "Publishing results"):
            return 1
        return 0 if run_command(asv + ['preview'], "Serving report") else 1
    if args.show:
        return 0 if run_command(asv + ['show'], "Showing latest results") else 1

    if not run_command(build_run_command(args), "Running benchmarks"):
        print("\nBenchmarks failed!")
        return 1
    print("\nBenchmarks completed. View with: python run_benchmarks.py --show")
    return 0


if __name__ == '__main__':
    sys.exit(main())
