#!/usr/bin/env python
"""
Simple Test Runner for DataTreeLib
==================================

Runs the test suite with pytest.

Usage:
    python run_tests.py              # Run all tests
    python run_tests.py --coverage   # Run with a coverage report
"""

import subprocess
import sys
import argparse
from pathlib import Path


def run_tests(coverage=False):
    """Run the test suite."""
    cmd = [
        sys.executable, "-m", "pytest",
        "tests",
        "--tb=short",               # Short traceback format
        "--durations=10",           # Show 10 slowest tests
        "-v"                        # Verbose output
    ]

    if coverage:
        cmd.extend(["--cov=datatreelib", "--cov-report=term-missing"])

    print("Running DataTreeLib tests...")
    print("=" * 60)

    result = subprocess.run(cmd, cwd=Path(__file__).parent)
    return result.returncode


def main():
    parser = argparse.ArgumentParser(description="Test runner for DataTreeLib")
    parser.add_argument("--coverage", action="store_true", help="Report coverage (needs pytest-cov)")

    args = parser.parse_args()
    return run_tests(coverage=args.coverage)


if __name__ == "__main__":
    sys.exit(main())
