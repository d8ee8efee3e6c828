#!/usr/bin/env python3
"""
Test Runner Script

Runs the Outlook MCP server tests. Leading suite names select test modules;
everything else is passed to pytest unchanged.

Usage:
    python run_tests.py                   # Run all tests
    python run_tests.py tools server      # Tool handlers and MCP dispatcher only
    python run_tests.py integration -x    # Graph request shapes, stop at first failure
    python run_tests.py -k limit          # Tests whose name mentions "limit"
    python run_tests.py -k bootstrap      # Client bootstrap (auth + dispatcher)

Suites: auth, config, integration, server, setup, tools, utils

@author: Generated for outlook_mcp repository
"""

import sys
from pathlib import Path

import pytest

TESTS_DIR = Path(__file__).parent / "tests"

SUITES = {
    "auth": "test_auth.py",
    "config": "test_config.py",
    "integration": "test_integration.py",
    "server": "test_server.py",
    "setup": "test_setup_wizard.py",
    "tools": "test_tools.py",
    "utils": "test_utils.py",
}


def split_suites(argv):
    """
    Separate leading suite names from pytest options.

    Returns:
        (test paths, remaining pytest arguments)
    """
    paths = []
    rest = list(argv)
    while rest and rest[0] in SUITES:
        paths.append(str(TESTS_DIR / SUITES[rest.pop(0)]))
    return paths or [str(TESTS_DIR)], rest


def main():
    print("=" * 70)
    print("Outlook MCP Server - Test Suite")
    print("=" * 70)
    print()

    paths, extra = split_suites(sys.argv[1:])
    args = paths + ["-v", "--tb=short", "--color=yes"] + extra

    print(f"Running pytest with args: {' '.join(args)}")
    print()

    exit_code = pytest.main(args)

    print()
    print("=" * 70)
    if exit_code == 0:
        print("✓ All tests passed!")
    else:
        print(f"✗ Tests failed with exit code: {exit_code}")
    print("=" * 70)

    return exit_code


if __name__ == "__main__":
    sys.exit(main())
