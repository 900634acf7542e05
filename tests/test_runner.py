#!/usr/bin/env python3
"""
Simple test runner that collects and runs specified test files from the project.
"""

import sys
import os
import unittest
import argparse
import logging

# Add the project root to the Python path so ``tests.*`` imports resolve
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

# Test files to run - Add or remove files as needed
TEST_FILES = [
    'test_find_index.py',
    'test_split_child.py',
    'test_insert.py',
    'test_lookup.py',
    'test_traversal.py',
    'test_factory.py',
    'test_stats.py',
    'test_display.py',
    'test_scripts.py',
]


def run_tests(test_files=None, test_classes=None, verbosity=0):
    """
    Run specified test files and optionally specific test classes.

    Args:
        test_files: List of test files to run (without the directory path)
        test_classes: Optional dict mapping test files to specific test classes to run
        verbosity: Verbosity level for test output

    Returns:
        Test result object
    """
    if test_files is None:
        test_files = TEST_FILES

    if test_classes is None:
        test_classes = {}

    suite = unittest.TestSuite()
    loader = unittest.TestLoader()

    for file in test_files:
        module_name = f"tests.{file}".replace('.py', '').replace('/', '.')

        if file in test_classes:
            for class_name in test_classes[file]:
                suite.addTest(loader.loadTestsFromName(f"{module_name}.{class_name}"))
        else:
            suite.addTest(loader.loadTestsFromName(module_name))

    runner = unittest.TextTestRunner(verbosity=verbosity)
    return runner.run(suite)


def main():
    """Main entry point for running tests."""
    parser = argparse.ArgumentParser(description='Run specific tests for the btree-index project')

    parser.add_argument(
        '-f', '--files',
        nargs='+',
        help='Test files to run (e.g., test_insert.py test_split_child.py)'
    )

    parser.add_argument(
        '-c', '--classes',
        nargs='+',
        help='Test classes to run (format: file.py:TestClass1,TestClass2)'
    )

    parser.add_argument(
        '--log-level',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
        default='INFO',
        help='Set the logging level (default: INFO)'
    )

    parser.add_argument(
        '-v', '--verbosity',
        type=int,
        choices=[0, 1, 2, 3],
        default=1,
        help='Verbosity level (0-3)'
    )

    args = parser.parse_args()

    log_level = getattr(logging, args.log_level)
    # Force=True makes this configuration override existing logger settings
    logging.basicConfig(
        level=log_level,
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        force=True
    )
    logging.getLogger("btree_index").setLevel(log_level)

    test_files = args.files if args.files else TEST_FILES

    test_classes = {}
    if args.classes:
        for class_arg in args.classes:
            if ':' in class_arg:
                file_name, class_names = class_arg.split(':')
                test_classes[file_name] = class_names.split(',')

    result = run_tests(
        test_files=test_files,
        test_classes=test_classes,
        verbosity=args.verbosity
    )

    sys.exit(1 if (result.failures or result.errors) else 0)


if __name__ == "__main__":
    main()
