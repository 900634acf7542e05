# logconfig.py
"""Test logging configuration - using centralized logging."""

from btree_index.logging_config import get_test_logger

# Get a logger for tests
logger = get_test_logger("main")
