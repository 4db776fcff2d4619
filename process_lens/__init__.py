"""
Process Lens Analysis Engine

This engine ingests normalized process event logs, discovers a
directly-follows process model, scores every case against the
dominant path, and segments the people executing the process.
"""

__version__ = "0.1.0"
__author__ = "Process Lens Team"

from pathlib import Path

# Package root directory
PACKAGE_ROOT = Path(__file__).parent

# Default configuration
DEFAULT_CONFIG = {
    "random_seed": 42,
    "max_variants": 20,
    "recent_cases_limit": 5,
    "synthetic_case_count": 500,
}
