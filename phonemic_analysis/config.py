"""
Project-wide configuration and directory structure.

This module defines the paths, cache key and validation thresholds used
throughout the phonemic analysis system. Directories are created at import
time so the cache can always be written.

Module Contents:
    APP_NAME: Application name for display purposes
    DATA_DIR: Main data directory (override with PHONEMIC_ANALYSIS_HOME)
    CACHE_DIR: Directory holding the local language cache
    CACHE_FILE: JSON file with the whole-collection snapshot
    CACHE_KEY: Fixed name the snapshot is stored under
    TEMPLATE_FILENAME: Default file name for the CSV template
    OPTIMIZED_MAX_LENGTH: Longest elementary string counted as optimized
    COMPLEX_MAX_LENGTH: Longest elementary string still considered valid

Example:
    >>> from phonemic_analysis.config import CACHE_FILE, CACHE_KEY
    >>> print(f"Languages cached in {CACHE_FILE} under {CACHE_KEY!r}")
"""

import os
from pathlib import Path

# Application name for display and identification
APP_NAME = "Phonemic Analysis"

# Main data directory (contains the cache and exported templates)
DATA_DIR = Path(
    os.environ.get("PHONEMIC_ANALYSIS_HOME")
    or Path(__file__).resolve().parent / "data"
)

# Cache directory for the local language snapshot
CACHE_DIR = DATA_DIR / "cache"

# Whole-collection snapshot of language records
CACHE_FILE = CACHE_DIR / "languages.json"

# Key the snapshot is stored under inside CACHE_FILE
CACHE_KEY = "phonemicLanguages"

# Name of the downloadable CSV template
TEMPLATE_FILENAME = "phonemic_analysis_template.csv"

# Complexity buckets for elementary strings: <= 3 optimized, 4-6 complex, > 6 invalid
OPTIMIZED_MAX_LENGTH = 3
COMPLEX_MAX_LENGTH = 6

# Ensure all directories exist at import time
for d in (DATA_DIR, CACHE_DIR):
    d.mkdir(parents=True, exist_ok=True)
