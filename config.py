"""
config.py — Loads preferences.yaml and environment variables.
Provides typed access to all configuration.
"""

import os
from pathlib import Path

import yaml
from dotenv import load_dotenv

# Load .env file
load_dotenv()

# Project root directory
PROJECT_ROOT = Path(__file__).parent

# Load preferences.yaml
PREFERENCES_PATH = Path(os.getenv("JOB_BOARD_PREFERENCES", PROJECT_ROOT / "preferences.yaml"))
with open(PREFERENCES_PATH, "r") as f:
    _prefs = yaml.safe_load(f)


# --- Board ---
BOARD = _prefs["board"]

# --- Classification tables (order matters: first match wins) ---
CATEGORY_KEYWORDS = _prefs["categories"]
EXPERIENCE_LEVELS = _prefs["experience_levels"]
EMPLOYMENT_TYPES = _prefs["employment_types"]

# --- Filters ---
_filters = _prefs["filters"]
DEFAULT_CATEGORY = _filters["default_category"]
DEFAULT_EXPERIENCE_LEVEL = _filters["default_experience_level"]
UNKNOWN_LOCATION_IS_US = _filters["unknown_location_is_us"]
STALE_DAYS = _filters["stale_days"]
README_MAX_AGE_DAYS = _filters["readme_max_age_days"]
TRUST_JSEARCH_SENIORITY = _filters["trust_jsearch_seniority"]

# --- JSearch ---
JSEARCH = _prefs["jsearch"]
JSEARCH_QUERIES = JSEARCH["queries"]

# --- Retry ---
RETRY = _prefs["retry"]

# --- API Keys & Secrets (from .env) ---
JSEARCH_API_KEY = os.getenv("JSEARCH_API_KEY", "")
DEBUG_MODE = os.getenv("DEBUG_MODE", "").lower() == "true"

# --- Data files ---
REPO_ROOT = Path(os.getenv("JOB_BOARD_REPO_ROOT", Path.cwd()))
DATA_DIR = Path(os.getenv("JOB_BOARD_DATA_DIR", REPO_ROOT / ".github" / "data"))

# --- Logging ---
LOG_DIR = Path(os.getenv("JOB_BOARD_LOG_DIR", PROJECT_ROOT / "logs"))
LOG_FILE = LOG_DIR / "job_board.log"


def validate_config():
    """Check that critical configuration is present."""
    warnings = []

    if not JSEARCH_API_KEY:
        warnings.append("JSEARCH_API_KEY is not set — JSearch fetch will be skipped")
    if not JSEARCH_QUERIES:
        warnings.append("jsearch.queries is empty — nothing to fetch")
    if DEFAULT_CATEGORY != BOARD.get("default_category"):
        warnings.append(
            f"filters.default_category '{DEFAULT_CATEGORY}' differs from "
            f"board.default_category '{BOARD.get('default_category')}'"
        )
    if DEFAULT_EXPERIENCE_LEVEL not in EXPERIENCE_LEVELS:
        warnings.append(f"Default experience level '{DEFAULT_EXPERIENCE_LEVEL}' is not a known level")
    if STALE_DAYS <= 0:
        warnings.append(f"filters.stale_days must be positive, got {STALE_DAYS}")

    categories_file = REPO_ROOT / BOARD.get("categories_file", "job_categories.json")
    if not categories_file.exists():
        warnings.append(f"Categories file not found at {categories_file}")

    return warnings
