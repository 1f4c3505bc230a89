"""
config_validator.py — Validates the `board` section of preferences.yaml.

validate_board_config() runs every check in order and raises ConfigError on the first
problem, so a misconfigured board fails before anything is fetched or written.
"""

import json
import re
from pathlib import Path

SUPPORTED_VERSION = 1
NOTE_TYPES = ("NOTE", "TIP")

REQUIRED_STRING_FIELDS = [
    "repo_prefix",
    "heading_image_alt",
    "title",
    "description_line1",
    "note_type",
    "note_text",
    "default_category",
]
OPTIONAL_STRING_FIELDS = ["tagline", "description_line2", "jobs_section_header"]
FEATURE_FLAGS = ["internships", "more_resources"]

_REPO_PREFIX_RE = re.compile(r"^[a-z0-9]+$")


class ConfigError(ValueError):
    """Raised when the job board configuration is invalid."""


def validate_version(board: dict):
    version = board.get("version")
    if version is None:
        raise ConfigError("Missing board.version field")
    if isinstance(version, bool) or not isinstance(version, int):
        raise ConfigError(f"board.version must be a number, got: {type(version).__name__}")
    if version != SUPPORTED_VERSION:
        raise ConfigError(f"Unsupported config version: {version}. Expected: {SUPPORTED_VERSION}")


def validate_required_fields(board: dict):
    for name in REQUIRED_STRING_FIELDS:
        value = board.get(name)
        if value is None or value == "":
            raise ConfigError(f"Missing required field: board.{name}")
        if not isinstance(value, str):
            raise ConfigError(f"board.{name} must be a string, got: {type(value).__name__}")
        if not value.strip():
            raise ConfigError(f"board.{name} cannot be empty")

    for name in OPTIONAL_STRING_FIELDS:
        value = board.get(name)
        if value is not None and not isinstance(value, str):
            raise ConfigError(f"board.{name} must be a string if provided, got: {type(value).__name__}")

    features = board.get("features")
    if not isinstance(features, dict):
        raise ConfigError("Missing or invalid board.features mapping")
    for flag in FEATURE_FLAGS:
        if not isinstance(features.get(flag), bool):
            raise ConfigError(f"board.features.{flag} must be a boolean")


def validate_repo_prefix(board: dict):
    prefix = board["repo_prefix"]
    if len(prefix) < 2:
        raise ConfigError(f'board.repo_prefix too short: "{prefix}" (minimum 2 characters)')
    if not _REPO_PREFIX_RE.match(prefix):
        raise ConfigError(f'board.repo_prefix must be lowercase alphanumeric only: "{prefix}"')


def validate_note_type(board: dict):
    if board["note_type"] not in NOTE_TYPES:
        raise ConfigError(
            f'board.note_type must be one of: {", ".join(NOTE_TYPES)}. Got: "{board["note_type"]}"'
        )


def required_images(board: dict) -> list[str]:
    prefix = board["repo_prefix"]
    images = [f"images/{prefix}-heading.png", f"images/{prefix}-listings.png"]
    if board["features"]["internships"]:
        images += [f"images/{prefix}-internships.png", f"images/{prefix}-visit.png"]
    return images


def validate_images(board: dict, repo_root: Path):
    missing = [img for img in required_images(board) if not (Path(repo_root) / img).exists()]
    if missing:
        listing = "\n  - ".join(missing)
        raise ConfigError(f"Missing required images:\n  - {listing}")


def validate_categories_file(board: dict, repo_root: Path):
    path = Path(repo_root) / board.get("categories_file", "job_categories.json")
    if not path.exists():
        raise ConfigError(f"Missing job categories file at: {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            categories = json.load(f)
    except (OSError, ValueError) as e:
        raise ConfigError(f"Invalid {path.name}: {e}") from e

    if not isinstance(categories, dict) or board["default_category"] not in categories:
        available = ", ".join(categories) if isinstance(categories, dict) else "none"
        raise ConfigError(
            f'board.default_category "{board["default_category"]}" not found in {path.name}. '
            f"Available categories: {available}"
        )


def validate_board_config(board: dict, repo_root: Path) -> bool:
    """Run all checks. Returns True, or raises ConfigError describing the first failure."""
    if not isinstance(board, dict):
        raise ConfigError("board section must be a mapping")
    validate_version(board)
    validate_required_fields(board)
    validate_repo_prefix(board)
    validate_note_type(board)
    validate_images(board, repo_root)
    validate_categories_file(board, repo_root)
    return True
