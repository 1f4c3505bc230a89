"""
store.py — JSON file persistence for the job board.

Every file is rewritten wholesale through a temp file in the same directory followed
by os.replace(), so readers never see a half-written file. Loads never raise: a
missing or corrupt file is logged and treated as empty. Write failures propagate.
"""

import json
import os
import tempfile
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Any, Iterable, Optional

from config import DATA_DIR
from models import JobListing, UsageCounter
from monitoring import get_logger

logger = get_logger("store")


@dataclass(frozen=True)
class StorePaths:
    """File locations of one job board's data directory."""
    data_dir: Path

    @classmethod
    def default(cls) -> "StorePaths":
        return cls(DATA_DIR)

    @property
    def current_jobs(self) -> Path:
        return self.data_dir / "current_jobs.json"

    @property
    def new_jobs(self) -> Path:
        return self.data_dir / "new_jobs.json"

    @property
    def seen_jobs(self) -> Path:
        return self.data_dir / "seen_jobs.json"

    @property
    def usage(self) -> Path:
        return self.data_dir / "jsearch_usage.json"

    @property
    def debug_trace(self) -> Path:
        return self.data_dir / "debug-trace.json"


def atomic_write_text(path: Path, content: str, encoding: str = "utf-8") -> None:
    """Write text to a temp file in the same directory, then atomically replace."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with tempfile.NamedTemporaryFile(
        "w", encoding=encoding, dir=path.parent, prefix=f".{path.stem}.", suffix=".tmp", delete=False
    ) as tmp:
        tmp_path = Path(tmp.name)
        try:
            tmp.write(content)
        except BaseException:
            tmp.close()
            tmp_path.unlink(missing_ok=True)
            raise
    try:
        os.replace(tmp_path, path)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise


def atomic_write_json(path: Path, data: Any) -> None:
    # Serialize first so a bad payload never touches the filesystem
    content = json.dumps(data, indent=2, ensure_ascii=False, default=str)
    atomic_write_text(path, content + "\n")


def read_json(path: Path, default: Any) -> Any:
    """Read a JSON file, returning `default` when missing, unreadable or corrupt."""
    path = Path(path)
    if not path.exists():
        return default
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except (OSError, ValueError) as e:
        logger.error(f"Could not read {path.name}, treating as empty: {e}", context={"path": str(path)})
        return default


# --- Job collections ---

def load_jobs(path: Path) -> list[JobListing]:
    data = read_json(path, [])
    if not isinstance(data, list):
        logger.error(f"{Path(path).name} is not a JSON array, treating as empty")
        return []
    return [JobListing.from_dict(item) for item in data if isinstance(item, dict)]


def save_jobs(path: Path, jobs: Iterable[JobListing]) -> None:
    atomic_write_json(path, [job.to_dict() for job in jobs])


def write_new_jobs(paths: StorePaths, jobs: Iterable[JobListing]) -> None:
    """Snapshot of the fresh batch, written before it is merged into the store."""
    save_jobs(paths.new_jobs, jobs)


# --- Seen IDs ---

def load_seen_ids(path: Path) -> set[str]:
    """Seen IDs are stored as a list; a legacy object's keys are read as IDs."""
    data = read_json(path, [])
    if isinstance(data, dict):
        return set(data.keys())
    if isinstance(data, list):
        return {str(item) for item in data}
    logger.error(f"{Path(path).name} has unexpected shape, treating as empty")
    return set()


def save_seen_ids(path: Path, seen_ids: Iterable[str]) -> None:
    atomic_write_json(path, sorted(seen_ids))


# --- Usage counter ---

def load_usage(path: Path, max_requests: int, today: Optional[date] = None) -> UsageCounter:
    """Load today's usage; a counter from another day (or none at all) starts fresh."""
    today = today or date.today()
    data = read_json(path, None)
    if not isinstance(data, dict):
        return UsageCounter.fresh(max_requests, today)

    usage = UsageCounter.from_dict(data)
    if usage.date != today.isoformat():
        logger.info("New day detected, resetting usage tracking", context={"previous": usage.date})
        return UsageCounter.fresh(max_requests, today)
    return usage


def save_usage(path: Path, usage: UsageCounter) -> None:
    atomic_write_json(path, usage.to_dict())
