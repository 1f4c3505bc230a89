from datetime import datetime, timezone

import pytest

from store import StorePaths


@pytest.fixture
def now() -> datetime:
    return datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def paths(tmp_path) -> StorePaths:
    return StorePaths(tmp_path / ".github" / "data")


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch) -> None:
    for key in ("GITHUB_RUN_ID", "GITHUB_REPOSITORY", "GITHUB_WORKFLOW", "GITHUB_EVENT_NAME", "GITHUB_REF_NAME"):
        monkeypatch.delenv(key, raising=False)
