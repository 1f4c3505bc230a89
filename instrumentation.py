"""
instrumentation.py — Optional pipeline tracing.

A tracer is created once per run and handed to the pipeline. PipelineTracer records a
checkpoint (counts by source plus a few sample IDs) after every stage and writes them
to debug-trace.json. NullTracer has the same interface and does nothing, so callers
never branch on whether tracing is on.
"""

import os
import time
from collections import Counter
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from models import JobListing
from monitoring import get_logger
from store import atomic_write_json

logger = get_logger("instrumentation")

SAMPLE_SIZE = 3


class NullTracer:
    enabled = False

    def checkpoint(self, stage: str, jobs: list[JobListing], metadata: Optional[dict] = None):
        pass

    def save(self, path: Path):
        pass

    def summary(self) -> list[str]:
        return []


class PipelineTracer:
    enabled = True

    def __init__(self, env: Optional[dict] = None):
        env = os.environ if env is None else env
        self._start = time.monotonic()

        run_id = env.get("GITHUB_RUN_ID")
        repository = env.get("GITHUB_REPOSITORY", "unknown")
        self.trace = {
            "correlation_id": run_id or f"local-{int(time.time() * 1000)}",
            "run_url": f"https://github.com/{repository}/actions/runs/{run_id}" if run_id else "local-run",
            "started_at": _now_iso(),
            "workflow": env.get("GITHUB_WORKFLOW", "unknown"),
            "repository": repository,
            "trigger": env.get("GITHUB_EVENT_NAME", "unknown"),
            "branch": env.get("GITHUB_REF_NAME", "unknown"),
            "checkpoints": [],
        }
        logger.info(f"Pipeline tracing enabled, correlation ID {self.trace['correlation_id']}")

    @property
    def checkpoints(self) -> list[dict]:
        return self.trace["checkpoints"]

    def checkpoint(self, stage: str, jobs: list[JobListing], metadata: Optional[dict] = None):
        jobs = list(jobs or [])
        by_source = dict(Counter(job.source or "unknown" for job in jobs))
        elapsed_ms = int((time.monotonic() - self._start) * 1000)

        self.checkpoints.append({
            "stage": stage,
            "timestamp": _now_iso(),
            "duration_ms": elapsed_ms,
            "counts": {"total": len(jobs), "by_source": by_source},
            "metadata": metadata or {},
            "sample_ids": [job.id or "no-id" for job in jobs[:SAMPLE_SIZE]],
        })
        logger.debug(f"[PIPELINE] {stage}", context={"total": len(jobs), "sources": by_source})

    def save(self, path: Path):
        """Finalize the trace and write it atomically. Write errors propagate."""
        self.trace["completed_at"] = _now_iso()
        self.trace["total_duration_ms"] = int((time.monotonic() - self._start) * 1000)
        atomic_write_json(path, self.trace)
        logger.info(f"Pipeline trace saved to {path} ({len(self.checkpoints)} checkpoints)")
        for line in self.summary():
            logger.info(line)

    def summary(self) -> list[str]:
        """One line per checkpoint, flagging stages that dropped jobs."""
        lines = []
        previous = None
        for cp in self.checkpoints:
            total = cp["counts"]["total"]
            sources = ", ".join(f"{s}:{c}" for s, c in cp["counts"]["by_source"].items())
            line = f"{cp['stage']}: {total} jobs ({sources})"
            if previous is not None and previous > total:
                dropped = previous - total
                line += f", dropped {dropped} (-{dropped / previous * 100:.1f}%)"
            lines.append(line)
            previous = total
        return lines


def make_tracer(enabled: bool, env: Optional[dict] = None):
    return PipelineTracer(env) if enabled else NullTracer()


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()
