"""Progress tracking for the scan pipeline."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Callable

import structlog

log = structlog.get_logger("ds_adoption.progress")

PHASES = ("resolve_files", "analyze", "aggregate")


@dataclass
class PhaseStatus:
    phase: str
    status: str = "pending"  # "pending" | "running" | "completed" | "failed"
    start_time: float | None = None
    end_time: float | None = None
    done: int = 0
    total: int = 0
    detail: str = ""
    error: str | None = None

    @property
    def duration(self) -> float | None:
        if self.start_time is not None and self.end_time is not None:
            return round(self.end_time - self.start_time, 2)
        return None


class ScanProgress:
    """Track scan phases and per-batch file counts, notifying callbacks on change."""

    def __init__(self) -> None:
        self.phases: dict[str, PhaseStatus] = {name: PhaseStatus(name) for name in PHASES}
        self.callbacks: list[Callable[[PhaseStatus], None]] = []

    def start(self, phase: str, total: int = 0) -> None:
        p = self.phases.setdefault(phase, PhaseStatus(phase))
        p.status = "running"
        p.start_time = time.monotonic()
        p.total = total
        self._notify(p)

    def advance(self, phase: str, done: int, total: int) -> None:
        p = self.phases[phase]
        p.done = done
        p.total = total
        self._notify(p)

    def complete(self, phase: str, detail: str = "") -> None:
        p = self.phases[phase]
        p.status = "completed"
        p.end_time = time.monotonic()
        p.detail = detail
        self._notify(p)

    def fail(self, phase: str, error: str) -> None:
        p = self.phases[phase]
        p.status = "failed"
        p.end_time = time.monotonic()
        p.error = error
        self._notify(p)

    def get_summary(self) -> dict[str, Any]:
        return {
            "phases": [
                {
                    "phase": p.phase,
                    "status": p.status,
                    "duration": p.duration,
                    "done": p.done,
                    "total": p.total,
                    "detail": p.detail,
                    "error": p.error,
                }
                for p in self.phases.values()
            ],
            "total_duration": round(sum(p.duration or 0 for p in self.phases.values()), 2),
        }

    def _notify(self, p: PhaseStatus) -> None:
        for cb in self.callbacks:
            try:
                cb(p)
            except Exception:
                log.debug("progress.callback_failed", phase=p.phase, exc_info=True)
