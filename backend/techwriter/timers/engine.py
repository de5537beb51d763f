"""Timer Engine — lifecycle of concurrently running and paused timers.

Transition table:

    active ──pause──▶ paused ──resume──▶ active
    active / paused ──stop──▶ stopped (row deleted, one TimeBlock written)

Elapsed time is always ``now - start_time``. Pausing changes the status
only; the paused interval still counts toward the final duration.

Usage:
    engine = TimerEngine(store, notifier=toast_sink)
    timer_id = engine.start("writing", project_id, "Draft auth guide", "user-guides")
    engine.pause(timer_id)
    engine.resume(timer_id)
    result = engine.stop(timer_id)   # StopResult(duration=..., end_time=...)
"""

from __future__ import annotations

import logging
from datetime import datetime

from pydantic import BaseModel

from techwriter.db.store import Store
from techwriter.exceptions import IllegalTransitionError, NotFoundError, ReferentialError
from techwriter.models import ActiveTimer, Project, TimeBlock
from techwriter.models.base import ensure_utc
from techwriter.notifications import LoggingNotifier, Notifier
from techwriter.reports.formatting import format_elapsed

logger = logging.getLogger(__name__)

# === State Transition Table ===
# Key: (from_state, to_state) → trigger
# Absent pair → illegal transition

LEGAL_TRANSITIONS: dict[tuple[str, str], str] = {
    ("active", "paused"): "User pauses",
    ("paused", "active"): "User resumes",
    ("active", "stopped"): "User stops a running timer",
    ("paused", "stopped"): "User stops a paused timer",
}

TERMINAL_STATES = {"stopped"}


class StopResult(BaseModel):
    time_block_id: str
    duration: int  # minutes
    end_time: datetime


class TimerEngine:
    """Start/pause/resume/stop timers stored in the ``active_timers`` collection.

    ``now`` comes from the store's clock unless a ``Ticker`` is given, in
    which case elapsed-time reads use the ticker's shared instant.
    """

    def __init__(
        self,
        store: Store,
        notifier: Notifier | None = None,
        ticker=None,
    ) -> None:
        self.store = store
        self.notifier: Notifier = notifier or LoggingNotifier()
        self.ticker = ticker

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def start(
        self,
        work_phase: str,
        project_id: str,
        description: str = "",
        content_type: str = "other",
    ) -> str:
        """Start a new timer on an existing, non-archived project. Returns its id.

        Raises:
            ReferentialError: If the project is missing or archived.
        """
        try:
            with self.store.session() as session:
                project = session.get(Project, project_id)
                if project is None:
                    raise ReferentialError(f"Project does not exist: {project_id}")
                if project.status == "archived":
                    raise ReferentialError(f"Project is archived: {project.name}")

            timer_id = self.store.active_timers.create(
                type=work_phase,
                project_id=project_id,
                project_name=project.name,
                project_team=project.team,
                description=description,
                content_type=content_type,
                start_time=self.store.clock.now(),
                status="active",
            )
        except Exception:
            self.notifier.notify("error", "Failed to start timer")
            raise

        logger.info("Timer %s started (%s on %s)", timer_id[:8], work_phase, project.name)
        self.notifier.notify("success", f"Started {work_phase} timer")
        return timer_id

    def pause(self, timer_id: str) -> ActiveTimer:
        """Mark a running timer paused. Elapsed time keeps accruing."""
        return self._transition(timer_id, "paused", "Timer paused", "Failed to pause timer")

    def resume(self, timer_id: str) -> ActiveTimer:
        return self._transition(timer_id, "active", "Timer resumed", "Failed to resume timer")

    def stop(self, timer_id: str) -> StopResult:
        """Finish a timer: write one completed TimeBlock and delete the timer row.

        Both writes share one transaction.

        Raises:
            NotFoundError: If no timer has ``timer_id``.
        """
        try:
            with self.store.session() as session:
                timer = session.get(ActiveTimer, timer_id)
                if timer is None:
                    raise NotFoundError("active_timers", timer_id)
                self._check(timer.status, "stopped")

                end_time = self.store.clock.now()
                start_time = ensure_utc(timer.start_time)
                duration = int((end_time - start_time).total_seconds() // 60)
                block = TimeBlock(
                    type=timer.type,
                    content_type=timer.content_type,
                    project_id=timer.project_id,
                    project_name=timer.project_name,
                    project_team=timer.project_team,
                    description=timer.description,
                    date=start_time,
                    start_time=start_time,
                    end_time=end_time,
                    duration=duration,
                    status="completed",
                    created_at=end_time,
                )
                session.add(block)
                session.delete(timer)
                session.commit()
                block_id = block.id
        except Exception:
            self.notifier.notify("error", "Failed to stop timer")
            raise

        self.store.notify("time_blocks", "active_timers")
        logger.info("Timer %s stopped after %d min", timer_id[:8], duration)
        self.notifier.notify(
            "success",
            f"Timer stopped! Duration: {duration // 60}h {duration % 60}m",
        )
        return StopResult(time_block_id=block_id, duration=duration, end_time=end_time)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_active_timer(self, timer_id: str) -> ActiveTimer | None:
        return self.store.active_timers.get(timer_id)

    def list_active_timers(self) -> list[ActiveTimer]:
        """All running and paused timers, oldest first."""
        return self.store.active_timers.query(order_by="start_time")

    def now(self) -> datetime:
        if self.ticker is not None:
            return self.ticker.current_time
        return self.store.clock.now()

    def elapsed_seconds(self, timer_id: str) -> int:
        """Whole seconds since the timer started, paused time included.

        Raises:
            NotFoundError: If no timer has ``timer_id``.
        """
        timer = self.store.active_timers.require(timer_id)
        return elapsed_since(timer.start_time, self.now())

    def formatted_elapsed(self, timer_id: str) -> str:
        """Elapsed time as ``H:MM:SS`` (or ``M:SS`` under an hour)."""
        return format_elapsed(self.elapsed_seconds(timer_id))

    # ------------------------------------------------------------------
    # State machine
    # ------------------------------------------------------------------

    def _check(self, from_state: str, to_state: str) -> None:
        if from_state in TERMINAL_STATES or (from_state, to_state) not in LEGAL_TRANSITIONS:
            raise IllegalTransitionError(from_state, to_state)

    def _transition(self, timer_id: str, to_state: str, ok_message: str, error_message: str) -> ActiveTimer:
        try:
            with self.store.session() as session:
                timer = session.get(ActiveTimer, timer_id)
                if timer is None:
                    raise NotFoundError("active_timers", timer_id)
                self._check(timer.status, to_state)
                timer.status = to_state
                session.add(timer)
                session.commit()
        except Exception:
            self.notifier.notify("error", error_message)
            raise

        self.store.notify("active_timers")
        logger.info("Timer %s → %s", timer_id[:8], to_state)
        self.notifier.notify("success", ok_message)
        return timer


def elapsed_since(start_time: datetime, now: datetime) -> int:
    """Whole seconds from ``start_time`` to ``now`` (never negative)."""
    seconds = int((ensure_utc(now) - ensure_utc(start_time)).total_seconds())
    return max(seconds, 0)
