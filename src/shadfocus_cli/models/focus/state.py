"""Active timer state machine.

A user has at most one active timer. It moves through
``absent -> running <-> paused -> absent``; the way back to absent is stop,
finish-early or auto-complete. Transitions update the local copy first and
then write to the gateway; a failed write is logged and the next
subscription delivery is taken as the truth.
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Iterable
from typing import Any

from shadfocus_cli.exceptions import GatewayError, InvalidInputError, TimerAlreadyActiveError
from shadfocus_cli.models import (
    TIMER_MODES,
    ActiveTimer,
    Paused,
    PomodoroTimer,
    Project,
    Running,
    Session,
    Settings,
    StopwatchTimer,
    TimerMode,
    clamp_duration,
    normalize_tags,
    timer_from_document,
)
from shadfocus_cli.models.focus.arithmetic import measure, used_seconds
from shadfocus_cli.models.focus.materializer import SessionMaterializer
from shadfocus_cli.models.focus.projector import DisplayProjector, Ticker, TimerDisplay
from shadfocus_cli.repositories import PersistenceGateway, TimerDocument, Unsubscribe
from shadfocus_cli.utils.clock import now_ms
from shadfocus_cli.utils.debounce import Debouncer
from shadfocus_cli.utils.logger import get_logger

logger = get_logger("state")

DisplayListener = Callable[[TimerDisplay], None]


class TimerStateMachine:
    """Owns one user's active timer.

    Args:
        gateway: Persistence gateway
        user_id: Owner of the timer
        clock: Returns the current time in epoch ms
        mode: Mode shown while no timer exists
        debounce_seconds: Delay before notes/tags edits are written
        tick_seconds: Display cadence; ``None`` disables the background
            ticker so the caller drives :meth:`tick` itself
        on_complete: Completion cue, called after an auto-completed session
            is saved. Its failures are logged and ignored.

    Use :meth:`close` (or the context manager) to release subscriptions,
    the ticker and any pending debounced write.
    """

    def __init__(
        self,
        gateway: PersistenceGateway,
        user_id: str,
        *,
        clock: Callable[[], int] | None = None,
        mode: TimerMode = "pomodoro",
        materializer: SessionMaterializer | None = None,
        projector: DisplayProjector | None = None,
        debounce_seconds: float = 0.5,
        tick_seconds: float | None = 1.0,
        on_complete: Callable[[Session], Any] | None = None,
    ):
        self.gateway = gateway
        self.user_id = user_id
        self.clock = clock or now_ms
        self.materializer = materializer or SessionMaterializer(gateway, clock=self.clock)
        self.projector = projector or DisplayProjector()
        self.on_complete = on_complete

        self._lock = threading.RLock()
        self._timer: ActiveTimer | None = None
        self._settings = Settings()
        self._projects: list[Project] = []
        self._mode: TimerMode = mode
        self._completed_instance: int | None = None
        self._listeners: list[DisplayListener] = []
        self._closed = False
        self._metadata = Debouncer(debounce_seconds, self._flush_metadata)
        self._ticker = Ticker(tick_seconds, self.tick) if tick_seconds else None

        self._unsubscribers: list[Unsubscribe] = [
            gateway.subscribe_settings(user_id, self._on_settings),
            gateway.subscribe_projects(user_id, self._on_projects),
            gateway.subscribe_active_timer(user_id, self._on_active_timer),
        ]

    # --- Read-only views ---

    @property
    def timer(self) -> ActiveTimer | None:
        return self._timer

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def projects(self) -> list[Project]:
        return list(self._projects)

    @property
    def mode(self) -> TimerMode:
        return self._mode

    def display(self) -> TimerDisplay:
        """Project the current timer for the UI."""
        with self._lock:
            return self.projector.project(
                self._timer, self._settings, mode=self._mode, now=self.clock()
            )

    # --- Transitions ---

    def start(
        self,
        mode: TimerMode | None = None,
        project: Project | None = None,
        notes: str = "",
        tags: Iterable[str] = (),
    ) -> ActiveTimer:
        """Start a new timer.

        Raises:
            TimerAlreadyActiveError: If a timer already exists; callers must
                pause, resume or finish it instead
        """
        mode = mode or self._mode
        if mode not in TIMER_MODES:
            raise InvalidInputError(f"Unknown timer mode: {mode}")

        with self._lock:
            if self._timer is not None:
                raise TimerAlreadyActiveError(
                    "A timer is already active. Pause, resume, finish or stop it first."
                )
            if project is None and self._projects:
                project = self._projects[0]
            fields = {
                "start_time": self.clock(),
                "project_id": project.id if project else "",
                "project_name": project.name if project else "",
                "notes": notes,
                "tags": normalize_tags(tags),
            }
            if mode == "pomodoro":
                timer: ActiveTimer = PomodoroTimer(
                    initial_duration=self._settings.duration_seconds, **fields
                )
            else:
                timer = StopwatchTimer(**fields)
            self._timer = timer
            self._mode = mode

        logger.info("start %s timer (project=%s)", mode, timer.project_name or "-")
        self._write("start", self.gateway.set_active_timer, self.user_id, timer)
        self._changed()
        return timer

    def pause(self) -> ActiveTimer | None:
        """Pause a running timer. No-op if absent or already paused."""
        with self._lock:
            timer = self._timer
            if timer is None or not timer.is_active:
                return None
            now = self.clock()
            timer = timer.model_copy(update={"pause": Paused(paused_at=now)})
            self._timer = timer

        self._write(
            "pause",
            self.gateway.patch_active_timer,
            self.user_id,
            {"isActive": False, "pausedAt": now},
        )
        self._changed()
        return timer

    def resume(self) -> ActiveTimer | None:
        """Resume a paused timer, folding the pause into ``paused_duration``.

        No-op if absent or already running.
        """
        with self._lock:
            timer = self._timer
            if timer is None or timer.paused_at is None:
                return None
            pause_length = max(0.0, (self.clock() - timer.paused_at) / 1000)
            paused_duration = timer.paused_duration + pause_length
            timer = timer.model_copy(
                update={"pause": Running(), "paused_duration": paused_duration}
            )
            self._timer = timer

        self._write(
            "resume",
            self.gateway.patch_active_timer,
            self.user_id,
            {"isActive": True, "pausedAt": None, "pausedDuration": paused_duration},
        )
        self._changed()
        return timer

    def change_duration(self, delta_minutes: int) -> Settings:
        """Shift the pomodoro duration setting by ``delta_minutes``.

        A pomodoro timer in progress gets the new target too; its elapsed
        progress is kept.
        """
        with self._lock:
            minutes = clamp_duration(self._settings.timer_duration + delta_minutes)
            settings = self._settings.model_copy(update={"timer_duration": minutes})
            self._settings = settings
            timer = self._timer
            if isinstance(timer, PomodoroTimer):
                timer = timer.model_copy(
                    update={"initial_duration": settings.duration_seconds}
                )
                self._timer = timer
            else:
                timer = None

        self._write("change duration", self.gateway.update_settings, self.user_id, settings)
        if timer is not None:
            self._write(
                "change duration",
                self.gateway.patch_active_timer,
                self.user_id,
                {"initialDuration": settings.duration_seconds},
            )
        self._changed()
        return settings

    def update_metadata(
        self, notes: str | None = None, tags: Iterable[str] | None = None
    ) -> ActiveTimer | None:
        """Edit notes and/or tags. The write is debounced; the local copy is not."""
        with self._lock:
            timer = self._timer
            if timer is None:
                return None
            updates: dict[str, Any] = {}
            if notes is not None:
                updates["notes"] = notes
            if tags is not None:
                updates["tags"] = normalize_tags(tags)
            timer = timer.model_copy(update=updates)
            self._timer = timer

        self._metadata.call(timer.start_time, timer.notes, timer.tags)
        return timer

    def finish_early(self) -> Session | None:
        """End the timer now and save the time used as a session.

        One second or less of use counts as a cancel: the timer is deleted
        and nothing is saved.

        Raises:
            GatewayError: If the session could not be saved; the timer is kept
        """
        with self._lock:
            timer = self._timer
            if timer is None:
                return None
            already_saved = self._completed_instance == timer.start_time
            used = used_seconds(timer, self.clock(), self._settings.duration_seconds)
            discard = already_saved or used is None or used <= 1
            if not discard:
                self._completed_instance = timer.start_time

        if discard:
            logger.info("finish with %ss used, discarding timer", used)
            self.stop()
            return None

        self._metadata.cancel()
        try:
            session = self._materialize(timer, used)
        except GatewayError:
            with self._lock:
                if self._completed_instance == timer.start_time:
                    self._completed_instance = None
            raise
        self._changed()
        return session

    def auto_complete(self) -> Session | None:
        """Save a running pomodoro whose remaining time reached zero.

        Fires at most once per timer instance, even if the timer is observed
        again before its deletion propagates. A failed save is retried on a
        later call.
        """
        with self._lock:
            timer = self._timer
            if not isinstance(timer, PomodoroTimer) or not timer.is_active:
                return None
            if self._completed_instance == timer.start_time:
                return None
            reading = measure(timer, self.clock(), self._settings.duration_seconds)
            if reading is None or not reading.finished:
                return None
            self._completed_instance = timer.start_time

        self._metadata.cancel()
        try:
            session = self._materialize(timer, reading.total)
        except GatewayError as e:
            logger.warning("auto-complete could not save session, will retry: %s", e)
            with self._lock:
                if self._completed_instance == timer.start_time:
                    self._completed_instance = None
            return None

        self._changed()
        self._cue(session)
        return session

    def stop(self) -> bool:
        """Discard the timer without saving a session.

        Returns:
            True if a timer was known locally
        """
        with self._lock:
            had_timer = self._timer is not None
            self._timer = None
        self._metadata.cancel()
        self._write("stop", self.gateway.delete_active_timer, self.user_id)
        self._changed()
        return had_timer

    reset = stop

    def switch_mode(self, mode: TimerMode) -> None:
        """Select the mode; a timer of the other mode is discarded, not saved."""
        if mode not in TIMER_MODES:
            raise InvalidInputError(f"Unknown timer mode: {mode}")
        with self._lock:
            timer = self._timer
        if timer is not None and timer.mode != mode:
            logger.info("switching to %s discards the running %s timer", mode, timer.mode)
            self.stop()
        with self._lock:
            self._mode = mode
        self._publish()

    # --- Display cadence ---

    def tick(self) -> TimerDisplay:
        """One display cycle: pick up remote changes, auto-complete, publish."""
        try:
            self.gateway.poll()
        except GatewayError as e:
            logger.warning("poll failed: %s", e)
        self.auto_complete()
        return self._publish()

    def watch(self, listener: DisplayListener) -> Unsubscribe:
        """Receive a :class:`TimerDisplay` now and on every tick or change."""
        with self._lock:
            self._listeners.append(listener)
        listener(self.display())
        self._sync_ticker()

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def close(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
        self._metadata.flush()
        if self._ticker is not None:
            self._ticker.stop()
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()
        with self._lock:
            self._listeners.clear()

    def __enter__(self) -> TimerStateMachine:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # --- Internals ---

    def _write(self, action: str, func: Callable[..., Any], *args: Any) -> None:
        try:
            func(*args)
        except GatewayError as e:
            logger.warning("%s not persisted, keeping local state: %s", action, e)

    def _materialize(self, timer: ActiveTimer, duration: int | None) -> Session:
        with self._lock:
            projects = list(self._projects)
            fallback = self._settings.duration_seconds
        session = self.materializer.materialize(
            self.user_id,
            timer,
            duration,
            projects=projects,
            fallback_duration=fallback,
        )
        with self._lock:
            if self._timer is not None and self._timer.start_time == timer.start_time:
                self._timer = None
        return session

    def _flush_metadata(self, start_time: int, notes: str, tags: tuple[str, ...]) -> None:
        with self._lock:
            current = self._timer
        if current is None or current.start_time != start_time:
            return
        self._write(
            "update metadata",
            self.gateway.patch_active_timer,
            self.user_id,
            {"notes": notes, "tags": list(tags)},
        )

    def _cue(self, session: Session) -> None:
        if self.on_complete is None:
            return
        try:
            self.on_complete(session)
        except Exception:
            logger.warning("completion cue failed", exc_info=True)

    def _changed(self) -> None:
        self._sync_ticker()
        self._publish()

    def _publish(self) -> TimerDisplay:
        display = self.display()
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(display)
            except Exception:
                logger.exception("display listener failed")
        return display

    def _sync_ticker(self) -> None:
        if self._ticker is None:
            return
        with self._lock:
            active = self._timer is not None and not self._closed
        if active:
            self._ticker.start()
        else:
            self._ticker.stop()

    # --- Subscription callbacks ---

    def _on_settings(self, settings: Settings) -> None:
        with self._lock:
            self._settings = settings
        self._publish()

    def _on_projects(self, projects: list[Project]) -> None:
        with self._lock:
            self._projects = list(projects)

    def _on_active_timer(self, document: TimerDocument | None) -> None:
        timer = timer_from_document(document)
        with self._lock:
            local = self._timer
            if (
                timer is not None
                and local is not None
                and self._metadata.pending
                and local.start_time == timer.start_time
            ):
                # Unflushed notes/tags edits win over the stored copy
                timer = timer.model_copy(update={"notes": local.notes, "tags": local.tags})
            self._timer = timer
            if timer is not None:
                self._mode = timer.mode
        self._changed()
