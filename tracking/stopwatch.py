"""
Stopwatch Module
Pause/resume stopwatch that accumulates elapsed time across start/stop cycles
and can resume from intervals already stored in a Session.

Correctness depends only on the clock readings taken at start and stop. The
periodic ticker exists to refresh displays: it reports the live total through
``on_tick`` and is cancelled on stop, reset, close and garbage collection.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from datetime import date, datetime, timedelta
from enum import Enum
import threading
from typing import Any
import weakref

from models.session import Interval, Session
from utils.calendar_utils import as_datetime, without_seconds
from utils.logger import Logger
from utils.time_format import format_hms

from .errors import InvariantViolation

logger = Logger()

DEFAULT_TICK_INTERVAL = 0.01
DEFAULT_PERIOD_SECONDS = 60.0

Clock = Callable[[], datetime]
TickCallback = Callable[[timedelta], None]


class StopwatchState(Enum):
    """Lifecycle states of a Stopwatch."""

    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    FINISHED = "finished"


class _Ticker:
    """Background thread calling back at a fixed interval until cancelled.

    Holds only a weak reference to its owner, so a discarded stopwatch is
    never kept alive (or mutated) by its ticker.
    """

    def __init__(self, owner: Stopwatch, interval: float) -> None:
        self._owner_ref = weakref.ref(owner)
        self._interval = interval
        self._cancelled = threading.Event()
        self._thread = threading.Thread(target=self._run, name="stopwatch-ticker", daemon=True)

    def start(self) -> None:
        self._thread.start()

    def _run(self) -> None:
        while not self._cancelled.wait(self._interval):
            owner = self._owner_ref()
            if owner is None:
                return
            owner._tick()
            del owner

    def cancel(self) -> None:
        """Signal the thread to exit; no further ticks start after this."""
        self._cancelled.set()

    def join(self) -> None:
        """Wait for an in-flight tick to finish. Must be called without the owner's lock."""
        if self._thread.is_alive() and threading.current_thread() is not self._thread:
            self._thread.join(timeout=1.0)

    @property
    def alive(self) -> bool:
        return self._thread.is_alive()


class Stopwatch:
    """Running/paused timer producing Session intervals.

    Args:
        intervals: previously persisted (start, end) pairs to resume from
        clock: source of the current time, ``datetime.now`` by default
        tick_interval: seconds between display refreshes, None disables ticking
        on_tick: called with the live total on every tick
    """

    def __init__(
        self,
        intervals: Iterable[Interval | tuple[datetime, datetime]] = (),
        *,
        clock: Clock = datetime.now,
        tick_interval: float | None = DEFAULT_TICK_INTERVAL,
        on_tick: TickCallback | None = None,
    ) -> None:
        self._clock = clock
        self._tick_interval = tick_interval
        self.on_tick = on_tick
        self._lock = threading.RLock()
        self._ticker: _Ticker | None = None

        self._intervals: list[Interval] = [
            i if isinstance(i, Interval) else Interval(start=i[0], end=i[1]) for i in intervals
        ]
        self._previous_elapsed = sum((i.duration for i in self._intervals), timedelta())
        self._start_time: datetime | None = None
        self._is_running = False
        # Resuming from stored intervals counts as having started
        self._has_started = bool(self._intervals)
        self._finished = False

    @classmethod
    def from_session(cls, session: Session, **kwargs: Any) -> Stopwatch:
        """Continue tracking an existing session."""
        return cls(session.intervals, **kwargs)

    # ---- state ----

    @property
    def state(self) -> StopwatchState:
        if self._finished:
            return StopwatchState.FINISHED
        if self._is_running:
            return StopwatchState.RUNNING
        if self._has_started:
            return StopwatchState.PAUSED
        return StopwatchState.IDLE

    @property
    def is_running(self) -> bool:
        return self._is_running

    @property
    def has_started(self) -> bool:
        return self._has_started

    @property
    def intervals(self) -> list[Interval]:
        with self._lock:
            return list(self._intervals)

    @property
    def previous_elapsed(self) -> timedelta:
        return self._previous_elapsed

    @property
    def current_elapsed(self) -> timedelta:
        with self._lock:
            if not self._is_running or self._start_time is None:
                return timedelta()
            return max(self._clock() - self._start_time, timedelta())

    @property
    def total_elapsed(self) -> timedelta:
        with self._lock:
            return self._previous_elapsed + self.current_elapsed

    @property
    def time_elapsed(self) -> str:
        """Total elapsed as HH:MM:SS."""
        return format_hms(self.total_elapsed)

    def elapsed_periods(self, period: float = DEFAULT_PERIOD_SECONDS) -> float:
        """Total elapsed in units of ``period`` seconds (progress ring fraction)."""
        return self.total_elapsed.total_seconds() / period

    @property
    def ticking(self) -> bool:
        return self._ticker is not None and self._ticker.alive

    # ---- transitions ----

    def start(self) -> None:
        """Start or resume timing. Ignored while already running or after finish."""
        with self._lock:
            if self._finished:
                logger.warning("Stopwatch.start() ignored: stopwatch already finished")
                return
            if self._is_running:
                logger.warning("Stopwatch.start() ignored: already running")
                return
            self._start_time = self._clock()
            self._is_running = True
            self._has_started = True
            self._start_ticker()

    def stop(self) -> None:
        """Pause timing and record the interval since the last start."""
        ticker = None
        try:
            with self._lock:
                ticker = self._detach_ticker()
                self._record_stop()
        except InvariantViolation as e:
            logger.warning(f"Stopwatch.stop() absorbed: {e}")
        finally:
            _join(ticker)

    def _record_stop(self) -> None:
        if not self._is_running or self._start_time is None:
            raise InvariantViolation("stop() called while not running")
        now = self._clock()
        if now < self._start_time:
            # Clock went backwards; record an empty interval rather than a negative one
            now = self._start_time
        interval = Interval(start=self._start_time, end=now)
        self._intervals.append(interval)
        self._previous_elapsed += interval.duration
        self._start_time = None
        self._is_running = False

    def reset(self) -> None:
        """Return to idle, discarding every recorded interval."""
        with self._lock:
            ticker = self._detach_ticker()
            self._intervals = []
            self._previous_elapsed = timedelta()
            self._start_time = None
            self._is_running = False
            self._has_started = False
            self._finished = False
        _join(ticker)

    def finish(
        self,
        task_id: str,
        completion_date: date | datetime,
        session: Session | None = None,
    ) -> Session | None:
        """Stop and produce the session to persist.

        With ``session`` given, its intervals are replaced by this stopwatch's
        intervals (which began as that session's intervals). Otherwise a new
        session is built. Returns None if timing never started.
        """
        ticker = None
        try:
            with self._lock:
                ticker = self._detach_ticker()
                if self._is_running:
                    self._record_stop()
                if not self._has_started or not self._intervals:
                    logger.warning("Stopwatch.finish() ignored: nothing was timed")
                    return None
                self._finished = True
                if session is not None:
                    session.intervals = list(self._intervals)
                    return session
                return Session(
                    task_id=task_id,
                    completion_date=as_datetime(completion_date),
                    intervals=list(self._intervals),
                )
        finally:
            _join(ticker)

    def close(self) -> None:
        """Release the ticker. State is kept; a running stopwatch keeps its start time."""
        with self._lock:
            ticker = self._detach_ticker()
        _join(ticker)

    # ---- manual entry ----

    @staticmethod
    def manual_interval(start: datetime, end: datetime) -> Interval | None:
        """Interval from two times of day, truncated to the minute.

        Returns None when both truncate to the same minute.
        """
        start_minute = without_seconds(start)
        end_minute = without_seconds(end)
        if start_minute == end_minute:
            return None
        return Interval(start=start_minute, end=end_minute)

    # ---- ticker ----

    def _start_ticker(self) -> None:
        if self._tick_interval is None:
            return
        self._ticker = _Ticker(self, self._tick_interval)
        self._ticker.start()
        logger.debug("Stopwatch ticker started")

    def _detach_ticker(self) -> _Ticker | None:
        """Cancel the ticker under the lock; the caller joins it after releasing the lock."""
        ticker, self._ticker = self._ticker, None
        if ticker is not None:
            ticker.cancel()
            logger.debug("Stopwatch ticker cancelled")
        return ticker

    def _tick(self) -> None:
        with self._lock:
            callback = self.on_tick
            if callback is None or not self._is_running:
                return
            total = self.total_elapsed
        callback(total)

    # ---- resource protocol ----

    def __enter__(self) -> Stopwatch:
        self.start()
        return self

    def __exit__(self, exc_type: type | None, exc_val: Exception | None, exc_tb: Any | None) -> bool:
        if self._is_running:
            self.stop()
        self.close()
        return False

    def __del__(self) -> None:
        ticker = getattr(self, "_ticker", None)
        if ticker is not None:
            ticker.cancel()

    def __repr__(self) -> str:
        return (
            f"Stopwatch(state={self.state.value}, total={self.time_elapsed}, "
            f"intervals={len(self._intervals)})"
        )


def _join(ticker: _Ticker | None) -> None:
    if ticker is not None:
        ticker.join()
