"""Threaded refresh loop that keeps a stop board in sync with the Transit API."""

from __future__ import annotations

from dataclasses import dataclass
import logging
import threading
import time
from typing import Callable

from stop_board.data.resolver import StopRecord
from stop_board.errors import StopBoardError
from stop_board.logic.aggregator import Schedule
from stop_board.service import StopBoardService, StopLookup

DEFAULT_POLL_INTERVAL_SECONDS = 30

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CycleResult:
    """Outcome of one resolve + aggregate cycle, before it is applied."""

    lookup: StopLookup | None
    error: str | None
    fetched_at: float


@dataclass(frozen=True)
class BoardState:
    """What the display currently shows for a stop."""

    stop: StopRecord | None
    schedule: Schedule | None
    error: str | None
    fetched_at: float
    generation: int


class RefreshController:
    """Re-run a stop lookup on a fixed interval for one display session.

    Every cycle is numbered when it is issued. A finished cycle is applied
    only while the session is attached and only if no newer cycle has been
    applied already, so late responses never overwrite fresher data.
    """

    def __init__(
        self,
        service: StopBoardService,
        stop_number: str,
        poll_interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS,
        on_update: Callable[[BoardState], None] | None = None,
    ) -> None:
        if not stop_number.strip():
            raise ValueError("stop_number must not be empty")
        self._service = service
        self._stop_number = stop_number.strip()
        self._poll_interval_seconds = poll_interval_seconds
        self._on_update = on_update
        self._latest: BoardState | None = None
        self._lock = threading.Lock()
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None
        self._issued = 0
        self._applied = 0
        self._detached = False

    def get_latest(self) -> BoardState | None:
        """Return the state last applied to the board, if any."""
        with self._lock:
            return self._latest

    def start(self) -> None:
        """Run a cycle now, then one every poll interval."""
        if self._thread and self._thread.is_alive():
            if not self._stop_event.is_set():
                return
            self._thread.join()
        with self._lock:
            self._detached = False
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run_loop, daemon=True)
        self._thread.start()

    def stop(self) -> None:
        """Detach the session: stop the timer and drop every in-flight result."""
        with self._lock:
            self._detached = True
            self._applied = max(self._applied, self._issued)
        self._stop_event.set()

    def trigger(self) -> threading.Thread:
        """Issue one cycle on a worker thread and return that thread."""
        generation = self._issue()
        worker = threading.Thread(target=self._run_cycle, args=(generation,), daemon=True)
        worker.start()
        return worker

    def _run_loop(self) -> None:
        while not self._stop_event.is_set():
            self.trigger()
            self._stop_event.wait(timeout=self._poll_interval_seconds)

    def _issue(self) -> int:
        with self._lock:
            self._issued += 1
            return self._issued

    def _run_cycle(self, generation: int) -> None:
        self._apply(generation, self._fetch_once())

    def _fetch_once(self) -> CycleResult:
        try:
            lookup = self._service.lookup(self._stop_number)
        except StopBoardError as exc:
            logger.warning("Refresh for stop %s failed: %s", self._stop_number, exc)
            return CycleResult(lookup=None, error=str(exc), fetched_at=time.time())
        except Exception as exc:
            logger.exception("Refresh for stop %s raised", self._stop_number)
            return CycleResult(lookup=None, error=str(exc) or type(exc).__name__, fetched_at=time.time())
        return CycleResult(lookup=lookup, error=None, fetched_at=time.time())

    def _apply(self, generation: int, result: CycleResult) -> bool:
        with self._lock:
            if self._detached or generation <= self._applied:
                logger.debug(
                    "Discarding stale cycle %d (last applied %d, detached=%s)",
                    generation,
                    self._applied,
                    self._detached,
                )
                return False
            self._applied = generation

            if result.lookup is not None:
                state = BoardState(
                    stop=result.lookup.stop,
                    schedule=result.lookup.schedule,
                    error=None,
                    fetched_at=result.fetched_at,
                    generation=generation,
                )
            else:
                previous = self._latest
                state = BoardState(
                    stop=previous.stop if previous else None,
                    schedule=previous.schedule if previous else None,
                    error=result.error,
                    fetched_at=result.fetched_at,
                    generation=generation,
                )
            self._latest = state
            if self._on_update is not None:
                self._on_update(state)
            return True


__all__ = ["BoardState", "CycleResult", "RefreshController", "DEFAULT_POLL_INTERVAL_SECONDS"]
