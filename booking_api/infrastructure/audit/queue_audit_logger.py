from __future__ import annotations

import json
import logging
import queue
import threading
import time
from datetime import datetime, timezone
from typing import Any

from booking_api.application.ports.audit_logger import AuditLoggerPort
from booking_api.application.ports.booking_store import BookingStorePort
from booking_api.domain.entities.audit import AuditEvent, AuditLogEntry

_STOP = object()


class QueueAuditLogger(AuditLoggerPort):
    """Fire-and-forget audit trail.

    `record` only enqueues; a daemon thread drains the queue into the store.
    When the queue is full the entry is dropped and a warning is logged, so
    a slow store can never hold up a request.
    """

    def __init__(self, store: BookingStorePort, max_size: int = 1000) -> None:
        self._store = store
        self._queue: queue.Queue[Any] = queue.Queue(maxsize=max_size)
        self._worker: threading.Thread | None = None
        self._lock = threading.Lock()
        self._logger = logging.getLogger(__name__)

    def start(self) -> None:
        with self._lock:
            if self._worker is not None and self._worker.is_alive():
                return
            self._worker = threading.Thread(target=self._run, name="audit-logger", daemon=True)
            self._worker.start()

    def record(self, correlation_id: str | None, event: AuditEvent, details: Any) -> None:
        try:
            payload = details if isinstance(details, str) else json.dumps(details, default=str)
            entry = AuditLogEntry(
                correlation_id=correlation_id,
                event=event,
                details=payload,
                created_at=datetime.now(timezone.utc),
            )
            self._queue.put_nowait(entry)
        except queue.Full:
            self._logger.warning("Audit queue full; entry dropped", extra={"event": event.value})
        except Exception as e:
            self._logger.error("Failed to queue audit entry", extra={"event": event.value, "error": str(e)})

    def flush(self, timeout: float | None = None) -> bool:
        """Wait until every queued entry has been handled. Returns False on timeout."""
        if self._worker is None or not self._worker.is_alive():
            self._drain()
            return True
        deadline = None if timeout is None else time.monotonic() + timeout
        with self._queue.all_tasks_done:
            while self._queue.unfinished_tasks:
                if deadline is None:
                    self._queue.all_tasks_done.wait()
                    continue
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    return False
                self._queue.all_tasks_done.wait(remaining)
        return True

    def close(self, timeout: float | None = 5.0) -> None:
        with self._lock:
            worker = self._worker
            self._worker = None
        if worker is None or not worker.is_alive():
            self._drain()
            return
        self._queue.put(_STOP)
        worker.join(timeout)

    def _run(self) -> None:
        while True:
            item = self._queue.get()
            try:
                if item is _STOP:
                    return
                self._write(item)
            finally:
                self._queue.task_done()

    def _drain(self) -> None:
        while True:
            try:
                item = self._queue.get_nowait()
            except queue.Empty:
                return
            try:
                if item is not _STOP:
                    self._write(item)
            finally:
                self._queue.task_done()

    def _write(self, entry: AuditLogEntry) -> None:
        try:
            self._store.append_audit(entry)
        except Exception as e:
            self._logger.error(
                "Failed to write audit log",
                extra={"event": entry.event.value, "error": str(e)},
            )
