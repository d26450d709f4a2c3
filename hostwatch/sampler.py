"""Background producer that samples the host and feeds the snapshot store."""
import logging
import threading
from typing import Callable, Optional

from .collector import collect_snapshot, now_ms, prime_cpu_percent
from .snapshot import Snapshot, encode_snapshot
from .snapshot_store import SnapshotStore

logger = logging.getLogger(__name__)

FAILURE_ALERT_THRESHOLD = 3
CPU_PRIME_DELAY = 1.0


class SnapshotSampler:
    """Run collect -> encode -> append on a fixed interval in a daemon thread.

    The interval is slept after each cycle finishes, so the observed period is
    ``interval`` plus the time the cycle itself took.
    """

    def __init__(
        self,
        store: SnapshotStore,
        provider: Callable[[int], Snapshot] = collect_snapshot,
        interval: float = 60.0,
        clock: Callable[[], int] = now_ms,
    ):
        interval = float(interval)
        if interval <= 0:
            raise ValueError("interval must be positive")
        self.store = store
        self.provider = provider
        self.interval = interval
        self.clock = clock
        self.cycles = 0
        self.failures = 0
        self.consecutive_failures = 0
        self.dropped = 0
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def run_once(self) -> bool:
        """Run a single sampling cycle. Returns True if a snapshot was stored."""
        self.cycles += 1
        ts = self.clock()
        try:
            payload = encode_snapshot(self.provider(ts))
        except Exception:
            self._record_failure()
            return False

        if self.consecutive_failures:
            logger.info(
                f"Sampling recovered after {self.consecutive_failures} failed cycle(s)"
            )
            self.consecutive_failures = 0

        if not self.store.append(ts, payload):
            self.dropped += 1
            logger.debug(f"Dropped snapshot at {ts}: timestamp did not advance")
            return False
        return True

    def _record_failure(self) -> None:
        self.failures += 1
        self.consecutive_failures += 1
        logger.warning("Error when sampling system stats", exc_info=True)
        if self.consecutive_failures == FAILURE_ALERT_THRESHOLD:
            logger.error(
                f"Sampling failed {FAILURE_ALERT_THRESHOLD} times in a row; will keep retrying"
            )

    def _run(self, stop_event: threading.Event) -> None:
        try:
            prime_cpu_percent()
        except Exception:
            logger.exception("Failed to prime CPU usage baseline")
        # Give the CPU baseline a real window before the first measurement
        if stop_event.wait(min(CPU_PRIME_DELAY, self.interval)):
            return
        while not stop_event.is_set():
            self.run_once()
            stop_event.wait(self.interval)

    def start(self) -> None:
        # A thread that outlived a timed-out stop() still owns the store
        if self.is_running:
            return
        # Each run gets its own event so an old loop can never be revived
        self._stop_event = threading.Event()
        self._thread = threading.Thread(
            target=self._run,
            args=(self._stop_event,),
            daemon=True,
            name="hostwatch-sampler",
        )
        self._thread.start()
        logger.info(f"Started snapshot sampler (interval={self.interval}s)")

    def stop(self, timeout: Optional[float] = None) -> bool:
        """Signal the loop to exit. Returns False if the thread is still alive after ``timeout``."""
        if self._thread is None:
            return True
        self._stop_event.set()
        self._thread.join(timeout=timeout)
        if self._thread.is_alive():
            logger.warning("Snapshot sampler did not stop within the timeout")
            return False
        self._thread = None
        return True

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()
