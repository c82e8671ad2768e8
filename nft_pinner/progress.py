"""
Heartbeat logging for long running operations.
"""

import time
import logging
import threading

from .config import PROGRESS_INTERVAL_SECONDS


class ProgressTracker:
    """Logs the elapsed time periodically until stopped. Purely observational."""

    def __init__(self, logger=None, interval=PROGRESS_INTERVAL_SECONDS):
        self.logger = logger or logging.getLogger(__name__)
        self.interval = interval
        self.start_time = time.monotonic()
        self._stop_event = threading.Event()
        self._thread = None

    def start(self, message):
        self.logger.info(message)
        self.start_time = time.monotonic()
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._heartbeat, name="progress-heartbeat", daemon=True)
        self._thread.start()
        return self

    def _heartbeat(self):
        while not self._stop_event.wait(self.interval):
            self.logger.info(f"⏳ In progress... {self.elapsed_seconds()} s elapsed")

    def stop(self):
        if self._thread is None:
            return
        self._stop_event.set()
        self._thread.join(timeout=1)
        self._thread = None
        self.logger.info(f"✅ Done! Total time: {self.elapsed_seconds()} s")

    def elapsed_seconds(self):
        return int(time.monotonic() - self.start_time)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.stop()
        return False
