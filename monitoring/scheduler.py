"""
Periodic Timer

Calls a function at a fixed interval on a background thread. The next run
is only scheduled after the current one returns, so runs never overlap.
stop() suspends the chain completely; start() re-arms it.
"""

import logging
import threading

logger = logging.getLogger(__name__)


class PeriodicTimer:
    def __init__(self, interval, callback, name="scrape-timer"):
        self.interval = interval
        self.callback = callback
        self.name = name
        self._lock = threading.Lock()
        self._timer = None
        self._active = False
        # Bumped on every start/stop so callbacks from an old chain do not reschedule
        self._generation = 0

    @property
    def is_active(self):
        return self._active

    def start(self, initial_delay=None):
        """Arm the timer. The first run happens after initial_delay (default: interval)."""
        with self._lock:
            self._cancel_pending()
            self._active = True
            self._generation += 1
            delay = self.interval if initial_delay is None else initial_delay
            self._schedule(delay, self._generation)
        logger.info(f"Timer '{self.name}' armed: every {self.interval}s, first run in {delay}s")

    def stop(self):
        """Cancel the pending run and prevent the running one from rescheduling."""
        with self._lock:
            self._active = False
            self._generation += 1
            self._cancel_pending()
        logger.info(f"Timer '{self.name}' stopped")

    def _cancel_pending(self):
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _schedule(self, delay, generation):
        timer = threading.Timer(delay, self._fire, args=(generation,))
        timer.daemon = True
        timer.name = self.name
        self._timer = timer
        timer.start()

    def _fire(self, generation):
        with self._lock:
            if not self._active or generation != self._generation:
                return
            self._timer = None

        try:
            self.callback()
        except Exception as e:
            logger.error(f"Timer '{self.name}' callback raised: {e}", exc_info=True)
        finally:
            with self._lock:
                if self._active and generation == self._generation:
                    self._schedule(self.interval, generation)
