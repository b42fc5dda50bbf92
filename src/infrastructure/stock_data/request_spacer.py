"""
Process-wide spacing of outbound market-data requests.

The free Alpha Vantage tier rejects bursts, so every provider call takes a
lease from the shared spacer first. The spacer is the single owner of the
"time of last outbound request"; it is created at import time and lives for
the lifetime of the process.
"""

import threading
import time
from contextlib import contextmanager
from typing import Callable, Iterator, Optional

DEFAULT_MIN_INTERVAL_SECONDS = 1.1


class RequestSpacer:
    """Serializes lease grants so consecutive grants are >= min_interval apart."""

    def __init__(
        self,
        min_interval: float = DEFAULT_MIN_INTERVAL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.min_interval = min_interval
        self._clock = clock
        self._sleep = sleep
        self._lock = threading.Lock()
        self._last_request: Optional[float] = None

    @contextmanager
    def lease(self) -> Iterator[None]:
        """Block until the caller may issue a request, then yield."""
        with self._lock:
            if self._last_request is not None:
                wait = self.min_interval - (self._clock() - self._last_request)
                if wait > 0:
                    self._sleep(wait)
            self._last_request = self._clock()
        yield


market_data_spacer = RequestSpacer()
