from __future__ import annotations

import logging
import threading
from typing import Callable, Optional

from .model import Location

logger = logging.getLogger(__name__)


class LocationPoller:
    """Periodically pushes the latest stored location of one bus to a callback.

    This simulates a subscription by polling: the callback may see the same
    location more than once, and it keeps running until ``cancel()`` is called.
    """

    def __init__(
        self,
        fetch: Callable[[], Optional[Location]],
        callback: Callable[[Location], None],
        *,
        interval: float,
        name: str = "location-poller",
    ):
        if interval <= 0:
            raise ValueError("interval must be positive")
        self._fetch = fetch
        self._callback = callback
        self._interval = float(interval)
        self._stopped = threading.Event()
        self._thread = threading.Thread(target=self._run, name=name, daemon=True)

    def start(self) -> "LocationPoller":
        self._thread.start()
        return self

    def cancel(self) -> None:
        self._stopped.set()

    def join(self, timeout: Optional[float] = None) -> None:
        self._thread.join(timeout)

    @property
    def running(self) -> bool:
        return self._thread.is_alive() and not self._stopped.is_set()

    def _run(self) -> None:
        while not self._stopped.wait(self._interval):
            location = self._fetch()
            if location is None:
                continue
            try:
                self._callback(location)
            except Exception:
                logger.exception("location callback failed for bus %s", location.bus_id)
