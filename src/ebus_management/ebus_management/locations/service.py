from __future__ import annotations

import logging
import random
from datetime import datetime
from typing import Any, Callable, Mapping, Optional, Sequence

from ..common.datetime_utils import epoch_millis, now_utc, to_iso
from ..core.constants import (
    DEFAULT_LOCATION_HISTORY_LIMIT,
    DEFAULT_LOCATION_POLL_SECONDS,
    DEMO_BUS_PREFIX,
    DEMO_LOCATION_JITTER,
)
from ..core.exceptions import ValidationError
from .model import Location
from .poller import LocationPoller
from .repository import LocationRepository

logger = logging.getLogger(__name__)

# (latitude, longitude, address) used when a bus has never reported a position.
DEMO_LOCATIONS = (
    (12.9716, 77.5946, "Silk Board Junction, Bangalore"),
    (12.9352, 77.6245, "Koramangala, Bangalore"),
    (12.9698, 77.7500, "Whitefield, Bangalore"),
    (12.8406, 77.6602, "Electronic City, Bangalore"),
    (13.0827, 80.2707, "Chennai Central"),
    (12.2958, 76.6394, "Mysore Palace"),
)



def _coordinate(value: Any, low: float, high: float) -> float:
    if value is None or isinstance(value, bool) or value == "":
        raise ValidationError("Invalid location coordinates")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError("Invalid location coordinates")
    if not (low <= number <= high):
        raise ValidationError("Invalid location coordinates")
    return number


def demo_slot(bus_id: str) -> int:
    """Stable index into DEMO_LOCATIONS: the last digit of the bus id, else its character sum."""
    bus_id = bus_id or ""
    seed = int(bus_id[-1]) if bus_id[-1:].isdecimal() else sum(ord(ch) for ch in bus_id)
    return seed % len(DEMO_LOCATIONS)


class LocationService:
    def __init__(
        self,
        locations: LocationRepository,
        *,
        poll_interval: float = DEFAULT_LOCATION_POLL_SECONDS,
        clock: Callable[[], datetime] = now_utc,
        rng: Optional[random.Random] = None,
    ):
        self._locations = locations
        self._poll_interval = float(poll_interval)
        self._clock = clock
        self._rng = rng or random.Random()

    def record(self, *, bus_id: str, driver_id: str, location_data: Mapping[str, Any]) -> Location:
        """Validate and overwrite the single current location of ``bus_id``."""
        latitude = _coordinate(location_data.get("latitude"), -90.0, 90.0)
        longitude = _coordinate(location_data.get("longitude"), -180.0, 180.0)

        now = self._clock()
        previous = self._locations.get_for_bus(bus_id)
        location = Location(
            bus_id=bus_id,
            driver_id=driver_id,
            latitude=latitude,
            longitude=longitude,
            address=(location_data.get("address") or None),
            manual=bool(location_data.get("manual", False)),
            last_updated=to_iso(now),
            timestamp=epoch_millis(now),
            version=previous.version if previous else 0,
        )
        return self._locations.save(location)

    def current(self, bus_id: str) -> Optional[Location]:
        return self._locations.get_for_bus(bus_id)

    def history(self, bus_id: str, *, limit: int = DEFAULT_LOCATION_HISTORY_LIMIT) -> Sequence[Location]:
        """Only the current location is retained, so history has at most one entry."""
        location = self._locations.get_for_bus(bus_id)
        if not location or limit <= 0:
            return []
        return [location]

    def locate(self, bus_id: str) -> Location:
        """Stored location, or a demo position for demo/unreported buses."""
        if not bus_id.startswith(DEMO_BUS_PREFIX):
            location = self._locations.get_for_bus(bus_id)
            if location:
                return location
        return self.demo_location(bus_id)

    def demo_location(self, bus_id: str) -> Location:
        latitude, longitude, address = DEMO_LOCATIONS[demo_slot(bus_id)]

        def jitter() -> float:
            return (self._rng.random() - 0.5) * DEMO_LOCATION_JITTER

        return Location(
            bus_id=bus_id,
            latitude=latitude + jitter(),
            longitude=longitude + jitter(),
            address=address,
            last_updated=to_iso(self._clock()),
        )

    def watch(
        self,
        bus_id: str,
        callback: Callable[[Location], None],
        *,
        interval: Optional[float] = None,
    ) -> LocationPoller:
        interval = interval if interval is not None else self._poll_interval
        poller = LocationPoller(
            lambda: self._locations.get_for_bus(bus_id),
            callback,
            interval=interval,
            name=f"location-poller-{bus_id}",
        )
        logger.info("polling location of bus %s every %ss", bus_id, interval)
        return poller.start()
