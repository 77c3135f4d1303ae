from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from ..core.enums import BookingStatus

Number = Union[int, float]


@dataclass(frozen=True)
class Booking:
    id: str
    user_id: str
    bus_id: str
    bus_number: str
    fare: Number
    from_stop: str
    to_stop: str
    booking_date: str
    status: BookingStatus = BookingStatus.ACTIVE
    cancelled_at: Optional[str] = None
    version: int = 0

    @property
    def is_cancelled(self) -> bool:
        return self.status == BookingStatus.CANCELLED

    def to_record(self) -> dict:
        return {
            "id": self.id,
            "userId": self.user_id,
            "busId": self.bus_id,
            "busNumber": self.bus_number,
            "fare": self.fare,
            "from": self.from_stop,
            "to": self.to_stop,
            "status": self.status.value,
            "bookingDate": self.booking_date,
            "cancelledAt": self.cancelled_at,
        }

    @classmethod
    def from_record(cls, data: dict, *, version: int = 0) -> "Booking":
        return cls(
            id=str(data["id"]),
            user_id=str(data.get("userId") or ""),
            bus_id=str(data.get("busId") or ""),
            bus_number=data.get("busNumber") or "",
            fare=data.get("fare") or 0,
            from_stop=data.get("from") or "",
            to_stop=data.get("to") or "",
            status=BookingStatus(data.get("status") or BookingStatus.ACTIVE.value),
            booking_date=data.get("bookingDate") or "",
            cancelled_at=data.get("cancelledAt"),
            version=version,
        )
