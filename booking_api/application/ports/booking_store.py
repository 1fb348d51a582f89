from abc import ABC, abstractmethod

from booking_api.domain.entities.audit import AuditLogEntry
from booking_api.domain.entities.booking import Booking


class BookingStorePort(ABC):
    @abstractmethod
    def insert_booking(self, booking: Booking) -> Booking:
        """Persist a new booking and return it with timestamps filled in."""
        raise NotImplementedError

    @abstractmethod
    def list_bookings(self) -> list[Booking]:
        raise NotImplementedError

    @abstractmethod
    def count_bookings(self) -> int:
        raise NotImplementedError

    @abstractmethod
    def append_audit(self, entry: AuditLogEntry) -> None:
        raise NotImplementedError

    @abstractmethod
    def list_audit_entries(self, limit: int = 100) -> list[AuditLogEntry]:
        raise NotImplementedError
