from __future__ import annotations

from datetime import date, time
from typing import Callable, Optional, Protocol, Sequence

from .model import AssociationDetail, CourseSectionRef, Event, EventWithAssociations, IssuedQr


class EventRepository(Protocol):
    def get_by_id(self, event_id: int) -> Optional[Event]:
        raise NotImplementedError

    def get_with_associations(self, event_id: int) -> Optional[EventWithAssociations]:
        raise NotImplementedError

    def list_with_associations(self) -> Sequence[EventWithAssociations]:
        raise NotImplementedError

    def list_associations(self, event_id: int) -> Sequence[AssociationDetail]:
        raise NotImplementedError

    def count_active(self) -> int:
        raise NotImplementedError

    def create(
        self,
        *,
        name: str,
        description: Optional[str],
        event_date: date,
        event_time: time,
        is_active: bool,
        course_sections: Sequence[CourseSectionRef],
        issue_qr: Callable[[int], IssuedQr],
    ) -> int:
        """Insert the event, its QR code and its associations in one transaction.

        `issue_qr` receives the new event id and returns the QR to store.
        """

        raise NotImplementedError

    def update(
        self,
        event_id: int,
        patch: dict,
        *,
        course_sections: Optional[Sequence[CourseSectionRef]] = None,
    ) -> bool:
        """Partial update (keys: name, description, event_date, event_time, is_active).

        When `course_sections` is given, the event's associations are replaced by
        it within the same transaction.
        """

        raise NotImplementedError

    def set_qr(self, event_id: int, qr: IssuedQr) -> bool:
        raise NotImplementedError

    def delete(self, event_id: int) -> bool:
        raise NotImplementedError
