"""
Seat counting for capacity-limited targets (events and volunteer roles).

A seat is taken with one conditional UPDATE that only increments while the
target is open and below its limit, so concurrent submitters can never push
the counter past the maximum.
"""
from sqlalchemy import or_
from sqlalchemy.orm import Session

from models.event import Event, REGISTRATION_OPEN_STATUSES
from models.volunteer import VolunteerOpportunity
from utils.errors import DependencyFailure
from utils.logger_factory import new_logger


class SeatCounter:
    def __init__(self, model, counter, limit, open_statuses, unlimited_when_zero: bool):
        self.model = model
        self.counter = counter
        self.limit = limit
        self.open_statuses = open_statuses
        self.unlimited_when_zero = unlimited_when_zero

    def _has_room(self):
        clauses = [self.limit.is_(None), self.counter < self.limit]
        if self.unlimited_when_zero:
            clauses.append(self.limit <= 0)
        return or_(*clauses)

    def reserve(self, db: Session, target_id: int) -> bool:
        """Take one seat. False when the target is closed, missing, or full."""
        log = new_logger("reserve_seat")
        try:
            updated = db.query(self.model).filter(
                self.model.id == target_id,
                self.model.status.in_(self.open_statuses),
                self._has_room(),
            ).update({self.counter: self.counter + 1}, synchronize_session=False)
            db.commit()
        except Exception:
            db.rollback()
            log.exception(f"Failed to reserve a seat on {self.model.__tablename__} {target_id}")
            raise DependencyFailure()
        log.info(f"Seat reservation on {self.model.__tablename__} {target_id}: {'ok' if updated else 'refused'}")
        return updated == 1

    def release(self, db: Session, target_id: int) -> None:
        """Give back a seat taken by ``reserve`` when the submission did not go through."""
        log = new_logger("release_seat")
        try:
            db.query(self.model).filter(
                self.model.id == target_id,
                self.counter > 0,
            ).update({self.counter: self.counter - 1}, synchronize_session=False)
            db.commit()
        except Exception:
            db.rollback()
            log.exception(f"Failed to release a seat on {self.model.__tablename__} {target_id}")
            raise DependencyFailure()
        log.warning(f"Released seat on {self.model.__tablename__} {target_id}")


event_seats = SeatCounter(
    Event,
    Event.current_registrations,
    Event.max_participants,
    REGISTRATION_OPEN_STATUSES,
    unlimited_when_zero=True,
)

volunteer_seats = SeatCounter(
    VolunteerOpportunity,
    VolunteerOpportunity.current_applications,
    VolunteerOpportunity.max_volunteers,
    ('open',),
    unlimited_when_zero=True,
)
