# app/services/hazard_store.py

from datetime import datetime, timedelta
from typing import Callable, List, Optional, Sequence, Tuple

from fastapi import Depends
from sqlalchemy import Numeric, cast, func, text
from sqlalchemy.orm import Session

from ..db import get_db
from ..errors import NotFound
from ..models.hazards import Hazard
from .geo import BoundingBox
from .retention import (
    DUPLICATE_TOLERANCE_DEG,
    DUPLICATE_WINDOW,
    active_cutoff,
    duplicate_cutoff,
    utcnow,
)
from .validation import HazardReport


def _offset(column, value):
    # Coordinates are stored with 8 decimals; rounding the difference there
    # keeps a move of exactly 0.001 from landing just under the tolerance.
    return func.round(cast(func.abs(column - value), Numeric(12, 8)), 8)


class HazardStore:
    """
    Query contracts over the hazards table.

    The session and clock are passed in, so each request works on its
    own session from the shared pool and tests can move time. Every
    write is a single statement followed by its own commit.
    SQLAlchemy errors propagate to the caller untouched.
    """

    def __init__(self, db: Session, clock: Callable[[], datetime] = utcnow):
        self.db = db
        self.clock = clock

    def now(self) -> datetime:
        return self.clock()

    # ------------------ writes ------------------

    def insert(self, report: HazardReport) -> Hazard:
        hazard = Hazard(
            type=report.type,
            latitude=report.latitude,
            longitude=report.longitude,
            reported_by=report.reported_by,
            timestamp=self.now(),
        )
        self.db.add(hazard)
        self.db.commit()
        self.db.refresh(hazard)
        return hazard

    def delete_by_id(self, hazard_id: int) -> int:
        deleted = (
            self.db.query(Hazard)
            .filter(Hazard.id == hazard_id)
            .delete(synchronize_session=False)
        )
        self.db.commit()
        if not deleted:
            raise NotFound()
        return hazard_id

    def delete_expired(self, cutoff: datetime) -> int:
        deleted = (
            self.db.query(Hazard)
            .filter(Hazard.timestamp <= cutoff)
            .delete(synchronize_session=False)
        )
        self.db.commit()
        return deleted

    # ------------------ reads ------------------

    def query_active_in_box(
        self,
        box: BoundingBox,
        now: Optional[datetime] = None,
    ) -> List[Hazard]:
        """
        Active hazards inside the box, most recent first.
        """
        cutoff = active_cutoff(now or self.now())
        q = (
            self.db.query(Hazard)
            .filter(Hazard.timestamp > cutoff)
            .filter(Hazard.latitude.between(box.lat_min, box.lat_max))
            .filter(Hazard.longitude.between(box.lng_min, box.lng_max))
            .order_by(Hazard.timestamp.desc(), Hazard.id.desc())
        )
        return q.all()

    def query_duplicates(
        self,
        hazard_type: str,
        latitude: float,
        longitude: float,
        window: timedelta = DUPLICATE_WINDOW,
        tolerance: float = DUPLICATE_TOLERANCE_DEG,
    ) -> List[int]:
        """
        Ids of same-type hazards reported within `window` whose latitude
        and longitude are each strictly closer than `tolerance` degrees.
        """
        since = duplicate_cutoff(self.now(), window)
        rows = (
            self.db.query(Hazard.id)
            .filter(
                Hazard.type == hazard_type,
                Hazard.timestamp > since,
                _offset(Hazard.latitude, latitude) < tolerance,
                _offset(Hazard.longitude, longitude) < tolerance,
            )
            .all()
        )
        return [row[0] for row in rows]

    def count_expired(self, cutoff: datetime) -> int:
        return (
            self.db.query(func.count(Hazard.id))
            .filter(Hazard.timestamp <= cutoff)
            .scalar()
        )

    def count_and_group_active(self) -> Tuple[int, Sequence[Tuple[str, int]]]:
        cutoff = active_cutoff(self.now())

        total = (
            self.db.query(func.count(Hazard.id))
            .filter(Hazard.timestamp > cutoff)
            .scalar()
        )

        by_type = (
            self.db.query(Hazard.type, func.count(Hazard.id))
            .filter(Hazard.timestamp > cutoff)
            .group_by(Hazard.type)
            .order_by(func.count(Hazard.id).desc(), Hazard.type)
            .all()
        )

        return int(total or 0), [(t, int(c)) for t, c in by_type]

    def ping(self) -> None:
        self.db.execute(text("SELECT 1"))


# Dependencies

def get_clock() -> Callable[[], datetime]:
    return utcnow


def get_store(
    db: Session = Depends(get_db),
    clock: Callable[[], datetime] = Depends(get_clock),
) -> HazardStore:
    return HazardStore(db, clock)
