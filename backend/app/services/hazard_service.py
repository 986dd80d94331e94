# app/services/hazard_service.py

import logging
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Tuple

from ..errors import DuplicateReport
from ..models.hazards import Hazard
from .geo import bounding_box, parse_radius
from .hazard_store import HazardStore
from .retention import active_cutoff, age_minutes, as_utc
from .validation import HazardReport, validate_report

log = logging.getLogger(__name__)


def hazard_to_dict(hazard: Hazard, now: Optional[datetime] = None) -> Dict[str, Any]:
    """
    JSON shape of a hazard. Listing results pass `now` to include
    `age_minutes`.
    """
    item = {
        "id": hazard.id,
        "type": hazard.type,
        "latitude": hazard.latitude,
        "longitude": hazard.longitude,
        "timestamp": as_utc(hazard.timestamp).isoformat() if hazard.timestamp else None,
        "reported_by": hazard.reported_by,
    }
    if now is not None and hazard.timestamp is not None:
        item["age_minutes"] = round(age_minutes(hazard.timestamp, now), 2)
    return item


def check_duplicate(store: HazardStore, report: HazardReport) -> None:
    """
    Raise DuplicateReport if a hazard of the same type sits inside the
    duplicate window around this report.

    This is a plain read before the insert: two identical reports landing
    at the same moment can both get through. Accepted, since duplicates
    only clutter the map.
    """
    matches = store.query_duplicates(report.type, report.latitude, report.longitude)
    if matches:
        log.info(
            "[Hazards] Duplicate %s report at (%s, %s) matches ids %s",
            report.type,
            report.latitude,
            report.longitude,
            matches,
        )
        raise DuplicateReport()


def report_hazard(store: HazardStore, payload: Mapping[str, Any]) -> Hazard:
    report = validate_report(payload)
    check_duplicate(store, report)

    hazard = store.insert(report)
    log.info(
        "[Hazards] Stored hazard %s (%s) at (%s, %s) from %s",
        hazard.id,
        hazard.type,
        hazard.latitude,
        hazard.longitude,
        hazard.reported_by,
    )
    return hazard


def find_nearby(
    store: HazardStore,
    lat: Any,
    lng: Any,
    radius: Any = None,
) -> Tuple[float, List[Dict[str, Any]]]:
    """
    Active hazards inside the bounding box around (lat, lng), newest
    first, serialized with their age. Returns the radius actually used
    alongside them.
    """
    box = bounding_box(lat, lng, radius)
    now = store.now()
    hazards = store.query_active_in_box(box, now=now)
    return parse_radius(radius), [hazard_to_dict(h, now=now) for h in hazards]


def purge_expired(store: HazardStore, dry_run: bool = False) -> int:
    """
    Delete (or with dry_run, just count) hazards that fell out of the
    24-hour window.
    """
    cutoff = active_cutoff(store.now())
    if dry_run:
        return store.count_expired(cutoff)

    deleted = store.delete_expired(cutoff)
    log.info("[Hazards] Cleanup removed %s hazard(s) older than %s", deleted, cutoff.isoformat())
    return deleted


def delete_hazard(store: HazardStore, hazard_id: int) -> int:
    deleted_id = store.delete_by_id(hazard_id)
    log.info("[Hazards] Deleted hazard %s", deleted_id)
    return deleted_id


def active_stats(store: HazardStore) -> Dict[str, Any]:
    total, by_type = store.count_and_group_active()
    return {
        "total_active_hazards": total,
        "by_type": [{"type": t, "count": c} for t, c in by_type],
    }
