# app/routers/hazards.py

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends
from sqlalchemy.exc import SQLAlchemyError

from ..errors import StoreUnavailable
from ..services import hazard_service
from ..services.hazard_store import HazardStore, get_store

log = logging.getLogger(__name__)

router = APIRouter()


def _store_failure(store: HazardStore, action: str, exc: SQLAlchemyError) -> StoreUnavailable:
    store.db.rollback()
    log.exception("[Hazards] Error trying to %s", action)
    return StoreUnavailable(action, str(exc))


@router.get("/hazards")
def list_hazards(
    lat: Optional[str] = None,
    lng: Optional[str] = None,
    radius: Optional[str] = None,
    store: HazardStore = Depends(get_store),
):
    """
    Active hazards (last 24 hours) inside the box of `radius` km
    (default 50) around lat/lng, most recent first.
    """
    try:
        radius_km, hazards = hazard_service.find_nearby(store, lat, lng, radius)
    except SQLAlchemyError as e:
        raise _store_failure(store, "fetch hazards", e)

    return {
        "count": len(hazards),
        "hazards": hazards,
        "radius_km": radius_km,
    }


@router.post("/hazards", status_code=201)
def report_hazard(
    payload: Optional[Dict[str, Any]] = Body(None),
    store: HazardStore = Depends(get_store),
):
    """
    Validate and store a new hazard report. Rejected with 409 when the
    same type was reported within ~100 m in the last 5 minutes.
    """
    try:
        hazard = hazard_service.report_hazard(store, payload or {})
    except SQLAlchemyError as e:
        raise _store_failure(store, "report hazard", e)

    return {
        "message": "Hazard reported successfully",
        "hazard": hazard_service.hazard_to_dict(hazard),
    }


@router.post("/hazards/cleanup")
def cleanup_hazards(store: HazardStore = Depends(get_store)):
    """
    Purge hazards older than 24 hours. Meant to be hit periodically by
    a scheduler / cron; safe to call repeatedly.
    """
    try:
        deleted = hazard_service.purge_expired(store)
    except SQLAlchemyError as e:
        raise _store_failure(store, "cleanup hazards", e)

    return {"message": "Cleanup completed", "deleted_count": deleted}


@router.delete("/hazards/{hazard_id}")
def delete_hazard(hazard_id: int, store: HazardStore = Depends(get_store)):
    """
    Moderation / user correction: remove a hazard regardless of age.
    """
    try:
        deleted_id = hazard_service.delete_hazard(store, hazard_id)
    except SQLAlchemyError as e:
        raise _store_failure(store, "delete hazard", e)

    return {"message": "Hazard deleted successfully", "id": deleted_id}


@router.get("/stats")
def stats(store: HazardStore = Depends(get_store)):
    try:
        return hazard_service.active_stats(store)
    except SQLAlchemyError as e:
        raise _store_failure(store, "fetch statistics", e)
