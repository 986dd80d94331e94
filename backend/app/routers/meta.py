from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from ..config import SERVICE_NAME, SERVICE_VERSION
from ..services.hazard_store import HazardStore, get_store

router = APIRouter()


@router.get("/")
def root():
    return {
        "status": "online",
        "service": SERVICE_NAME,
        "version": SERVICE_VERSION,
    }


@router.get("/health")
def health(store: HazardStore = Depends(get_store)):
    """
    Database round trip; 500 when the database can't be reached.
    """
    try:
        store.ping()
    except SQLAlchemyError as e:
        return JSONResponse(
            status_code=500,
            content={"status": "unhealthy", "database": "disconnected", "error": str(e)},
        )
    return {"status": "healthy", "database": "connected"}
