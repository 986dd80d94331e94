import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import CORS_ORIGINS, DATABASE_URL, ENVIRONMENT, LOG_LEVEL, PORT, SERVICE_NAME, SERVICE_VERSION
from .db import engine, init_db
from .errors import HazardError
from .routers import hazards as hazards_router
from .routers import meta as meta_router

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s: %(name)s - %(message)s")
log = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # No schema, no service: a failure here stops startup
    try:
        init_db()
    except Exception:
        log.exception("[Startup] Database initialization failed")
        raise
    log.info("[Startup] Database initialized (%s)", engine.url.get_backend_name())
    log.info("[Startup] Environment: %s", ENVIRONMENT)

    yield

    log.info("[Shutdown] Closing database connections")
    engine.dispose()


app = FastAPI(title=SERVICE_NAME, version=SERVICE_VERSION, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(HazardError)
async def hazard_error_handler(request: Request, exc: HazardError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    log.exception("[Server] Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error", "message": str(exc)},
    )


app.include_router(meta_router.router, tags=["meta"])
app.include_router(hazards_router.router, prefix="/api", tags=["hazards"])


if __name__ == "__main__":
    import uvicorn

    log.info("[Startup] Hazard server on port %s, database %s", PORT, "configured" if DATABASE_URL else "not configured")
    uvicorn.run("app.main:app", host="0.0.0.0", port=PORT)
