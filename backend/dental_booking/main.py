import logging

from fastapi import FastAPI

from .config import settings
from .redis_client import redis_client
from .routers import appointments, catalog, slots

logging.basicConfig(level=getattr(logging, settings.log_level.upper(), logging.INFO))
logger = logging.getLogger(__name__)

app = FastAPI(title="Dental Booking API")

app.include_router(catalog.router)
app.include_router(slots.router)
app.include_router(appointments.router)


@app.get("/health")
def health():
    redis_ok = None
    if redis_client is not None:
        try:
            redis_ok = bool(redis_client.ping())
        except Exception as e:
            logger.warning(f"Redis ping failed: {e}")
            redis_ok = False
    return {"status": "ok", "redis": redis_ok}
