import asyncio
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI

import redis.asyncio as redis
from fastapi_limiter import FastAPILimiter

from . import models
from .config import settings
from .database import engine, SessionLocal
from .outbox_poller import run_outbox_poller
from .routers import booking_router, facility_router, pricing_router
from .seed import seed_demo_facilities

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("sangraha")

# Alembic owns migrations; this only fills in a fresh database
models.Base.metadata.create_all(bind=engine)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manages application startup and shutdown events.
    """
    logger.info("Kisan Sangraha service starting up...")

    if settings.SEED_DEMO_DATA:
        db = SessionLocal()
        try:
            seed_demo_facilities(db)
        except Exception as e:
            logger.error(f"Failed to seed demo facilities: {e}")
        finally:
            db.close()

    redis_client = None
    if settings.REDIS_URL:
        try:
            redis_client = redis.from_url(settings.REDIS_URL, encoding="utf-8")
            await FastAPILimiter.init(redis_client)
            logger.info("FastAPILimiter initialized with Redis.")
        except Exception as e:
            logger.error(f"Failed to initialize FastAPILimiter: {e}")
    else:
        logger.info("REDIS_URL not set; rate limiting disabled.")

    poller_task = None
    if settings.OUTBOX_ENABLED:
        poller_task = asyncio.create_task(run_outbox_poller())

    yield  # The application is now running

    logger.info("Kisan Sangraha service shutting down...")

    if redis_client is not None:
        await redis_client.aclose()

    if poller_task is not None:
        poller_task.cancel()
        try:
            await poller_task
        except asyncio.CancelledError:
            logger.info("Outbox poller task successfully cancelled.")
        except Exception as e:
            logger.error(f"Error during outbox poller shutdown: {e}")


app = FastAPI(
    title="Kisan Sangraha API",
    description="Cold-storage facilities and capacity bookings for farmers.",
    version="1.0.0",
    lifespan=lifespan
)

app.include_router(facility_router.router)
app.include_router(booking_router.router)
app.include_router(pricing_router.router)


@app.get("/")
def read_root():
    return {"message": "Welcome to the Kisan Sangraha API"}
