import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI

from jobs_api.config import settings
from jobs_api.database import init_db
from jobs_api.routers import geonames, position_openings, search

logger = logging.getLogger("jobs_api")


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info("Serving index %s from %s", settings.index_name, settings.elasticsearch_url)
    yield


app = FastAPI(
    title="Jobs API",
    description="Search and ingestion front end for the position openings index",
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(search.router, prefix=settings.api_prefix)
app.include_router(position_openings.router, prefix=settings.api_prefix)
app.include_router(geonames.router, prefix=settings.api_prefix)


@app.get("/health")
async def health():
    return {"status": "ok", "version": "0.1.0"}
