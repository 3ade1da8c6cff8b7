from app.core.config import FRONTEND_URL

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from app.core.logging import configure_logging
from app.api import system
from app.api import players
from app.api import stats
from app.api import dashboard
from app.api.stats_utils.init_workers import (
    initialize_stats_workers,
    shutdown_stats_workers,
)

configure_logging()


app = FastAPI(
    title="PUBG Tracker API",
    description="""
    API for the PUBG tracker.
    Tracks players, pulls their recent matches from the PUBG API
    and serves cached per-period performance summaries.
    """,
    version="1.0.0",
    contact={
        "name": "PUBG Tracker Dev Team",
    },
    license_info={
        "name": "MIT",
    },
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[FRONTEND_URL, "http://127.0.0.1:3000", "http://localhost:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["Content-Type"],
)


@app.on_event("startup")
async def on_startup():
    await initialize_stats_workers()


@app.on_event("shutdown")
async def on_shutdown():
    await shutdown_stats_workers()


app.include_router(system.router, prefix="/api", tags=["System"])
app.include_router(players.router, prefix="/api/players", tags=["Players"])
app.include_router(stats.router, prefix="/api/stats", tags=["Statistics"])
app.include_router(dashboard.router, prefix="/api/dashboard", tags=["Dashboard"])


@app.get("/")
async def root():
    return {"message": "PUBG Tracker API is running"}
