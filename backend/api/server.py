"""
api/server.py
-------------
FastAPI application entry point.

Run dev server:
    cd backend
    uvicorn api.server:app --reload --port 8000

Endpoints:
    GET  /v1/health
    POST /v1/itinerary/build
    POST /v1/itinerary/{trip_id}/edit
    GET  /v1/itinerary/{trip_id}
    POST /v1/itinerary/feasibility
    POST /v1/itinerary/diff
    POST /v1/evaluations/run
"""
from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import config
from api.routes import evaluations, health, itinerary

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title="Itinerary Engine API",
    version="1.0.0",
    description=(
        "Deterministic itinerary scheduling and editing engine. "
        "Builds time-blocked day plans from OpenStreetMap POIs and applies "
        "targeted, verified edits."
    ),
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router,       prefix="/v1",             tags=["Health"])
app.include_router(itinerary.router,    prefix="/v1/itinerary",   tags=["Itinerary"])
app.include_router(evaluations.router,  prefix="/v1/evaluations", tags=["Evaluations"])


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("api.server:app", host=config.API_HOST, port=config.API_PORT, reload=config.API_RELOAD)
